"""
Minesweeper engine.

Orchestrates a Board, runs the game state machine, keeps counters and a
stopwatch, and notifies registered listeners of every state change.
"""
import logging
import random
from enum import Enum, auto
from typing import Callable, List, Optional, Union

from .board import Board, BoardConfig, Difficulty, OpenResult
from .events import EventDispatcher, GameEvent, GameEventListener
from .stopwatch import Stopwatch
from .tile import Tile

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

SEED_BITS = 63


class GameState(Enum):
    """Possible states of the game."""

    INIT = auto()
    PLAY = auto()
    PAUSE = auto()
    END = auto()


# ============================================================================
# Engine Class
# ============================================================================

class Minesweeper:
    """
    A Minesweeper game.

    The engine is driven by discrete method calls from a single caller.
    Invalid actions (out-of-range coordinates, actions while paused or
    after the game ended) are silent no-ops.

    Args:
        difficulty: Initial board setup. Defaults to beginner.
        seed_source: Random source used to draw a seed for every
            ``new_game()`` call without an explicit seed.
        clock: Time source for the stopwatch, in seconds.
    """

    def __init__(
        self,
        difficulty: Union[Difficulty, BoardConfig] = Difficulty.BEGINNER,
        *,
        seed_source: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._seed_source = seed_source or random.Random()
        self._rng = random.Random()
        self._stopwatch = Stopwatch(clock)
        self._events = EventDispatcher()
        self._state = GameState.INIT
        self._board: Board
        self._seed = 0
        self._cleared = 0
        self._clicks = 0
        self._actions = 0
        self._flags_used = 0
        self._restarted = False
        self._no_flagging = False
        self._losing_tile: Optional[Tile] = None
        self.set_difficulty(difficulty)

    # ========================================================================
    # Game Setup
    # ========================================================================

    def set_difficulty(
        self,
        difficulty: Union[Difficulty, BoardConfig, int],
        height: Optional[int] = None,
        mines: Optional[int] = None,
    ) -> None:
        """
        Set the board size and mine count, then start a new game.

        Accepts a ``Difficulty`` preset, a ``BoardConfig`` or a custom
        ``(width, height, mines)`` triple. Custom values are clamped:
        sides to [5, 64] and mines to [5, width * height - 10].
        """
        if isinstance(difficulty, Difficulty):
            config = difficulty.config
        elif isinstance(difficulty, BoardConfig):
            config = difficulty
        elif isinstance(difficulty, int):
            if height is None or mines is None:
                raise TypeError("Custom difficulty needs width, height and mines")
            config = BoardConfig.clamped(difficulty, height, mines)
        else:
            raise TypeError(f"Unsupported difficulty: {difficulty!r}")

        self._board = Board(config)
        logger.debug(
            "Difficulty set to %dx%d with %d mines",
            config.width, config.height, config.num_mines,
        )
        self._events.emit(GameEvent.DIFFICULTY_CHANGED, self)
        self.new_game()

    def new_game(self, seed: Optional[int] = None) -> None:
        """
        Lay new mines and reset all counters.

        Args:
            seed: Seed for mine placement. A fresh one is drawn from the
                seed source when omitted.
        """
        if seed is None:
            seed = self._seed_source.getrandbits(SEED_BITS)
        self._seed = seed
        self._rng.seed(seed)
        self._board.reset(self._rng)
        self._reset_counters(restarted=False)
        logger.debug("New game with seed %d", seed)
        self._events.emit(GameEvent.NEW_GAME, self)

    def restart_game(self) -> None:
        """Close every tile and reset counters, keeping the mine layout."""
        self._board.restart()
        self._reset_counters(restarted=True)
        logger.debug("Game restarted with seed %d", self._seed)
        self._events.emit(GameEvent.RESTART_GAME, self)

    def pause_game(self) -> None:
        """Pause a running game or resume a paused one."""
        if self._state is GameState.PLAY:
            self._set_state(GameState.PAUSE)
        elif self._state is GameState.PAUSE:
            self._set_state(GameState.PLAY)
        else:
            return
        self._events.emit(GameEvent.GAME_PAUSED, self)

    def set_no_flagging(self, no_flagging: bool) -> None:
        """Turn flag-free play on or off. Changing it starts a new game."""
        if self._no_flagging == no_flagging:
            return
        self._no_flagging = no_flagging
        self.new_game()

    def _reset_counters(self, restarted: bool) -> None:
        self._cleared = 0
        self._clicks = 0
        self._actions = 0
        self._flags_used = 0
        self._losing_tile = None
        self._restarted = restarted
        self._set_state(GameState.INIT)

    def _set_state(self, state: GameState) -> None:
        if self._state is state:
            return
        self._state = state
        if state is GameState.INIT:
            self._stopwatch.reset()
        elif state is GameState.PLAY:
            self._stopwatch.start()
        else:
            self._stopwatch.stop()

    # ========================================================================
    # Listeners
    # ========================================================================

    def add_listener(self, listener: GameEventListener) -> bool:
        """Register a listener. Listeners are called in registration order."""
        return self._events.add(listener)

    def remove_listener(self, listener: GameEventListener) -> bool:
        return self._events.remove(listener)

    # ========================================================================
    # Game Actions
    # ========================================================================

    def flag(self, x: int, y: int) -> bool:
        """
        Toggle the flag on a tile.

        Flags placed before the first open do not count as clicks.

        Returns:
            True if the flag was toggled.
        """
        if self._state in (GameState.END, GameState.PAUSE) or self._no_flagging:
            return False
        tile = self.get_tile(x, y)
        if tile is None:
            return False

        toggled = self._board.flag(tile.index)
        if self._state is GameState.PLAY:
            self._clicks += 1
            self._actions += 1 if toggled else 0
        if toggled:
            self._flags_used += 1 if tile.has_flag else -1
            self._events.emit(GameEvent.TILE_FLAGGED, self, tile)
        return toggled

    def open(self, x: int, y: int) -> OpenResult:
        """
        Open a tile. Tiles with no adjacent mines open their neighbors too.

        The first open of a new game moves any mine off the tile and its
        neighbors.

        Returns:
            Number of tiles opened and whether a mine was revealed.
        """
        return self._do_action(x, y, chord=False)

    def chord(self, x: int, y: int) -> OpenResult:
        """
        Open every neighbor of an open tile whose flags match its count.

        Returns:
            Number of tiles opened and whether a mine was revealed.
        """
        return self._do_action(x, y, chord=True)

    def _do_action(self, x: int, y: int, chord: bool) -> OpenResult:
        if self._state in (GameState.END, GameState.PAUSE):
            return OpenResult()
        tile = self.get_tile(x, y)
        if tile is None:
            return OpenResult()

        if self._state is GameState.INIT:
            if chord:
                return OpenResult()
            self._set_state(GameState.PLAY)
            if not self._restarted:
                moved = self._board.relocate_mines(tile.index, self._rng)
                if moved:
                    logger.debug("Relocated %d mines from first click", moved)

        if chord:
            result = self._board.chord(tile.index)
        else:
            result = self._board.open(tile.index)
        self._clicks += 1
        self._cleared += result.opened
        if result:
            self._actions += 1
            event = GameEvent.TILE_CHORDED if chord else GameEvent.TILE_OPENED
            self._events.emit(event, self, tile)

        if result.exploded:
            self._end_lost(tile)
        elif self._cleared == self._board.win_condition:
            self._end_won(tile)
        return result

    def _end_lost(self, tile: Tile) -> None:
        self._set_state(GameState.END)
        self._losing_tile = self._board.reveal_all()
        logger.info(
            "Game lost at (%d, %d) after %d clicks", tile.x, tile.y, self._clicks
        )
        self._events.emit(GameEvent.GAME_LOST, self, tile)

    def _end_won(self, tile: Tile) -> None:
        self._set_state(GameState.END)
        logger.info(
            "Game won in %.2fs with %d clicks", self.elapsed, self._clicks
        )
        self._events.emit(GameEvent.GAME_WON, self, tile)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def board(self) -> Board:
        return self._board

    @property
    def width(self) -> int:
        return self._board.width

    @property
    def height(self) -> int:
        return self._board.height

    @property
    def mine_count(self) -> int:
        return self._board.mine_count

    @property
    def game_state(self) -> GameState:
        return self._state

    @property
    def seed(self) -> int:
        """Seed used to lay the current mines."""
        return self._seed

    @property
    def cleared(self) -> int:
        """Number of mine-free tiles opened this game."""
        return self._cleared

    @property
    def clicks(self) -> int:
        return self._clicks

    @property
    def actions(self) -> int:
        """Number of clicks that changed the board."""
        return self._actions

    @property
    def flags_used(self) -> int:
        return self._flags_used

    @property
    def elapsed(self) -> float:
        """Playing time of the current game in seconds."""
        return self._stopwatch.elapsed

    @property
    def restarted(self) -> bool:
        return self._restarted

    @property
    def no_flagging(self) -> bool:
        return self._no_flagging

    @property
    def losing_tile(self) -> Optional[Tile]:
        """The opened mine that lost the game, or None."""
        return self._losing_tile

    @property
    def is_won(self) -> bool:
        """Check if the game is over and the player won."""
        return self._state is GameState.END and self._losing_tile is None

    @property
    def is_lost(self) -> bool:
        return self._losing_tile is not None

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        """Get tile at position, or None if the position is off the board."""
        return self._board.get_tile(x, y)

    def neighbors(self, tile: Tile) -> List[Tile]:
        return self._board.get_neighbors(tile)

    def count_openings(self) -> int:
        return self._board.count_openings()

    def count_3bv(self) -> int:
        return self._board.count_3bv()
