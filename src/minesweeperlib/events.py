"""
Game event types and synchronous listener dispatch.
"""
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, List, Optional

from .tile import Tile

if TYPE_CHECKING:
    from .engine import Minesweeper


class GameEvent(Enum):
    """Notifications sent to listeners after a state change."""

    NEW_GAME = auto()
    RESTART_GAME = auto()
    TILE_OPENED = auto()
    TILE_CHORDED = auto()
    TILE_FLAGGED = auto()
    GAME_PAUSED = auto()
    GAME_WON = auto()
    GAME_LOST = auto()
    DIFFICULTY_CHANGED = auto()


# Called as listener(event, engine, tile). The tile is only given for
# tile actions and for the final win/loss action.
GameEventListener = Callable[[GameEvent, "Minesweeper", Optional[Tile]], None]


class EventDispatcher:
    """
    Ordered fan-out of game events.

    Listeners are invoked synchronously in registration order. They must
    not call mutating engine methods while being notified.
    """

    def __init__(self) -> None:
        self._listeners: List[GameEventListener] = []

    def add(self, listener: GameEventListener) -> bool:
        self._listeners.append(listener)
        return True

    def remove(self, listener: GameEventListener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        if listener not in self._listeners:
            return False
        self._listeners.remove(listener)
        return True

    def emit(
        self,
        event: GameEvent,
        engine: "Minesweeper",
        tile: Optional[Tile] = None,
    ) -> None:
        for listener in list(self._listeners):
            listener(event, engine, tile)

    def __len__(self) -> int:
        return len(self._listeners)
