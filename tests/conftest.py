"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path
from typing import Iterable, List, Tuple

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeperlib import Board, BoardConfig, GameEvent, Minesweeper, Tile


# ============================================================================
# Mine Layouts
# ============================================================================

# A full column of mines at x=2 splits a 5x5 board into two openings.
WALL_MINES = [(2, y) for y in range(5)]

# Mines on the odd-odd tiles and the center: every safe tile is numbered.
CHECKER_MINES = [(1, 1), (3, 1), (1, 3), (3, 3), (2, 2)]

# 6x6 board: one opening of 6 tiles (row 0) and 4 numbered tiles in
# rows 3-4 that touch no opening.
SHORE_MINES = (
    [(x, 2) for x in range(6)]
    + [(x, 5) for x in range(6)]
    + [(1, 3), (2, 3), (3, 3), (4, 3), (0, 4), (1, 4), (4, 4), (5, 4)]
)


class FakeClock:
    """Manually advanced time source."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class EventRecorder:
    """Listener that records every event it receives."""

    def __init__(self) -> None:
        self.events: List[Tuple[GameEvent, Minesweeper, object]] = []

    def __call__(self, event, engine, tile) -> None:
        self.events.append((event, engine, tile))

    @property
    def kinds(self) -> List[GameEvent]:
        return [event for event, _, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


def rig(engine: Minesweeper, mines: Iterable[Tuple[int, int]]) -> Minesweeper:
    """Lay mines at fixed positions and restart so they stay put."""
    engine.board.set_mines(mines)
    engine.restart_game()
    return engine


def counts_consistent(board: Board) -> bool:
    """Check every tile's adjacent count against its neighbors."""
    for tile in board.tiles:
        expected = sum(1 for n in board.get_neighbors(tile) if n.is_mine)
        if tile.adjacent_mines != expected:
            return False
    return True


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def engine(clock: FakeClock) -> Minesweeper:
    """Create a beginner engine with a fixed seed source."""
    return Minesweeper(seed_source=random.Random(1234), clock=clock)


@pytest.fixture
def walled_engine(clock: FakeClock) -> Minesweeper:
    """5x5 engine with a column of mines at x=2."""
    engine = Minesweeper(
        BoardConfig(5, 5, 5), seed_source=random.Random(99), clock=clock
    )
    return rig(engine, WALL_MINES)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def small_board() -> Board:
    """Create an empty 5x5 board with no mines laid."""
    return Board(BoardConfig(5, 5, 5))


@pytest.fixture
def walled_board(small_board: Board) -> Board:
    small_board.set_mines(WALL_MINES)
    return small_board


# ============================================================================
# Tile Fixtures
# ============================================================================

@pytest.fixture
def hidden_tile() -> Tile:
    """Create a hidden tile."""
    return Tile(0, 0, 0)


@pytest.fixture
def mine_tile() -> Tile:
    """Create a tile containing a mine."""
    return Tile(0, 0, 0, is_mine=True)
