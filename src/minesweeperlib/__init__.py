"""
Minesweeper game engine.

Provides board management, tile state, the game state machine and
event notification for observers.
"""
from .tile import Tile
from .board import (
    Board,
    BoardConfig,
    Difficulty,
    OpenResult,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
)
from .events import EventDispatcher, GameEvent, GameEventListener
from .stopwatch import Stopwatch
from .engine import GameState, Minesweeper
from .environment import MinesweeperEnv

__all__ = [
    "Tile",
    "Board",
    "BoardConfig",
    "Difficulty",
    "OpenResult",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "EventDispatcher",
    "GameEvent",
    "GameEventListener",
    "Stopwatch",
    "GameState",
    "Minesweeper",
    "MinesweeperEnv",
]
