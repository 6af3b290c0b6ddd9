"""
Tile module for Minesweeper game.

Represents individual tiles on the game board with their state
(open/flagged) and content (mine/adjacent count).
"""
from dataclasses import dataclass, field
from typing import Tuple


# ============================================================================
# Observation Codes
# ============================================================================

HIDDEN = -1
FLAGGED = -2
REVEALED_MINE = 9


# ============================================================================
# Tile Data Class
# ============================================================================

@dataclass(eq=False)
class Tile:
    """
    Represents a single tile in the Minesweeper grid.

    Tiles never own each other. Neighbors are stored as indices into the
    board's flat tile list and are fixed for the lifetime of the board.

    Attributes:
        x: Column of the tile.
        y: Row of the tile.
        index: Position in the board's flat, row-major tile list.
        neighbors: Indices of the 3, 5 or 8 surrounding tiles.
        is_mine: Whether this tile contains a mine.
        is_open: Whether this tile has been revealed.
        has_flag: Whether the player flagged this tile.
        adjacent_mines: Count of mines in neighboring tiles (0-8).
    """

    x: int
    y: int
    index: int
    neighbors: Tuple[int, ...] = field(default=(), repr=False)
    is_mine: bool = False
    is_open: bool = False
    has_flag: bool = False
    adjacent_mines: int = 0

    def reset(self) -> None:
        """Clear all mine, open and flag data."""
        self.restart()
        self.is_mine = False
        self.adjacent_mines = 0

    def restart(self) -> None:
        """Clear open and flag data, keeping the mine layout."""
        self.is_open = False
        self.has_flag = False

    def reveal(self) -> bool:
        """
        Mark this tile open.

        Returns:
            True if the tile was opened, False if it was already open
            or carries a flag.
        """
        if self.is_open or self.has_flag:
            return False
        self.is_open = True
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle the flag on this tile.

        Returns:
            True if the flag was toggled, False if the tile is open.
        """
        if self.is_open:
            return False
        self.has_flag = not self.has_flag
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if tile is neither open nor flagged."""
        return not self.is_open and not self.has_flag

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    def to_observation(self) -> int:
        """
        Convert tile to an observation value.

        Returns:
            -1: Hidden tile
            -2: Flagged tile
            0-8: Open tile with adjacent mine count
            9: Open mine (game over state)
        """
        if self.is_open:
            return REVEALED_MINE if self.is_mine else self.adjacent_mines
        if self.has_flag:
            return FLAGGED
        return HIDDEN
