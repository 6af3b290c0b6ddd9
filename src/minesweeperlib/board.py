"""
Board module for Minesweeper game.

Implements the tile grid with mine placement, first-click relocation,
flood-fill opening, chording and board-wide statistics.
"""
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Iterable, List, Optional, Tuple

import numpy as np

from .tile import Tile


# ============================================================================
# Constants
# ============================================================================

MIN_SIZE = 5
MAX_SIZE = 64
MIN_MINES = 5
# Tiles that must stay mine-free: the first click and its 8 neighbors, plus one.
SAFE_TILES = 10


def _clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        for name, value in (("width", self.width), ("height", self.height)):
            if not MIN_SIZE <= value <= MAX_SIZE:
                raise ValueError(
                    f"Board {name} must be between {MIN_SIZE} and {MAX_SIZE}, "
                    f"got {value}"
                )
        max_mines = self.width * self.height - SAFE_TILES
        if self.num_mines < MIN_MINES:
            raise ValueError(f"Too few mines (min {MIN_MINES})")
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @classmethod
    def clamped(cls, width: int, height: int, num_mines: int) -> "BoardConfig":
        """Build a configuration, clamping each value into its valid range."""
        width = _clamp(width, MIN_SIZE, MAX_SIZE)
        height = _clamp(height, MIN_SIZE, MAX_SIZE)
        num_mines = _clamp(num_mines, MIN_MINES, width * height - SAFE_TILES)
        return cls(width, height, num_mines)

    @property
    def area(self) -> int:
        return self.width * self.height


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)


class Difficulty(Enum):
    """Standard Minesweeper difficulties."""

    BEGINNER = BEGINNER
    INTERMEDIATE = INTERMEDIATE
    EXPERT = EXPERT

    @property
    def config(self) -> BoardConfig:
        return self.value


@dataclass(frozen=True)
class OpenResult:
    """
    Outcome of an open or chord action.

    Attributes:
        opened: Number of non-mine tiles newly opened.
        exploded: Whether a mine was revealed.
    """

    opened: int = 0
    exploded: bool = False

    def __add__(self, other: "OpenResult") -> "OpenResult":
        return OpenResult(
            self.opened + other.opened, self.exploded or other.exploded
        )

    def __bool__(self) -> bool:
        return self.opened > 0 or self.exploded


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Owns a flat, row-major list of tiles. Tiles reference their neighbors
    by index, so the board is the only owner of tile objects.
    """

    config: BoardConfig = field(default_factory=BoardConfig)
    _tiles: List[Tile] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty tiles and link each to its neighbors."""
        width, height = self.config.width, self.config.height
        self._tiles = [
            Tile(x, y, y * width + x)
            for y in range(height)
            for x in range(width)
        ]
        for tile in self._tiles:
            tile.neighbors = tuple(self._neighbor_indices(tile.x, tile.y))

    def _neighbor_indices(self, x: int, y: int) -> List[int]:
        """
        Get indices of tiles within Chebyshev distance 1.

        Args:
            x: Column of center tile.
            y: Row of center tile.

        Returns:
            Neighbor indices in row-major order.
        """
        indices = []
        for neighbor_y in range(y - 1, y + 2):
            for neighbor_x in range(x - 1, x + 2):
                if neighbor_x == x and neighbor_y == y:
                    continue
                if self.is_valid_position(neighbor_x, neighbor_y):
                    indices.append(neighbor_y * self.config.width + neighbor_x)
        return indices

    # ========================================================================
    # Mine Placement (Low-level)
    # ========================================================================

    def toggle_mine(self, index: int) -> None:
        """Toggle the mine on a tile and update its neighbors' counts."""
        tile = self._tiles[index]
        tile.is_mine = not tile.is_mine
        delta = 1 if tile.is_mine else -1
        for neighbor in tile.neighbors:
            self._tiles[neighbor].adjacent_mines += delta

    def place_mines(
        self,
        rng: random.Random,
        count: int,
        exclude: AbstractSet[int] = frozenset(),
    ) -> None:
        """
        Place mines by rejection sampling random coordinates.

        Draws landing on an existing mine or an excluded tile are
        discarded and redrawn.

        Args:
            rng: Random source for coordinates.
            count: Number of mines to add.
            exclude: Tile indices that must stay mine-free.
        """
        while count > 0:
            x = rng.randrange(self.config.width)
            y = rng.randrange(self.config.height)
            index = y * self.config.width + x
            if self._tiles[index].is_mine or index in exclude:
                continue
            self.toggle_mine(index)
            count -= 1

    def relocate_mines(self, index: int, rng: random.Random) -> int:
        """
        Move mines off a tile and its neighbors.

        Args:
            index: The first tile clicked.
            rng: Random source for replacement positions.

        Returns:
            Number of mines moved.
        """
        protected = frozenset((index,) + self._tiles[index].neighbors)
        relocate = 0
        for protected_index in protected:
            if self._tiles[protected_index].is_mine:
                self.toggle_mine(protected_index)
                relocate += 1
        self.place_mines(rng, relocate, exclude=protected)
        return relocate

    def reset(self, rng: random.Random) -> None:
        """Clear every tile and lay a fresh set of mines."""
        for tile in self._tiles:
            tile.reset()
        self.place_mines(rng, self.config.num_mines)

    def restart(self) -> None:
        """Close and unflag every tile, keeping the mine layout."""
        for tile in self._tiles:
            tile.restart()

    # ========================================================================
    # Tile Actions (Mid-level)
    # ========================================================================

    def open(self, index: int) -> OpenResult:
        """
        Open a tile, flood-filling through tiles with no adjacent mines.

        Args:
            index: Tile to open.

        Returns:
            Tiles opened and whether a mine was revealed. Opening stops
            at the first mine.
        """
        tile = self._tiles[index]
        if not tile.reveal():
            return OpenResult()
        if tile.is_mine:
            return OpenResult(exploded=True)

        opened = 1
        stack = [tile] if tile.adjacent_mines == 0 else []
        while stack:
            current = stack.pop()
            for neighbor_index in current.neighbors:
                neighbor = self._tiles[neighbor_index]
                if not neighbor.reveal():
                    continue
                if neighbor.is_mine:
                    return OpenResult(opened, exploded=True)
                opened += 1
                if neighbor.adjacent_mines == 0:
                    stack.append(neighbor)
        return OpenResult(opened)

    def chord(self, index: int) -> OpenResult:
        """
        Open all neighbors of a satisfied numbered tile.

        Args:
            index: An open tile whose flagged-neighbor count matches its
                adjacent mine count.

        Returns:
            Combined result of opening each neighbor, stopping at the
            first mine.
        """
        if not self.can_chord(index):
            return OpenResult()

        total = OpenResult()
        for neighbor_index in self._tiles[index].neighbors:
            result = self.open(neighbor_index)
            total += result
            if result.exploded:
                break
        return total

    def can_chord(self, index: int) -> bool:
        """Check if chord action is valid."""
        tile = self._tiles[index]
        if not tile.is_open or tile.adjacent_mines == 0:
            return False
        return tile.adjacent_mines == self.count_adjacent_flags(index)

    def flag(self, index: int) -> bool:
        """Toggle the flag on a tile. Returns False if the tile is open."""
        return self._tiles[index].toggle_flag()

    def count_adjacent_flags(self, index: int) -> int:
        """Count flagged tiles adjacent to a tile."""
        return sum(
            1 for neighbor in self._tiles[index].neighbors
            if self._tiles[neighbor].has_flag
        )

    def reveal_all(self) -> Optional[Tile]:
        """
        Open every tile without flood filling.

        Returns:
            The last open mine found in scan order, or None.
        """
        losing_tile = None
        for tile in self._tiles:
            if tile.is_open and tile.is_mine:
                losing_tile = tile
            tile.is_open = True
        return losing_tile

    # ========================================================================
    # Statistics
    # ========================================================================

    def _is_zero(self, tile: Tile) -> bool:
        return not tile.is_mine and tile.adjacent_mines == 0

    def count_openings(self) -> int:
        """
        Count connected regions of mine-free tiles with no adjacent mines.

        May be inaccurate before the first click because mines have not
        been relocated yet.
        """
        unvisited = {tile.index for tile in self._tiles if self._is_zero(tile)}
        openings = 0
        while unvisited:
            queue = deque([unvisited.pop()])
            while queue:
                current = self._tiles[queue.popleft()]
                for neighbor in current.neighbors:
                    if neighbor in unvisited:
                        unvisited.remove(neighbor)
                        queue.append(neighbor)
            openings += 1
        return openings

    def count_3bv(self) -> int:
        """
        Compute the 3BV value: the minimum clicks needed to clear the board.

        Each opening counts once. Numbered tiles count once each unless
        they border an opening, in which case that opening clears them.
        """
        isolated = 0
        for tile in self._tiles:
            if tile.is_mine or tile.adjacent_mines == 0:
                continue
            if not any(self._is_zero(n) for n in self.get_neighbors(tile)):
                isolated += 1
        return isolated + self.count_openings()

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def mine_count(self) -> int:
        return self.config.num_mines

    @property
    def win_condition(self) -> int:
        """Number of mine-free tiles that must be opened to win."""
        return self.config.area - self.config.num_mines

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return tuple(self._tiles)

    def is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.config.width and 0 <= y < self.config.height

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        """Get tile at position, or None if invalid."""
        if not self.is_valid_position(x, y):
            return None
        return self._tiles[y * self.config.width + x]

    def get_neighbors(self, tile: Tile) -> List[Tile]:
        return [self._tiles[index] for index in tile.neighbors]

    def mine_positions(self) -> List[Tuple[int, int]]:
        return [tile.position for tile in self._tiles if tile.is_mine]

    def set_mines(self, positions: Iterable[Tuple[int, int]]) -> None:
        """
        Replace the mine layout with mines at exactly these positions.

        Raises:
            ValueError: If a position is off the board or the number of
                distinct positions differs from the configured mine count.
        """
        indices = set()
        for x, y in positions:
            if not self.is_valid_position(x, y):
                raise ValueError(f"Mine position ({x}, {y}) is off the board")
            indices.add(y * self.config.width + x)
        if len(indices) != self.config.num_mines:
            raise ValueError(
                f"Expected {self.config.num_mines} mines, got {len(indices)}"
            )
        for tile in self._tiles:
            if tile.is_mine != (tile.index in indices):
                self.toggle_mine(tile.index)

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                0-8 = open with adjacent count
                9 = open mine
        """
        obs = np.array(
            [tile.to_observation() for tile in self._tiles], dtype=np.int8
        )
        return obs.reshape(self.config.height, self.config.width)

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of tiles that can be opened.

        Returns:
            List of (x, y) positions that are neither open nor flagged.
        """
        return [tile.position for tile in self._tiles if tile.is_hidden]
