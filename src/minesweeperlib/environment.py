"""
Gymnasium environment wrapper for Minesweeper.

Provides a standard RL interface over the Minesweeper engine.
"""
import random
from typing import Any, Dict, Optional, SupportsFloat, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BoardConfig
from .engine import GameState, Minesweeper
from .tile import FLAGGED, REVEALED_MINE


# ============================================================================
# Rewards
# ============================================================================

INVALID_REWARD = -0.1
SAFE_REWARD = 1.0
WIN_REWARD = 10.0
LOSS_REWARD = -10.0


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array of shape (height, width) where:
        - -1 = hidden tile
        - -2 = flagged tile
        - 0-8 = open tile with adjacent mine count
        - 9 = open mine (after a loss)

    Actions:
        Discrete action space of size width * height.
        Action i opens the tile at (x=i % width, y=i // width).

    Rewards:
        - +1 for opening a safe tile
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for invalid action (already open or flagged)
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        seed_source: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            seed_source: Random source for unseeded resets.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.engine = Minesweeper(self.config, seed_source=seed_source)

        self.observation_space = spaces.Box(
            low=FLAGGED,
            high=REVEALED_MINE,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.config.area)

        self._steps = 0
        self._total_safe_tiles = self.engine.board.win_condition

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        Args:
            seed: Mine layout seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.engine.new_game(seed)
        self._steps = 0
        return self.engine.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Open one tile.

        Args:
            action: Tile index to open (y * width + x).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        x, y = self._action_to_position(action)
        self._steps += 1

        reward = self._calculate_reward(x, y)
        terminated = self.engine.game_state is GameState.END

        return (
            self.engine.board.get_observation(),
            reward,
            terminated,
            False,
            self._get_info(),
        )

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (x, y) position."""
        return int(action) % self.config.width, int(action) // self.config.width

    def _calculate_reward(self, x: int, y: int) -> float:
        tile = self.engine.get_tile(x, y)
        if tile is None or not tile.is_hidden:
            return INVALID_REWARD
        if self.engine.game_state is GameState.END:
            return INVALID_REWARD

        result = self.engine.open(x, y)
        if result.exploded:
            return LOSS_REWARD
        if self.engine.is_won:
            return WIN_REWARD
        return SAFE_REWARD

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "cleared": self.engine.cleared,
            "total_safe": self._total_safe_tiles,
            "game_state": self.engine.game_state.name,
            "valid_actions": len(self.engine.board.get_valid_actions()),
        }

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = tile can be opened.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for x, y in self.engine.board.get_valid_actions():
            mask[y * self.config.width + x] = True
        return mask
