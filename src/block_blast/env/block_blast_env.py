from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_blast.game import SHAPES, BlockBlastGame, GameConfig, format_grid

# RGB for empty and each BlockColor value
PALETTE = np.array(
    [
        (30, 30, 36),
        (230, 80, 80),
        (240, 160, 60),
        (240, 220, 80),
        (90, 200, 120),
        (80, 140, 240),
    ],
    dtype=np.uint8,
)


def _compute_action_mask(game: BlockBlastGame) -> np.ndarray:
    size = game.grid.size
    k = game.config.blocks_per_set
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for block_idx, row, col in game.get_valid_actions():
        mask[block_idx, row, col] = True
    return mask


class BlockBlastEnv(gym.Env):
    """Agent-facing wrapper over the turn controller.

    Actions are (block_idx, row, col) triples. The reward is the engine's
    score delta for accepted moves and `invalid_action_penalty` otherwise.
    """

    metadata = {"render_modes": ["ansi", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -1.0,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = BlockBlastGame(config)
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        size = self.game.config.grid_size
        k = self.game.config.blocks_per_set

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(PALETTE) - 1, shape=(size, size), dtype=np.int8),
                "blocks": spaces.Box(low=-1, high=len(SHAPES) - 1, shape=(k,), dtype=np.int8),
                "score": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
                "streak": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, size, size))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.blocks_per_set
        blocks = np.full((k,), -1, dtype=np.int8)
        for i, block in enumerate(self.game.current_blocks[:k]):
            blocks[i] = block.shape_id
        return {
            "grid": self.game.grid.grid.astype(np.int8),
            "blocks": blocks,
            "score": np.array([self.game.score], dtype=np.int32),
            "streak": np.array([self.game.streak], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared": self.game.total_lines_cleared,
            "moves": self.game.moves_made,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        block_idx, row, col = map(int, action)

        result = self.game.attempt_placement(block_idx, row, col)
        reward_components: Dict[str, float] = {}
        if result.accepted:
            reward_components["score"] = float(result.score_delta)
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        terminated = bool(self.game.game_over)
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps

        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(result.score_delta)
        info["cleared_rows"] = result.cleared_rows
        info["cleared_cols"] = result.cleared_cols
        if terminated:
            info["stats"] = self.game.get_game_stats()
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def render(self) -> Optional[np.ndarray | str]:
        if self.render_mode == "ansi":
            return f"Score: {self.game.score}\n{format_grid(self.game.grid.grid)}"
        if self.render_mode == "rgb_array":
            cell = 12
            img = PALETTE[self.game.grid.grid.astype(np.intp)]
            return np.repeat(np.repeat(img, cell, axis=0), cell, axis=1)
        return None

    def close(self) -> None:
        pass
