from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from ocho_puzzle.game import BlockPuzzleGame, GameConfig, ScoringRules, format_grid


def _compute_action_mask(game: BlockPuzzleGame) -> np.ndarray:
    size = game.board.size
    k = game.config.pieces_per_set
    mask = np.zeros((k, size, size, 4), dtype=np.bool_)
    for slot, x, y, r in game.valid_actions():
        mask[slot, x, y, r] = True
    return mask


class OchoPuzzleEnv(gym.Env):
    """Placement environment over :class:`BlockPuzzleGame`.

    Action is ``(slot, x, y, rotation)``; rotations other than 0 are only legal
    when the game config allows rotation. Reward is the engine's score delta
    (plus the end-of-game cleanup payout), with a penalty for rejected moves.
    """

    metadata = {"render_modes": ["ansi", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -0.1,
                 line_reward: float = 1.0,
                 max_episode_steps: int = 10_000) -> None:
        super().__init__()
        self.game = BlockPuzzleGame(config, rules)
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.line_reward = float(line_reward)
        self.max_episode_steps = int(max_episode_steps)

        size = self.game.board.size
        k = self.game.config.pieces_per_set
        n_shapes = len(self.game.catalog)

        # Observation space: occupancy grid and per-slot catalog indices (-1 for empty)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=n_shapes - 1, shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )

        self.action_space = spaces.MultiDiscrete((k, size, size, 4))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.pieces_per_set
        pieces = np.full((k,), -1, dtype=np.int8)
        for i, index in enumerate(self.game.slot_indices()[:k]):
            pieces[i] = int(index)
        return {
            "grid": self.game.board.grid.astype(np.int8),
            "pieces": pieces,
            "pieces_remaining": sum(1 for s in self.game.hand if s is not None),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "valid_actions": self.game.valid_actions(),
            "score": self.game.score,
            "level": self.game.level,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        slot, x, y, r = map(int, action)
        result = self.game.request_placement(slot, (x, y), r)

        reward_components: Dict[str, float] = {}
        if result.accepted:
            reward_components["score"] = float(result.score_delta)
            reward_components["lines"] = self.line_reward * float(len(result.cleared_rows) + len(result.cleared_columns))
            if result.cleanup_awards:
                reward_components["cleanup"] = float(sum(p for _, _, p in result.cleanup_awards))
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        self._steps += 1
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(result.score_delta)
        info["accepted"] = result.accepted
        return obs, float(sum(reward_components.values())), terminated, truncated, info

    def render(self):
        grid = self.game.board.grid
        if self.render_mode == "ansi":
            return format_grid(grid) + f"\nscore {self.game.score}  level {self.game.level}\n"
        if self.render_mode == "rgb_array":
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    color = (70, 130, 220) if grid[y, x] else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None

    def close(self) -> None:
        pass
