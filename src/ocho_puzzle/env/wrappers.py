from __future__ import annotations

from typing import Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces


Placement = Tuple[int, int, int, int]


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Exposes the (slot, x, y, rotation) placement space as a single Discrete(N).

    Flat index = ravel of (slot, x, y, rotation) over the env's MultiDiscrete
    shape. `get_action_mask()` marks the flat index of every legal placement.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        if not isinstance(env.action_space, spaces.MultiDiscrete):
            raise TypeError(f"expected a MultiDiscrete action space, got {env.action_space}")
        self.dims: Tuple[int, ...] = tuple(int(n) for n in env.action_space.nvec)
        self.n = int(np.prod(self.dims))
        self.action_space = spaces.Discrete(self.n)

    def unflatten(self, idx: int) -> Placement:
        slot, x, y, r = np.unravel_index(int(idx), self.dims)
        return int(slot), int(x), int(y), int(r)

    def flatten(self, slot: int, x: int, y: int, r: int) -> int:
        return int(np.ravel_multi_index((slot, x, y, r), self.dims))

    def action(self, action: int):  # type: ignore[override]
        return np.array(self.unflatten(action), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.n, dtype=np.bool_)
        for placement in self.env.unwrapped.game.valid_actions():
            mask[self.flatten(*placement)] = True
        return mask
