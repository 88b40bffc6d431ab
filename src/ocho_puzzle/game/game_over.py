from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence

from .shapes import Shape
from .validator import GridLike, can_place_any


logger = logging.getLogger(__name__)


class GameState(str, Enum):
    ACTIVE = "active"
    OVER = "over"


def is_game_over(target: GridLike, hand: Sequence[Optional[Shape]], allow_rotation: bool = False) -> bool:
    # An exhausted hand is waiting for a refill, never a loss
    if all(shape is None for shape in hand):
        return False
    return not can_place_any(target, hand, allow_rotation)


class GameOverDetector:
    """Two-state machine: ACTIVE until nothing in the hand fits, then OVER until reset."""

    def __init__(self, allow_rotation: bool = False) -> None:
        self.allow_rotation = allow_rotation
        self.state = GameState.ACTIVE

    @property
    def over(self) -> bool:
        return self.state is GameState.OVER

    def evaluate(self, target: GridLike, hand: Sequence[Optional[Shape]]) -> GameState:
        if self.state is GameState.ACTIVE and is_game_over(target, hand, self.allow_rotation):
            self.state = GameState.OVER
            logger.debug("[GAME OVER] no piece in the hand fits the board")
        return self.state

    def reset(self) -> None:
        self.state = GameState.ACTIVE
