from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .clearing import clear_full_lines, lines_completed_by_hypothetical_placement, place_on_grid
from .shapes import Coordinate, Shape
from .validator import GridLike, all_valid_positions, occupancy


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedPlacement:
    slot: int
    position: Coordinate


def _best_position(grid: np.ndarray, shape: Shape, rng: random.Random) -> Optional[Coordinate]:
    """Position completing the most rows+columns, ties broken at random."""
    positions = all_valid_positions(grid, shape)
    if not positions:
        return None
    scored = [(lines_completed_by_hypothetical_placement(grid, shape, pos).count, pos) for pos in positions]
    top = max(score for score, _ in scored)
    return rng.choice([pos for score, pos in scored if score == top])


def _play_order(grid: np.ndarray, order: Sequence[Tuple[int, Shape]],
                rng: random.Random) -> Tuple[List[PlannedPlacement], bool]:
    scratch = grid.copy()
    plan: List[PlannedPlacement] = []
    for slot, shape in order:
        position = _best_position(scratch, shape, rng)
        if position is None:
            return plan, False
        place_on_grid(scratch, shape, position)
        clear_full_lines(scratch)
        plan.append(PlannedPlacement(slot, position))
    return plan, True


def find_placement_order(target: GridLike, hand: Sequence[Optional[Shape]], rng: random.Random,
                         attempts: int = 100) -> Optional[List[PlannedPlacement]]:
    """Search for an order that places every piece of ``hand``.

    Tries up to ``attempts`` shuffles with greedy line-clearing placement and
    returns the first complete plan. Otherwise returns whatever the hand's own
    slot order manages to place, or None if nothing can be placed at all.
    """
    pieces = [(slot, shape) for slot, shape in enumerate(hand) if shape is not None]
    if not pieces:
        return None
    grid = occupancy(target)

    for _ in range(attempts):
        order = list(pieces)
        rng.shuffle(order)
        plan, complete = _play_order(grid, order, rng)
        if complete:
            return plan

    logger.debug("[SOLVE] no full order in %d attempts, using slot order", attempts)
    plan, _ = _play_order(grid, pieces, rng)
    return plan or None
