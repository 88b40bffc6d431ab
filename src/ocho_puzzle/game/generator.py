from __future__ import annotations

import logging
import random
from enum import Enum
from typing import List, Optional, Tuple

from .clearing import clear_full_lines, place_on_grid
from .shapes import Coordinate, Shape, ShapeCatalog, ShapeKind, default_catalog
from .validator import GridLike, all_valid_positions, occupancy


logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    GUARANTEED_FIT = "guaranteed-fit"
    UNCONSTRAINED = "unconstrained"


def generate_unconstrained(count: int, rng: random.Random,
                           catalog: Optional[ShapeCatalog] = None) -> List[Shape]:
    """Uniform draws without the monomino, each with a uniform random rotation."""
    catalog = catalog or default_catalog()
    return [catalog.random_shape(rng) for _ in range(count)]


def simulate_guaranteed_fit(target: GridLike, count: int, rng: random.Random,
                            catalog: Optional[ShapeCatalog] = None,
                            attempts_per_slot: int = 20) -> Tuple[List[Shape], List[Coordinate]]:
    """Forward-simulate picks on a scratch copy of the board.

    Each slot draws size-weighted candidates until one fits, drops it at a
    random valid spot and clears lines so later slots see the freed space.
    Stops at the first slot that runs out of attempts. Returns the shapes
    picked and where each was dropped, in order.
    """
    catalog = catalog or default_catalog()
    scratch = occupancy(target).copy()
    hand: List[Shape] = []
    positions: List[Coordinate] = []

    while len(hand) < count:
        picked = None
        for _ in range(attempts_per_slot):
            candidate = catalog.random_shape(rng, weighted=True)
            valid = all_valid_positions(scratch, candidate)
            if valid:
                picked = candidate
                position = rng.choice(valid)
                place_on_grid(scratch, candidate, position)
                clear_full_lines(scratch)
                positions.append(position)
                break
        if picked is None:
            break
        hand.append(picked)
    return hand, positions


def generate_guaranteed_fit(target: GridLike, count: int, rng: random.Random,
                            catalog: Optional[ShapeCatalog] = None,
                            attempts_per_slot: int = 20) -> List[Shape]:
    """Deal a hand whose pieces can be placed in dealing order.

    When a slot runs out of attempts the rest of the hand is dealt at random
    (the monomino takes the failed slot if it still fits).
    """
    catalog = catalog or default_catalog()
    hand, positions = simulate_guaranteed_fit(target, count, rng, catalog, attempts_per_slot)

    if len(hand) < count:
        logger.debug("[GEN] slot %d found no fit in %d attempts, falling back", len(hand), attempts_per_slot)
        scratch = occupancy(target).copy()
        for shape, position in zip(hand, positions):
            place_on_grid(scratch, shape, position)
            clear_full_lines(scratch)
        mono = catalog[ShapeKind.MONO]
        if all_valid_positions(scratch, mono):
            hand.append(mono)
        hand.extend(generate_unconstrained(count - len(hand), rng, catalog))
    return hand


def generate_hand(target: GridLike, mode: GameMode, rng: random.Random, count: int = 3,
                  catalog: Optional[ShapeCatalog] = None, attempts_per_slot: int = 20) -> List[Shape]:
    if GameMode(mode) is GameMode.GUARANTEED_FIT:
        return generate_guaranteed_fit(target, count, rng, catalog, attempts_per_slot)
    return generate_unconstrained(count, rng, catalog)
