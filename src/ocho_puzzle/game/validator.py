from __future__ import annotations

from typing import List, Optional, Sequence, Union

import numpy as np

from .grid import Board
from .shapes import Coordinate, Shape, rotate


GridLike = Union[Board, np.ndarray]


def occupancy(target: GridLike) -> np.ndarray:
    """Occupancy array of a Board or of a scratch grid (returned as-is, not copied)."""
    if isinstance(target, Board):
        return target.grid
    return target


def can_place(target: GridLike, shape: Shape, position: Coordinate) -> bool:
    """Check if every cell of ``shape`` at ``position`` is inside and empty."""
    grid = occupancy(target)
    size_y, size_x = grid.shape
    ox, oy = position
    for dx, dy in shape.cells:
        x = ox + dx
        y = oy + dy
        if x < 0 or y < 0 or x >= size_x or y >= size_y:
            return False
        if grid[y, x]:
            return False
    return True


def all_valid_positions(target: GridLike, shape: Shape) -> List[Coordinate]:
    """All origins (row-major scan) where ``shape`` can be placed.

    Shapes are expected to be normalized to a (0, 0) minimum, so scanning the
    board's own origins covers every legal placement.
    """
    grid = occupancy(target)
    size_y, size_x = grid.shape
    positions: List[Coordinate] = []
    for y in range(size_y):
        for x in range(size_x):
            if can_place(grid, shape, (x, y)):
                positions.append((x, y))
    return positions


def has_valid_position(target: GridLike, shape: Shape) -> bool:
    grid = occupancy(target)
    size_y, size_x = grid.shape
    return any(can_place(grid, shape, (x, y)) for y in range(size_y) for x in range(size_x))


def can_place_any(target: GridLike, hand: Sequence[Optional[Shape]], allow_rotation: bool = False) -> bool:
    """True if any non-empty hand slot fits somewhere (under any rotation if allowed)."""
    grid = occupancy(target)
    for shape in hand:
        if shape is None:
            continue
        candidates = [rotate(shape, r) for r in range(4)] if allow_rotation else [shape]
        for candidate in candidates:
            if has_valid_position(grid, candidate):
                return True
    return False
