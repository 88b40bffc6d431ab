from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

import numpy as np

from .shapes import Coordinate, Shape
from .validator import GridLike, occupancy


@dataclass
class LineClear:
    rows: List[int] = field(default_factory=list)
    columns: List[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows) + len(self.columns)

    def __bool__(self) -> bool:
        return self.count > 0

    def covers(self, x: int, y: int) -> bool:
        return y in self.rows or x in self.columns


def full_rows(target: GridLike) -> List[int]:
    return np.flatnonzero(np.all(occupancy(target), axis=1)).tolist()


def full_columns(target: GridLike) -> List[int]:
    return np.flatnonzero(np.all(occupancy(target), axis=0)).tolist()


def find_full_lines(target: GridLike) -> LineClear:
    return LineClear(rows=full_rows(target), columns=full_columns(target))


def clear(target: GridLike, rows: Iterable[int], columns: Iterable[int]) -> None:
    """Blank the given rows and columns in place.

    Intersections are simply written empty twice, so clearing is idempotent.
    """
    grid = occupancy(target)
    for row in rows:
        grid[row, :] = False
    for col in columns:
        grid[:, col] = False


def clear_full_lines(target: GridLike) -> LineClear:
    # Rows and columns are both found before anything is cleared
    lines = find_full_lines(target)
    clear(target, lines.rows, lines.columns)
    return lines


def place_on_grid(grid: np.ndarray, shape: Shape, position: Coordinate) -> None:
    """Scratch-grid placement; out-of-bounds cells are dropped, nothing is validated."""
    size_y, size_x = grid.shape
    for x, y in shape.cells_at(*position):
        if 0 <= x < size_x and 0 <= y < size_y:
            grid[y, x] = True


def lines_completed_by_hypothetical_placement(target: GridLike, shape: Shape, position: Coordinate) -> LineClear:
    """Rows/columns that placing ``shape`` at ``position`` would complete.

    Works on a throwaway copy; ``target`` is never mutated.
    """
    scratch = occupancy(target).copy()
    place_on_grid(scratch, shape, position)
    return find_full_lines(scratch)
