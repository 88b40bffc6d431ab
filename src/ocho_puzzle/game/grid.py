from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .shapes import Coordinate, Shape


DEFAULT_SIZE = 8


@dataclass
class PlacedBlock:
    """A shape committed to the board plus its scoring metadata.

    ``point_value`` and ``placed_at_count`` are fixed at creation; only
    ``line_clear_bonus`` and ``freshness`` change afterwards, and only when a
    line clear is resolved.
    """

    shape: Shape
    position: Coordinate
    color: str
    point_value: int
    shape_index: int
    placed_at_count: int
    line_clear_bonus: int = 0
    freshness: float = 1.0

    def absolute_cells(self) -> List[Coordinate]:
        return self.shape.cells_at(*self.position)


@dataclass(eq=False)
class Board:
    """Square occupancy grid; ``grid[y, x]`` is True when the cell is filled.

    Mutators never validate: callers check legality with the validator first.
    The same primitives run on scratch copies from :meth:`copy_grid`.
    """

    size: int = DEFAULT_SIZE
    grid: np.ndarray = field(init=False)
    blocks: List[PlacedBlock] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.size = int(self.size)
        if self.size <= 0:
            raise ValueError(f"board size must be positive, got {self.size}")
        self.grid = np.zeros((self.size, self.size), dtype=np.bool_)

    def reset(self) -> None:
        self.grid.fill(False)
        self.blocks.clear()

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_cell_empty(self, x: int, y: int) -> bool:
        if not self.is_inside(x, y):
            return False
        return not bool(self.grid[y, x])

    def place_shape(self, shape: Shape, position: Coordinate) -> None:
        self._fill(shape, position, True)

    def remove_shape(self, shape: Shape, position: Coordinate) -> None:
        self._fill(shape, position, False)

    def _fill(self, shape: Shape, position: Coordinate, value: bool) -> None:
        for x, y in shape.cells_at(*position):
            if self.is_inside(x, y):
                self.grid[y, x] = value

    def add_block(self, block: PlacedBlock) -> None:
        self.place_shape(block.shape, block.position)
        self.blocks.append(block)

    def clear_row(self, row: int) -> None:
        if 0 <= row < self.size:
            self.grid[row, :] = False

    def clear_column(self, col: int) -> None:
        if 0 <= col < self.size:
            self.grid[:, col] = False

    def clear_cell(self, x: int, y: int) -> None:
        if self.is_inside(x, y):
            self.grid[y, x] = False

    def is_row_full(self, row: int) -> bool:
        return 0 <= row < self.size and bool(np.all(self.grid[row, :]))

    def is_column_full(self, col: int) -> bool:
        return 0 <= col < self.size and bool(np.all(self.grid[:, col]))

    def full_rows(self) -> List[int]:
        return np.flatnonzero(np.all(self.grid, axis=1)).tolist()

    def full_columns(self) -> List[int]:
        return np.flatnonzero(np.all(self.grid, axis=0)).tolist()

    def empty_cells(self) -> List[Coordinate]:
        ys, xs = np.nonzero(~self.grid)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def is_empty(self) -> bool:
        return not bool(self.grid.any())

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def copy_grid(self) -> np.ndarray:
        return self.grid.copy()

    @property
    def shape(self) -> Tuple[int, int]:
        return self.grid.shape


def format_grid(grid: np.ndarray) -> str:
    return "\n".join("".join("█" if cell else "·" for cell in row) for row in grid)
