from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np


Coordinate = Tuple[int, int]

NOT_FOUND = -1


class ShapeKind(IntEnum):
    """Catalog order; the value is the canonical index."""

    MONO = 0
    DOMINO = 1
    TRI_LINE = 2
    TRI_CORNER = 3
    I = 4
    O = 5
    T = 6
    S = 7
    Z = 8
    J = 9
    L = 10
    SQUARE3 = 11


@dataclass(frozen=True)
class Shape:
    """Immutable polyomino given as cell offsets from an implicit (0, 0) origin."""

    cells: Tuple[Coordinate, ...]

    @classmethod
    def from_cells(cls, cells: Iterable[Coordinate]) -> "Shape":
        return cls(tuple(sorted((int(x), int(y)) for x, y in cells)))

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return max(x for x, _ in self.cells) + 1 if self.cells else 0

    @property
    def height(self) -> int:
        return max(y for _, y in self.cells) + 1 if self.cells else 0

    def cells_at(self, origin_x: int, origin_y: int) -> List[Coordinate]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.cells]


BASE_SHAPES: Dict[ShapeKind, Tuple[Coordinate, ...]] = {
    ShapeKind.MONO: ((0, 0),),
    ShapeKind.DOMINO: ((0, 0), (1, 0)),
    ShapeKind.TRI_LINE: ((0, 0), (1, 0), (2, 0)),
    ShapeKind.TRI_CORNER: ((0, 0), (1, 0), (0, 1)),
    ShapeKind.I: ((0, 0), (1, 0), (2, 0), (3, 0)),
    ShapeKind.O: ((0, 0), (1, 0), (0, 1), (1, 1)),
    ShapeKind.T: ((1, 0), (0, 1), (1, 1), (2, 1)),
    ShapeKind.S: ((1, 0), (2, 0), (0, 1), (1, 1)),
    ShapeKind.Z: ((0, 0), (1, 0), (1, 1), (2, 1)),
    ShapeKind.J: ((0, 0), (0, 1), (1, 1), (2, 1)),
    ShapeKind.L: ((2, 0), (0, 1), (1, 1), (2, 1)),
    ShapeKind.SQUARE3: tuple((x, y) for y in range(3) for x in range(3)),
}

# Hex colors per catalog index, light to dark.
DEFAULT_PALETTE: Tuple[str, ...] = (
    "#dbeafe", "#bfdbfe", "#93c5fd", "#60a5fa", "#3b82f6", "#2563eb",
    "#1d4ed8", "#1e40af", "#1e3a8a", "#172554", "#0f1d4a", "#0b1638",
)


def normalize(cells: Iterable[Coordinate]) -> Shape:
    pts = list(cells)
    if not pts:
        return Shape(())
    min_x = min(x for x, _ in pts)
    min_y = min(y for _, y in pts)
    return Shape.from_cells((x - min_x, y - min_y) for x, y in pts)


def rotate(shape: Shape, quarter_turns: int) -> Shape:
    """Rotate by quarter turns about the bounding-box center, then re-normalize.

    Coordinates are rounded half up after rotation so that half-cell centers
    (even-sized sides) shift every cell by the same amount and repeated
    rotation never drifts.
    """
    k = quarter_turns % 4
    if k == 0 or len(shape) == 0:
        return normalize(shape.cells)
    pts = np.array(shape.cells, dtype=np.float64)
    center = (pts.min(axis=0) + pts.max(axis=0)) / 2.0
    rel = pts - center
    for _ in range(k):
        # (x, y) -> (y, -x) per quarter turn
        rel = np.stack((rel[:, 1], -rel[:, 0]), axis=1)
    rounded = np.floor(rel + center + 0.5).astype(int)
    return normalize((int(x), int(y)) for x, y in rounded)


def shape_size(shape: Shape) -> int:
    return len(shape)


def _key(shape: Shape) -> FrozenSet[Coordinate]:
    return frozenset(normalize(shape.cells).cells)


class ShapeCatalog:
    """Fixed pool of shapes with per-session point values and colors.

    Point values are a shuffle of ``0..len-1`` with the monomino pinned at 0, so
    every other shape gets a unique value that stays stable for the lifetime of
    the catalog.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 palette: Sequence[str] = DEFAULT_PALETTE) -> None:
        rng = rng or random.Random()
        self.shapes: Tuple[Shape, ...] = tuple(Shape.from_cells(BASE_SHAPES[k]) for k in ShapeKind)
        self.point_values: Tuple[int, ...] = self._shuffle_point_values(rng, len(self.shapes))
        self.palette: Tuple[str, ...] = tuple(palette)
        # Brute-force scan over 12 shapes x 4 rotations, done once up front.
        self._lookup: Dict[FrozenSet[Coordinate], int] = {}
        for index, shape in enumerate(self.shapes):
            for r in range(4):
                self._lookup.setdefault(_key(rotate(shape, r)), index)

    @staticmethod
    def _shuffle_point_values(rng: random.Random, count: int) -> Tuple[int, ...]:
        values = list(range(count))
        rng.shuffle(values)
        zero_at = values.index(0)
        values[0], values[zero_at] = values[zero_at], values[0]
        return tuple(values)

    def __len__(self) -> int:
        return len(self.shapes)

    def __getitem__(self, index: int) -> Shape:
        return self.shapes[self._checked(index)]

    def _checked(self, index: int) -> int:
        if not 0 <= index < len(self.shapes):
            raise IndexError(f"shape index {index} not in catalog")
        return index

    def canonical_index(self, shape: Shape) -> int:
        """Catalog index of ``shape`` under any rotation/translation, else NOT_FOUND."""
        for r in range(4):
            index = self._lookup.get(_key(rotate(shape, r)))
            if index is not None:
                return index
        return NOT_FOUND

    def color_for(self, index: int) -> str:
        return self.palette[self._checked(index) % len(self.palette)]

    def base_point_value(self, index: int) -> int:
        return self.point_values[self._checked(index)]

    def playable_indices(self) -> List[int]:
        """Everything except the monomino, which is only dealt as a rescue piece."""
        return [i for i in range(len(self.shapes)) if i != ShapeKind.MONO]

    def draw_weights(self, indices: Sequence[int]) -> List[float]:
        # 1/size: 2 cells -> 0.5, 4 cells -> 0.25, 9 cells -> 0.11
        return [1.0 / shape_size(self.shapes[i]) for i in indices]

    def random_shape(self, rng: random.Random, weighted: bool = False) -> Shape:
        indices = self.playable_indices()
        if weighted:
            index = rng.choices(indices, weights=self.draw_weights(indices), k=1)[0]
        else:
            index = rng.choice(indices)
        return rotate(self.shapes[index], rng.randrange(4))


_DEFAULT_CATALOG: Optional[ShapeCatalog] = None


def default_catalog() -> ShapeCatalog:
    """Process-wide catalog; point values are shuffled once on first use."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = ShapeCatalog()
    return _DEFAULT_CATALOG


def canonical_index(shape: Shape) -> int:
    return default_catalog().canonical_index(shape)


def color_for(index: int) -> str:
    return default_catalog().color_for(index)


def base_point_value(index: int) -> int:
    return default_catalog().base_point_value(index)
