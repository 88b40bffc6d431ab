from __future__ import annotations

import random

import pytest

from ocho_puzzle.game import NOT_FOUND, Shape, ShapeCatalog, ShapeKind, rotate
from ocho_puzzle.game.shapes import base_point_value, canonical_index, color_for, normalize


def test_catalog_has_twelve_shapes_with_expected_sizes(catalog):
    sizes = [len(s) for s in catalog.shapes]
    assert sizes == [1, 2, 3, 3, 4, 4, 4, 4, 4, 4, 4, 9]


@pytest.mark.parametrize("index", range(12))
@pytest.mark.parametrize("turns", range(4))
def test_rotation_closure(catalog, index, turns):
    assert catalog.canonical_index(rotate(catalog[index], turns)) == index


def test_rotate_i_piece_becomes_vertical(catalog):
    rotated = rotate(catalog[ShapeKind.I], 1)
    assert rotated.cells == ((0, 0), (0, 1), (0, 2), (0, 3))


def test_rotate_t_piece_uses_center_and_normalizes(catalog):
    rotated = rotate(catalog[ShapeKind.T], 1)
    assert rotated.cells == ((0, 1), (1, 0), (1, 1), (1, 2))
    assert min(x for x, _ in rotated.cells) == 0
    assert min(y for _, y in rotated.cells) == 0


@pytest.mark.parametrize("index", range(12))
def test_four_quarter_turns_do_not_drift(catalog, index):
    shape = catalog[index]
    current = shape
    for _ in range(4):
        current = rotate(current, 1)
    assert current == normalize(shape.cells)
    assert rotate(shape, 5) == rotate(shape, 1)
    assert rotate(shape, -1) == rotate(shape, 3)


def test_canonical_index_ignores_translation(catalog):
    shifted = Shape.from_cells((x + 3, y + 2) for x, y in catalog[ShapeKind.S].cells)
    assert catalog.canonical_index(shifted) == ShapeKind.S


def test_foreign_shapes_are_not_found(catalog):
    plus = Shape.from_cells([(1, 0), (0, 1), (1, 1), (2, 1), (1, 2)])
    line5 = Shape.from_cells((x, 0) for x in range(5))
    assert catalog.canonical_index(plus) == NOT_FOUND
    assert catalog.canonical_index(line5) == NOT_FOUND
    assert catalog.canonical_index(Shape(())) == NOT_FOUND


def test_point_values_are_a_shuffle_with_monomino_at_zero():
    for seed in range(20):
        cat = ShapeCatalog(random.Random(seed))
        assert cat.base_point_value(0) == 0
        assert sorted(cat.point_values) == list(range(12))


def test_point_values_stable_for_catalog_lifetime(catalog):
    first = [catalog.base_point_value(i) for i in range(len(catalog))]
    catalog.random_shape(random.Random(0))
    assert [catalog.base_point_value(i) for i in range(len(catalog))] == first


def test_lookup_with_not_found_raises(catalog):
    with pytest.raises(IndexError):
        catalog.base_point_value(NOT_FOUND)
    with pytest.raises(IndexError):
        catalog.color_for(12)


def test_colors_are_hex_strings(catalog):
    for i in range(len(catalog)):
        color = catalog.color_for(i)
        assert color.startswith("#") and len(color) == 7


def test_random_shape_never_deals_the_monomino(catalog):
    rng = random.Random(3)
    for weighted in (False, True):
        for _ in range(300):
            shape = catalog.random_shape(rng, weighted=weighted)
            assert catalog.canonical_index(shape) not in (NOT_FOUND, ShapeKind.MONO)


def test_weighted_draws_favor_small_shapes(catalog):
    rng = random.Random(11)
    counts = {ShapeKind.DOMINO: 0, ShapeKind.SQUARE3: 0}
    for _ in range(3000):
        index = catalog.canonical_index(catalog.random_shape(rng, weighted=True))
        if index in counts:
            counts[index] += 1
    assert counts[ShapeKind.DOMINO] > 2 * counts[ShapeKind.SQUARE3]


def test_module_level_helpers_use_default_catalog():
    assert canonical_index(Shape.from_cells([(0, 0)])) == ShapeKind.MONO
    assert base_point_value(0) == 0
    assert color_for(0).startswith("#")
