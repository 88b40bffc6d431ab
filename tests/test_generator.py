from __future__ import annotations

import random

import numpy as np
import pytest

from ocho_puzzle.game import (
    NOT_FOUND,
    Board,
    GameMode,
    ShapeKind,
    all_valid_positions,
    can_place,
    clear_full_lines,
    generate_hand,
)
from ocho_puzzle.game.clearing import place_on_grid
from ocho_puzzle.game.generator import generate_guaranteed_fit, generate_unconstrained, simulate_guaranteed_fit


def test_unconstrained_hand(catalog, rng):
    hand = generate_unconstrained(3, rng, catalog)
    assert len(hand) == 3
    for shape in hand:
        assert catalog.canonical_index(shape) not in (NOT_FOUND, ShapeKind.MONO)


def test_guaranteed_fit_on_empty_board_is_placeable(catalog):
    for seed in range(20):
        hand = generate_guaranteed_fit(Board(), 3, random.Random(seed), catalog)
        assert len(hand) == 3
        for shape in hand:
            assert catalog.canonical_index(shape) != NOT_FOUND
            assert all_valid_positions(Board(), shape)


def test_guaranteed_fit_does_not_touch_the_board(catalog, rng):
    board = Board()
    board.grid[2, :6] = True
    before = board.copy_grid()
    generate_guaranteed_fit(board, 3, rng, catalog)
    np.testing.assert_array_equal(board.grid, before)


def test_guaranteed_fit_simulated_sequence_fits_tight_board(catalog):
    # Only the top-left 2x4 area is open; every dealt piece must fit in turn
    board = Board()
    board.grid[:] = True
    board.grid[0:2, 0:4] = False
    for seed in range(10):
        hand = generate_guaranteed_fit(board, 3, random.Random(seed), catalog, attempts_per_slot=200)
        assert all_valid_positions(board, hand[0])


def _replay(board: Board, hand, positions) -> int:
    """Place the simulated order on a copy; returns the number of lines cleared."""
    grid = board.copy_grid()
    cleared = 0
    for shape, position in zip(hand, positions):
        assert can_place(grid, shape, position)
        place_on_grid(grid, shape, position)
        cleared += clear_full_lines(grid).count
    return cleared


def test_later_slots_use_space_freed_by_earlier_clears(catalog):
    # Four open cells in row 0: three non-monomino pieces need space freed by clears
    board = Board()
    board.grid[:] = True
    board.grid[0, 4:] = False
    full_hands = 0
    for seed in range(40):
        hand, positions = simulate_guaranteed_fit(board, 3, random.Random(seed), catalog, attempts_per_slot=200)
        assert len(hand) == len(positions)
        cleared = _replay(board, hand, positions)
        if len(hand) == 3:
            full_hands += 1
            assert cleared >= 1
    assert full_hands > 0


def test_one_empty_cell_deals_the_monomino_or_falls_back(catalog):
    board = Board()
    board.grid[:] = True
    board.grid[4, 3] = False
    for seed in range(10):
        hand = generate_guaranteed_fit(board, 3, random.Random(seed), catalog)
        assert len(hand) == 3
        assert catalog.canonical_index(hand[0]) == ShapeKind.MONO
        assert can_place(board, hand[0], (3, 4))


def test_full_board_falls_back_without_error(catalog, rng):
    board = Board()
    board.grid[:] = True
    hand = generate_guaranteed_fit(board, 3, rng, catalog, attempts_per_slot=5)
    assert len(hand) == 3
    assert all(catalog.canonical_index(s) not in (NOT_FOUND, ShapeKind.MONO) for s in hand)


@pytest.mark.parametrize("mode", [GameMode.GUARANTEED_FIT, GameMode.UNCONSTRAINED, "unconstrained"])
def test_generate_hand_dispatch(catalog, rng, mode):
    hand = generate_hand(Board(), mode, rng, count=3, catalog=catalog)
    assert len(hand) == 3
