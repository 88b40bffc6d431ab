from __future__ import annotations

import random

import pytest

from ocho_puzzle.game import BlockPuzzleGame, GameConfig, ShapeCatalog


@pytest.fixture
def catalog() -> ShapeCatalog:
    return ShapeCatalog(random.Random(1234))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def game(catalog: ShapeCatalog) -> BlockPuzzleGame:
    return BlockPuzzleGame(GameConfig(random_seed=42), catalog=catalog)
