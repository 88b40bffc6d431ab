from __future__ import annotations

import random

import gymnasium as gym
import numpy as np
import pytest

import ocho_puzzle.env  # noqa: F401
from ocho_puzzle.env import OchoPuzzleEnv
from ocho_puzzle.env.wrappers import FlattenDiscreteActionWrapper
from ocho_puzzle.game import GameConfig
from ocho_puzzle.rl.auto_play import main, run_episode


@pytest.fixture
def env() -> OchoPuzzleEnv:
    env = OchoPuzzleEnv(GameConfig(random_seed=3))
    yield env
    env.close()


def test_reset_observation(env):
    obs, info = env.reset(seed=5)
    assert obs["grid"].shape == (8, 8) and not obs["grid"].any()
    assert obs["pieces"].shape == (3,) and (obs["pieces"] >= 1).all()
    assert obs["pieces_remaining"] == 3
    assert info["action_mask"].shape == (3, 8, 8, 4)
    assert info["action_mask"].sum() == len(info["valid_actions"])
    assert env.observation_space.contains(obs)


def test_valid_step_places_piece(env):
    _, info = env.reset(seed=5)
    slot, x, y, r = info["valid_actions"][0]
    obs, reward, terminated, truncated, info = env.step(np.array([slot, x, y, r]))
    assert info["accepted"]
    assert obs["grid"].sum() > 0
    assert obs["pieces"][slot] == -1
    assert obs["pieces_remaining"] == 2
    assert reward >= 0.0
    assert not terminated and not truncated


def test_invalid_action_is_penalised(env):
    env.reset(seed=5)
    before = env.game.board.copy_grid()
    _, reward, terminated, _, info = env.step((0, 0, 0, 1))
    assert not info["accepted"]
    assert reward == pytest.approx(-0.1)
    assert not terminated
    np.testing.assert_array_equal(env.game.board.grid, before)


def test_ansi_render():
    env = OchoPuzzleEnv(GameConfig(random_seed=1), render_mode="ansi")
    env.reset()
    text = env.render()
    assert text.count("\n") == 9
    assert "score 0" in text


def test_registered_env():
    env = gym.make("OchoPuzzle-8x8-v0", config=GameConfig(random_seed=0), disable_env_checker=True)
    obs, _ = env.reset(seed=0)
    assert obs["grid"].shape == (8, 8)
    env.close()


def test_flatten_wrapper_roundtrip_and_mask():
    env = FlattenDiscreteActionWrapper(OchoPuzzleEnv(GameConfig(random_seed=2)))
    _, info = env.reset(seed=2)
    assert env.action_space.n == 3 * 8 * 8 * 4
    for idx in (0, 1, 255, env.n - 1):
        assert env.flatten(*env.unflatten(idx)) == idx
    mask = env.get_action_mask()
    assert mask.shape == (env.n,)
    slot, x, y, r = info["valid_actions"][0]
    flat = env.flatten(slot, x, y, r)
    assert mask[flat]
    _, _, _, _, info = env.step(flat)
    assert info["accepted"]


def test_solver_episode_runs():
    env = OchoPuzzleEnv(GameConfig(random_seed=11))
    stats = run_episode(env, "solver", random.Random(11), seed=11, max_steps=30)
    assert 0 < stats["steps"] <= 30
    assert stats["score"] >= 0


def test_cli_prints_one_line_per_episode(capsys):
    main(["--episodes", "2", "--seed", "4", "--max_steps", "20", "--policy", "random"])
    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("episode")]
    assert len(lines) == 2
    assert "score=" in lines[0]


def test_flat_mask_matches_env_mask():
    env = FlattenDiscreteActionWrapper(OchoPuzzleEnv(GameConfig(random_seed=6, allow_rotation=True)))
    _, info = env.reset(seed=6)
    np.testing.assert_array_equal(env.get_action_mask(), info["action_mask"].reshape(-1))
    assert env.unflatten(env.flatten(2, 7, 3, 1)) == (2, 7, 3, 1)


def test_flatten_wrapper_requires_multidiscrete():
    env = FlattenDiscreteActionWrapper(OchoPuzzleEnv())
    with pytest.raises(TypeError):
        FlattenDiscreteActionWrapper(env)
