from __future__ import annotations

import argparse
import logging
import random
from typing import Dict, List, Optional, Tuple

import gymnasium as gym

# Ensure envs are registered
import ocho_puzzle.env  # noqa: F401
from ocho_puzzle.game import GameConfig, GameMode, find_placement_order


Action = Tuple[int, int, int, int]


def solver_actions(env: gym.Env, rng: random.Random) -> List[Action]:
    """Plan the whole current hand with the placement-order search."""
    game = env.unwrapped.game
    plan = find_placement_order(game.board, game.hand, rng, attempts=game.config.solver_attempts)
    if not plan:
        return []
    return [(p.slot, p.position[0], p.position[1], 0) for p in plan]


def run_episode(env: gym.Env, policy: str, rng: random.Random, seed: Optional[int] = None,
                max_steps: int = 5_000) -> Dict[str, float]:
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    steps = 0
    pending: List[Action] = []
    terminated = truncated = False
    while not (terminated or truncated) and steps < max_steps:
        if policy == "solver":
            if not pending:
                pending = solver_actions(env, rng)
            action = pending.pop(0) if pending else env.action_space.sample()
        else:
            valid = info.get("valid_actions", [])
            action = rng.choice(valid) if valid else env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        steps += 1
        if not info.get("accepted", True):
            pending = []
    game = env.unwrapped.game
    return {
        "reward": total_reward,
        "score": float(game.score),
        "level": float(game.level),
        "steps": float(steps),
        "lines": float(game.lines_cleared_total),
    }


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play ocho_puzzle automatically and report scores")
    p.add_argument("--policy", choices=["solver", "random"], default="solver")
    p.add_argument("--mode", choices=[m.value for m in GameMode], default=GameMode.GUARANTEED_FIT.value)
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max_steps", type=int, default=5_000)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = GameConfig(mode=GameMode(args.mode), random_seed=args.seed)
    env = gym.make("OchoPuzzle-8x8-v0", config=config, disable_env_checker=True)
    rng = random.Random(args.seed)
    try:
        for ep in range(args.episodes):
            seed = None if args.seed is None else args.seed + ep
            stats = run_episode(env, args.policy, rng, seed=seed, max_steps=args.max_steps)
            print(f"episode {ep + 1}/{args.episodes}  score={stats['score']:.0f}  level={stats['level']:.0f}  "
                  f"lines={stats['lines']:.0f}  steps={stats['steps']:.0f}  reward={stats['reward']:.1f}")
    finally:
        env.close()


if __name__ == "__main__":  # pragma: no cover
    main()
