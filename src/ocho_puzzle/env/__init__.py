"""Gymnasium environments for ocho_puzzle."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .block_puzzle_env import OchoPuzzleEnv

# Register default 8x8 placement environment
register(
    id="OchoPuzzle-8x8-v0",
    entry_point="ocho_puzzle.env.block_puzzle_env:OchoPuzzleEnv",
)

__all__ = ["OchoPuzzleEnv"]
