from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from .clearing import LineClear
from .grid import PlacedBlock
from .shapes import Shape


logger = logging.getLogger(__name__)


@dataclass
class ScoringRules:
    shapes_per_tier: int = 10
    points_per_tier: int = 10
    level_progress_per_line: float = 6.6666667
    level_progress_threshold: float = 100.0
    freshness_decrement: float = 0.1

    def __post_init__(self) -> None:
        if self.shapes_per_tier <= 0:
            raise ValueError("shapes_per_tier must be positive")
        if self.level_progress_threshold <= 0:
            raise ValueError("level_progress_threshold must be positive")

    def tier_increments(self, block: PlacedBlock, total_shapes_placed: int) -> int:
        return (total_shapes_placed // self.shapes_per_tier) - (block.placed_at_count // self.shapes_per_tier)

    def current_point_value(self, block: PlacedBlock, total_shapes_placed: int) -> int:
        """Base value + clear bonuses + points for every tier crossed since placement."""
        tiers = self.tier_increments(block, total_shapes_placed)
        return block.point_value + block.line_clear_bonus + tiers * self.points_per_tier


@dataclass
class ClearOutcome:
    points: int = 0
    blocks: List[PlacedBlock] = field(default_factory=list)
    destroyed: int = 0
    cells_removed: int = 0


def resolve_line_clear(blocks: Sequence[PlacedBlock], lines: LineClear, total_shapes_placed: int,
                       rules: ScoringRules) -> ClearOutcome:
    """Score a clear event and trim the blocks it hit.

    Every block with a cell in a cleared line contributes its current value.
    Blocks are then cut down to their surviving cells; the survivors, hit or
    not, gain one bonus point per line cleared and lose some freshness.
    """
    if not lines:
        return ClearOutcome(points=0, blocks=list(blocks))

    outcome = ClearOutcome()
    for block in blocks:
        cells = block.shape.cells
        kept = [(dx, dy) for dx, dy in cells
                if not lines.covers(block.position[0] + dx, block.position[1] + dy)]
        if len(kept) < len(cells):
            outcome.points += rules.current_point_value(block, total_shapes_placed)
            outcome.cells_removed += len(cells) - len(kept)
        if not kept:
            outcome.destroyed += 1
            logger.debug("[CLEAR] removed entire block at %s", block.position)
            continue
        if len(kept) < len(cells):
            # Offsets stay relative to the placement origin so the cells do not move
            block = replace(block, shape=Shape.from_cells(kept))
        outcome.blocks.append(block)

    for block in outcome.blocks:
        block.line_clear_bonus += lines.count
        block.freshness = max(0.0, block.freshness - rules.freshness_decrement)

    logger.debug("[CLEAR] rows=%s columns=%s points=%d destroyed=%d cells=%d",
                 lines.rows, lines.columns, outcome.points, outcome.destroyed, outcome.cells_removed)
    return outcome


def advance_level(level: int, progress: float, lines_cleared: int, rules: ScoringRules) -> Tuple[int, float]:
    progress += lines_cleared * rules.level_progress_per_line
    while progress >= rules.level_progress_threshold:
        progress -= rules.level_progress_threshold
        level += 1
    return level, progress


def cleanup_awards(blocks: Sequence[PlacedBlock], total_shapes_placed: int,
                   rules: ScoringRules) -> List[Tuple[int, int, int]]:
    """Per-cell ``(x, y, points)`` awards paid out one at a time when the game ends."""
    awards: List[Tuple[int, int, int]] = []
    for block in blocks:
        value = rules.current_point_value(block, total_shapes_placed)
        for x, y in block.absolute_cells():
            awards.append((x, y, value))
    return awards
