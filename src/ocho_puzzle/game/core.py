from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .clearing import clear, find_full_lines, lines_completed_by_hypothetical_placement
from .events import EventKind, GameEvent, Listener
from .game_over import GameOverDetector, GameState
from .generator import GameMode, generate_hand
from .grid import Board, PlacedBlock
from .rules import ScoringRules, advance_level, cleanup_awards, resolve_line_clear
from .shapes import NOT_FOUND, Coordinate, Shape, ShapeCatalog, default_catalog, rotate
from .solver import find_placement_order
from .validator import can_place


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    grid_size: int = 8
    pieces_per_set: int = 3
    random_seed: Optional[int] = None
    mode: GameMode = GameMode.GUARANTEED_FIT
    allow_rotation: bool = False
    generator_attempts: int = 20
    solver_attempts: int = 100

    def __post_init__(self) -> None:
        self.mode = GameMode(self.mode)
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.pieces_per_set <= 0:
            raise ValueError(f"pieces_per_set must be positive, got {self.pieces_per_set}")
        if self.generator_attempts <= 0 or self.solver_attempts <= 0:
            raise ValueError("attempt budgets must be positive")


@dataclass
class PlacementResult:
    accepted: bool
    cleared_rows: List[int] = field(default_factory=list)
    cleared_columns: List[int] = field(default_factory=list)
    score_delta: int = 0
    hand_refilled: bool = False
    game_over: bool = False
    # (x, y, points) paid out cell by cell when this move ended the game
    cleanup_awards: List[Tuple[int, int, int]] = field(default_factory=list)


@dataclass
class PreviewResult:
    valid: bool
    would_clear_rows: List[int] = field(default_factory=list)
    would_clear_columns: List[int] = field(default_factory=list)


@dataclass
class CellView:
    color: str
    point_value: int
    freshness: float
    shape_index: int


@dataclass
class BoardSnapshot:
    occupancy: np.ndarray
    cells: List[List[Optional[CellView]]]


@dataclass
class HandSlot:
    shape: Shape
    shape_index: int
    color: str
    point_value: int


class BlockPuzzleGame:
    """Rules engine for the 8x8 placement puzzle.

    Owns the board, the hand and the score/level counters. Every request is
    handled synchronously: validate, commit, clear, score, refill, then check
    for game over.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 catalog: Optional[ShapeCatalog] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.catalog = catalog or default_catalog()
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.grid_size)
        self.detector = GameOverDetector(self.config.allow_rotation)
        self._listeners: List[Listener] = []
        self._pending: List[GameEvent] = []
        self.hand: List[Optional[Shape]] = []
        self.score = 0
        self.level = 1
        self.level_progress = 0.0
        self.total_shapes_placed = 0
        self.lines_cleared_total = 0
        self.last_cleanup_awards: List[Tuple[int, int, int]] = []
        self.reset()

    # ---------- Settings / listeners ----------
    @property
    def mode(self) -> GameMode:
        return self.config.mode

    @mode.setter
    def mode(self, value: GameMode) -> None:
        # Read by the generator on the next refill only
        self.config.mode = GameMode(value)

    @property
    def game_over(self) -> bool:
        return self.detector.over

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, kind: EventKind, **data: Any) -> None:
        # Queued; listeners only run once the current request has finished
        self._pending.append(GameEvent(kind=kind, score=self.score, data=data))

    def _flush(self) -> None:
        while self._pending:
            event = self._pending.pop(0)
            for listener in list(self._listeners):
                listener(event)

    # ---------- Lifecycle ----------
    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        logger.debug("[RESET] previous blocks: %d, score: %d", len(self.board.blocks), self.score)
        self.board.reset()
        self.detector.reset()
        self.score = 0
        self.level = 1
        self.level_progress = 0.0
        self.total_shapes_placed = 0
        self.lines_cleared_total = 0
        self.last_cleanup_awards = []
        self.hand = list(self._deal())
        self._emit(EventKind.RESET)
        self._evaluate_game_over()
        self._flush()

    def _deal(self) -> List[Shape]:
        return generate_hand(
            self.board,
            self.config.mode,
            self.rng,
            count=self.config.pieces_per_set,
            catalog=self.catalog,
            attempts_per_slot=self.config.generator_attempts,
        )

    # ---------- Placement ----------
    def _resolve_slot(self, slot: int, rotation: int) -> Optional[Shape]:
        if not 0 <= slot < len(self.hand):
            return None
        shape = self.hand[slot]
        if shape is None:
            return None
        if rotation % 4:
            if not self.config.allow_rotation:
                return None
            shape = rotate(shape, rotation)
        return shape

    def request_placement(self, slot: int, position: Coordinate, rotation: int = 0) -> PlacementResult:
        if self.detector.over:
            return PlacementResult(accepted=False, game_over=True)
        slot = int(slot)
        shape = self._resolve_slot(slot, int(rotation))
        position = (int(position[0]), int(position[1]))
        if shape is None or not can_place(self.board, shape, position):
            logger.debug("[PLACE] rejected slot=%s at %s rotation=%s", slot, position, rotation)
            return PlacementResult(accepted=False)

        index = self.catalog.canonical_index(shape)
        assert index != NOT_FOUND, f"hand shape {shape.cells} is not in the catalog"
        self.board.add_block(PlacedBlock(
            shape=shape,
            position=position,
            color=self.catalog.color_for(index),
            point_value=self.catalog.base_point_value(index),
            shape_index=index,
            placed_at_count=self.total_shapes_placed,
        ))
        self.total_shapes_placed += 1
        self.hand[slot] = None
        logger.debug("[PLACE] shape %d at %s, total blocks: %d", index, position, len(self.board.blocks))
        self._emit(EventKind.PLACED, slot=slot, position=position, shape_index=index)

        result = PlacementResult(accepted=True)
        lines = find_full_lines(self.board)
        if lines:
            clear(self.board, lines.rows, lines.columns)
            outcome = resolve_line_clear(self.board.blocks, lines, self.total_shapes_placed, self.rules)
            self.board.blocks = outcome.blocks
            self.score += outcome.points
            self.lines_cleared_total += lines.count
            self.level, self.level_progress = advance_level(self.level, self.level_progress, lines.count, self.rules)
            result.cleared_rows = list(lines.rows)
            result.cleared_columns = list(lines.columns)
            result.score_delta = outcome.points
            self._emit(EventKind.LINES_CLEARED, rows=result.cleared_rows, columns=result.cleared_columns,
                       points=outcome.points, level=self.level)

        if all(s is None for s in self.hand):
            self.hand = list(self._deal())
            result.hand_refilled = True
            logger.debug("[HAND] refilled in %s mode", self.config.mode.value)
            self._emit(EventKind.HAND_REFILLED, mode=self.config.mode.value)

        result.game_over = self._evaluate_game_over()
        result.cleanup_awards = list(self.last_cleanup_awards) if result.game_over else []
        self._flush()
        return result

    def preview_placement(self, shape: Shape, position: Coordinate) -> PreviewResult:
        position = (int(position[0]), int(position[1]))
        if not can_place(self.board, shape, position):
            return PreviewResult(valid=False)
        lines = lines_completed_by_hypothetical_placement(self.board, shape, position)
        return PreviewResult(valid=True, would_clear_rows=lines.rows, would_clear_columns=lines.columns)

    def auto_place_hand(self) -> List[PlacementResult]:
        """Place the current hand using the placement-order search; no-op when nothing fits."""
        if self.detector.over:
            return []
        plan = find_placement_order(self.board, self.hand, self.rng, attempts=self.config.solver_attempts)
        if not plan:
            return []
        results: List[PlacementResult] = []
        for step in plan:
            result = self.request_placement(step.slot, step.position)
            results.append(result)
            if not result.accepted or result.game_over or result.hand_refilled:
                break
        return results

    # ---------- Game over ----------
    def check_game_over(self) -> bool:
        over = self._evaluate_game_over()
        self._flush()
        return over

    def _evaluate_game_over(self) -> bool:
        was_over = self.detector.over
        state = self.detector.evaluate(self.board, self.hand)
        if state is GameState.OVER and not was_over:
            self._finish_game()
        return state is GameState.OVER

    def _finish_game(self) -> None:
        awards = cleanup_awards(self.board.blocks, self.total_shapes_placed, self.rules)
        for _, _, points in awards:
            self.score += points
        self.last_cleanup_awards = awards
        self.board.reset()
        logger.info("[GAME OVER] final score %d after %d shapes", self.score, self.total_shapes_placed)
        self._emit(EventKind.GAME_OVER, cleanup_awards=awards, level=self.level,
                   shapes_placed=self.total_shapes_placed)

    # ---------- Queries ----------
    def valid_actions(self) -> List[Tuple[int, int, int, int]]:
        """List of (slot, x, y, rotation) placements legal right now."""
        if self.detector.over:
            return []
        rotations = range(4) if self.config.allow_rotation else (0,)
        actions: List[Tuple[int, int, int, int]] = []
        for slot in range(len(self.hand)):
            for r in rotations:
                shape = self._resolve_slot(slot, r)
                if shape is None:
                    continue
                size = self.board.size
                for y in range(size):
                    for x in range(size):
                        if can_place(self.board, shape, (x, y)):
                            actions.append((slot, x, y, r))
        return actions

    def slot_indices(self) -> List[int]:
        return [NOT_FOUND if s is None else self.catalog.canonical_index(s) for s in self.hand]

    def board_snapshot(self) -> BoardSnapshot:
        size = self.board.size
        cells: List[List[Optional[CellView]]] = [[None] * size for _ in range(size)]
        for block in self.board.blocks:
            value = self.rules.current_point_value(block, self.total_shapes_placed)
            for x, y in block.absolute_cells():
                cells[y][x] = CellView(block.color, value, block.freshness, block.shape_index)
        return BoardSnapshot(occupancy=self.board.copy_grid(), cells=cells)

    def hand_snapshot(self) -> List[Optional[HandSlot]]:
        slots: List[Optional[HandSlot]] = []
        for shape in self.hand:
            if shape is None:
                slots.append(None)
                continue
            index = self.catalog.canonical_index(shape)
            slots.append(HandSlot(shape, index, self.catalog.color_for(index), self.catalog.base_point_value(index)))
        return slots

    def get_state(self) -> Dict[str, Any]:
        return {
            "grid": self.board.copy_grid(),
            "hand": self.slot_indices(),
            "pieces_remaining": sum(1 for s in self.hand if s is not None),
            "score": self.score,
            "level": self.level,
            "level_progress": self.level_progress,
            "total_lines_cleared": self.lines_cleared_total,
            "total_shapes_placed": self.total_shapes_placed,
            "game_over": self.detector.over,
        }
