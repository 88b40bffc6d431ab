"""Game module for ocho_puzzle.

Exports the rules core and supporting classes:
- ShapeCatalog / Shape: polyomino pool, rotation and canonical matching
- Board / PlacedBlock: occupancy grid and placed-block metadata
- validator / clearing helpers: placement legality and line clears
- ScoringRules: tiered point values and level progress
- generate_hand / GameMode: unconstrained and guaranteed-fit dealing
- find_placement_order: greedy shuffle search used for auto-play
- GameOverDetector: active/over state machine
- BlockPuzzleGame: main game state and external interface
"""

from .shapes import NOT_FOUND, Shape, ShapeCatalog, ShapeKind, canonical_index, default_catalog, rotate
from .grid import Board, PlacedBlock, format_grid
from .validator import all_valid_positions, can_place, can_place_any
from .clearing import (
    LineClear,
    clear,
    clear_full_lines,
    full_columns,
    full_rows,
    lines_completed_by_hypothetical_placement,
)
from .rules import ScoringRules, resolve_line_clear
from .generator import GameMode, generate_hand
from .solver import PlannedPlacement, find_placement_order
from .game_over import GameOverDetector, GameState, is_game_over
from .events import EventKind, GameEvent
from .core import BlockPuzzleGame, GameConfig, PlacementResult, PreviewResult

__all__ = [
    "NOT_FOUND",
    "Shape",
    "ShapeCatalog",
    "ShapeKind",
    "canonical_index",
    "default_catalog",
    "rotate",
    "Board",
    "PlacedBlock",
    "format_grid",
    "all_valid_positions",
    "can_place",
    "can_place_any",
    "LineClear",
    "clear",
    "clear_full_lines",
    "full_columns",
    "full_rows",
    "lines_completed_by_hypothetical_placement",
    "ScoringRules",
    "resolve_line_clear",
    "GameMode",
    "generate_hand",
    "PlannedPlacement",
    "find_placement_order",
    "GameOverDetector",
    "GameState",
    "is_game_over",
    "EventKind",
    "GameEvent",
    "BlockPuzzleGame",
    "GameConfig",
    "PlacementResult",
    "PreviewResult",
]
