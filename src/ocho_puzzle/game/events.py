from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict


class EventKind(str, Enum):
    PLACED = "placed"
    LINES_CLEARED = "lines_cleared"
    HAND_REFILLED = "hand_refilled"
    GAME_OVER = "game_over"
    RESET = "reset"


@dataclass(frozen=True)
class GameEvent:
    """Notification for outside layers (storage, audio, UI); the core never persists."""

    kind: EventKind
    score: int
    data: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[GameEvent], None]
