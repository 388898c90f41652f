"""
Transient, memory-only session state.

Mirrors what the engine is doing so a UI can render it. Nothing here is
ever written to disk; clear() blanks every field in place.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .model import SessionAttributes

logger = logging.getLogger(__name__)

SCREEN_LANDING = "landing"
SCREEN_JOURNEY = "journey"
SCREEN_CALMING = "act-defusion"
SCREEN_COMPLETE = "complete"


@dataclass
class SessionState:
    current_screen: str = SCREEN_LANDING
    attributes: Optional[SessionAttributes] = None
    current_technique: Optional[str] = None
    journey_sequence: List[Dict[str, Any]] = field(default_factory=list)
    current_step: int = 0
    total_steps: int = 0
    alternative_attempts: int = 0
    completion_summary: Optional[str] = None
    started_at: float = field(default_factory=time.time)
    # (key, value) in the order they were written
    updates: List[tuple] = field(default_factory=list, repr=False)

    def update(self, key: str, value: Any) -> None:
        if not hasattr(self, key) or key == "updates":
            raise KeyError(f"Unknown session key: {key}")
        setattr(self, key, value)
        self.updates.append((key, value))

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the visible fields."""
        return {
            "current_screen": self.current_screen,
            "current_technique": self.current_technique,
            "journey_sequence": [dict(s) for s in self.journey_sequence],
            "current_step": self.current_step,
            "total_steps": self.total_steps,
            "alternative_attempts": self.alternative_attempts,
            "completion_summary": self.completion_summary,
        }

    def clear(self) -> None:
        """Blank everything; called on reset and on exit."""
        self.current_screen = SCREEN_LANDING
        self.attributes = None
        self.current_technique = None
        self.journey_sequence = []
        self.current_step = 0
        self.total_steps = 0
        self.alternative_attempts = 0
        self.completion_summary = None
        self.started_at = time.time()
        self.updates.clear()
        logger.debug("[SessionState] Cleared")
