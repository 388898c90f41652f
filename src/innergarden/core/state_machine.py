"""
JourneyStateMachine: step/retry tracking for the one live journey.

States:
    Active(index, retry_count) --advance past last step--> Complete
    Active --second alternative on a step--> DivertedToCalming
    DivertedToCalming --advance--> Complete

Progress and retries live inside the Active state value, so each
transition is a pure function of (state, journey). The class around them
only holds the current values and produces the payloads the UI renders.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..content import templates
from ..content.store import CalmingExercise
from .errors import NoActiveJourneyError
from .journey import JourneyBuilder
from .model import Journey, SessionAttributes, TechniqueId
from .technique import HIGH_INTENSITY_THRESHOLD

logger = logging.getLogger(__name__)

MAX_ALTERNATIVE_ATTEMPTS = 2
MEDIUM_INTENSITY_THRESHOLD = 4


@dataclass(frozen=True)
class Active:
    index: int = 0
    retry_count: int = 0


@dataclass(frozen=True)
class DivertedToCalming:
    exercise: CalmingExercise


@dataclass(frozen=True)
class Complete:
    summary: str


JourneyState = Union[Active, DivertedToCalming, Complete]


# ── Pure transitions ────────────────────────────────────────────────────────

def next_on_advance(state: Active, total_steps: int) -> Optional[Active]:
    """Move one step forward; None means the journey has run out of steps."""
    index = state.index + 1
    if index >= total_steps:
        return None
    return Active(index=index, retry_count=0)


def next_on_alternative(state: Active) -> Optional[Active]:
    """Count one more retry; None means the user is stuck and should be diverted."""
    retries = state.retry_count + 1
    if retries >= MAX_ALTERNATIVE_ATTEMPTS:
        return None
    return Active(index=state.index, retry_count=retries)


def closing_summary(attrs: SessionAttributes, technique: TechniqueId) -> str:
    """Short recap shown when a journey completes."""
    topic = attrs.topic.lower() if attrs.topic else templates.DEFAULT_TOPIC_PHRASE
    emotion = f"feeling {attrs.emotion}" if attrs.emotion else templates.DEFAULT_EMOTION_PHRASE

    if technique is TechniqueId.ACT:
        return templates.SUMMARY_ACT.format(topic=topic)
    if technique is TechniqueId.CLASSIFIER_DRIVEN:
        return templates.SUMMARY_CLASSIFIER.format(topic=topic)
    if attrs.intensity >= HIGH_INTENSITY_THRESHOLD:
        return templates.SUMMARY_HIGH_INTENSITY.format(topic=topic)
    if attrs.intensity >= MEDIUM_INTENSITY_THRESHOLD:
        return templates.SUMMARY_MEDIUM_INTENSITY.format(topic=topic, emotion=emotion)
    return templates.SUMMARY_LOW_INTENSITY.format(topic=topic)


# ── State machine ───────────────────────────────────────────────────────────

class JourneyStateMachine:
    """
    Holds the live journey and applies the user's two transitions.

    Usage:
        sm = JourneyStateMachine(builder)
        sm.start(journey, attrs)
        sm.advance()               # "this feels better"
        sm.request_alternative()   # "try another angle"
    """

    def __init__(self, builder: JourneyBuilder):
        self.builder = builder
        self.journey: Optional[Journey] = None
        self.attrs: Optional[SessionAttributes] = None
        self.state: Optional[JourneyState] = None

    @property
    def is_active(self) -> bool:
        return isinstance(self.state, (Active, DivertedToCalming))

    @property
    def is_complete(self) -> bool:
        return isinstance(self.state, Complete)

    @property
    def is_diverted(self) -> bool:
        return isinstance(self.state, DivertedToCalming)

    @property
    def current_index(self) -> int:
        return self.state.index if isinstance(self.state, Active) else 0

    @property
    def retry_count(self) -> int:
        return self.state.retry_count if isinstance(self.state, Active) else 0

    def start(self, journey: Journey, attrs: SessionAttributes) -> None:
        self.journey = journey
        self.attrs = attrs
        self.state = Active()

    def reset(self) -> None:
        """Discard the journey. Safe to call when nothing is live."""
        if self.journey is not None:
            logger.info("[JourneyStateMachine] Journey reset")
        self.journey = None
        self.attrs = None
        self.state = None

    def _require_live(self) -> Journey:
        if self.journey is None or not self.is_active:
            raise NoActiveJourneyError()
        return self.journey

    def advance(self) -> Dict[str, Any]:
        """User says the current step helped: move on or finish."""
        journey = self._require_live()

        if isinstance(self.state, DivertedToCalming):
            return self._complete(journey, step=journey.total_steps)

        nxt = next_on_advance(self.state, journey.total_steps)
        if nxt is None:
            return self._complete(journey, step=journey.total_steps)

        self.state = nxt
        step = journey.steps[nxt.index]
        return {
            "content": step.content,
            "kind": step.kind.value,
            "step": nxt.index + 1,
            "total_steps": journey.total_steps,
            "is_alternative": False,
            "is_complete": False,
        }

    def request_alternative(self) -> Dict[str, Any]:
        """User wants another angle: rephrase, or divert after repeated asks."""
        journey = self._require_live()

        if isinstance(self.state, DivertedToCalming):
            return self._calming_payload(self.state.exercise)

        nxt = next_on_alternative(self.state)
        if nxt is None:
            return self._divert(journey)

        self.state = nxt
        step = journey.steps[nxt.index]
        return {
            "content": step.alternative_or_content,
            "kind": step.kind.value,
            "step": nxt.index + 1,
            "total_steps": journey.total_steps,
            "is_alternative": True,
            "requires_calming_flow": False,
            "is_complete": False,
        }

    def _divert(self, journey: Journey) -> Dict[str, Any]:
        topic = self.attrs.topic if self.attrs else None
        exercise = self.builder.content.calming_exercise(topic)
        self.journey = Journey(
            technique=TechniqueId.ACT,
            steps=self.builder.build_calming(topic),
            diverted_from=journey.diverted_from or journey.technique,
        )
        self.state = DivertedToCalming(exercise=exercise)
        logger.info(
            f"[JourneyStateMachine] Diverting {journey.technique.value} journey to calming exercise"
        )
        return self._calming_payload(exercise)

    def _calming_payload(self, exercise: CalmingExercise) -> Dict[str, Any]:
        return {
            "content": exercise.instructions,
            "kind": "exercise",
            "step": 1,
            "total_steps": 1,
            "is_alternative": False,
            "requires_calming_flow": True,
            "calming_exercise": exercise.to_dict(),
            "is_complete": False,
        }

    def _complete(self, journey: Journey, step: int) -> Dict[str, Any]:
        summary = closing_summary(self.attrs or SessionAttributes(), journey.technique)
        self.state = Complete(summary=summary)
        logger.info(f"[JourneyStateMachine] {journey.technique.value} journey complete")
        return {
            "content": summary,
            "kind": "completion",
            "step": step,
            "total_steps": journey.total_steps,
            "is_alternative": False,
            "is_complete": True,
        }
