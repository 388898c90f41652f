"""
TherapeuticEngine: the facade the application talks to.

Wires technique selection, journey building and the state machine
together, keeps the transient SessionState in sync, and returns pydantic
response models.

Usage:
    engine = TherapeuticEngine.with_shared_classifier()
    first = await engine.begin_journey(SessionAttributes(intensity=4, topic="Money", emotion="anxious"))
    nxt = engine.advance()
    alt = engine.request_alternative()
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..api.schemas import (
    AdvanceResponse,
    AlternativeResponse,
    BeginJourneyRequest,
    BeginJourneyResponse,
    CalmingExerciseData,
    ModelStatus,
)
from ..content.store import ContentStore
from ..llm.classifier import ClassificationAdapter
from ..llm.config import ModelConfig
from ..llm.gate import ProgressCallback, get_model_gate
from .journey import JourneyBuilder
from .model import Journey, SessionAttributes, TechniqueId
from .session import SCREEN_CALMING, SCREEN_COMPLETE, SCREEN_JOURNEY, SessionState
from .state_machine import JourneyState, JourneyStateMachine
from .technique import select_technique
from .utils import preview

logger = logging.getLogger(__name__)


class TherapeuticEngine:
    """One user's journey engine. Holds at most one live journey."""

    def __init__(
        self,
        content: Optional[ContentStore] = None,
        adapter: Optional[ClassificationAdapter] = None,
    ):
        self.content = content or ContentStore.default()
        self.adapter = adapter
        if adapter is not None:
            adapter.gate.acquire()
        self.builder = JourneyBuilder(self.content, adapter)
        self.machine = JourneyStateMachine(self.builder)
        self.session = SessionState()

    @classmethod
    def with_shared_classifier(
        cls,
        content: Optional[ContentStore] = None,
        config: Optional[ModelConfig] = None,
    ) -> "TherapeuticEngine":
        """Engine backed by the process-wide model gate."""
        config = config or ModelConfig.from_env()
        return cls(content, ClassificationAdapter(get_model_gate(), config))

    def close(self) -> None:
        """Drop the live journey and release the shared classifier."""
        self.reset()
        if self.adapter is not None:
            self.adapter.gate.release()
            self.adapter = None
            self.builder.adapter = None

    # ── Classifier ──────────────────────────────────────────────────────

    @property
    def classifier_available(self) -> bool:
        return self.adapter is not None and self.adapter.is_available

    def model_status(self) -> ModelStatus:
        if self.adapter is None:
            return ModelStatus(state="unavailable", progress=0.0, stage="No classifier configured")
        gate = self.adapter.gate
        return ModelStatus(state=gate.state.value, progress=gate.progress, stage=gate.stage)

    async def preload_model(
        self, progress_callback: Optional[ProgressCallback] = None
    ) -> ModelStatus:
        """Load the classifier ahead of time, reporting progress if asked."""
        if self.adapter is None:
            return self.model_status()
        gate = self.adapter.gate
        if progress_callback is not None:
            gate.add_progress_listener(progress_callback)
        try:
            await gate.ensure_loaded()
        finally:
            if progress_callback is not None:
                gate.remove_progress_listener(progress_callback)
        return self.model_status()

    # ── Journey ─────────────────────────────────────────────────────────

    @property
    def current_journey(self) -> Optional[Journey]:
        return self.machine.journey

    @property
    def state(self) -> Optional[JourneyState]:
        return self.machine.state

    async def begin_journey(
        self, attrs: Union[SessionAttributes, BeginJourneyRequest]
    ) -> BeginJourneyResponse:
        """Select a technique, build its steps and make them the live journey."""
        if isinstance(attrs, BeginJourneyRequest):
            attrs = SessionAttributes(**attrs.model_dump())

        technique = select_technique(attrs, self.classifier_available)
        logger.info(
            f"[Engine] Beginning {technique.value} journey "
            f"(intensity={attrs.intensity}, topic={attrs.topic}, emotion={attrs.emotion})"
        )
        if attrs.has_free_text:
            logger.debug(f"[Engine] Free text: '{preview(attrs.free_text)}'")

        steps = await self.builder.build(technique, attrs)
        journey = Journey(technique=technique, steps=steps)
        self.machine.start(journey, attrs)

        self.session.attributes = attrs
        self.session.update("current_technique", technique.value)
        self.session.update("journey_sequence", [s.to_dict() for s in steps])
        self.session.update("current_step", 0)
        self.session.update("total_steps", len(steps))
        self.session.update("alternative_attempts", 0)
        self.session.update("completion_summary", None)
        self.session.update("current_screen", SCREEN_JOURNEY)

        first = steps[0]
        calming = None
        if technique is TechniqueId.ACT:
            calming = CalmingExerciseData(**self.content.calming_exercise(attrs.topic).to_dict())
        return BeginJourneyResponse(
            technique=technique.value,
            first_step_content=first.content,
            total_steps=len(steps),
            kind=first.kind.value,
            calming_exercise=calming,
        )

    def advance(self) -> AdvanceResponse:
        """'This feels better'. Raises NoActiveJourneyError with no live journey."""
        result = self.machine.advance()
        self.session.update("alternative_attempts", 0)
        self.session.update("current_step", result["step"] - (0 if result["is_complete"] else 1))
        if result["is_complete"]:
            self.session.update("completion_summary", result["content"])
            self.session.update("current_screen", SCREEN_COMPLETE)
        return AdvanceResponse(
            content=result["content"],
            step=result["step"],
            total_steps=result["total_steps"],
            is_complete=result["is_complete"],
            kind=result["kind"],
        )

    def request_alternative(self) -> AlternativeResponse:
        """'Try another angle'. Raises NoActiveJourneyError with no live journey."""
        result = self.machine.request_alternative()
        calming = None
        if result["requires_calming_flow"]:
            calming = CalmingExerciseData(**result["calming_exercise"])
            journey = self.machine.journey
            self.session.update("current_technique", journey.technique.value)
            self.session.update("journey_sequence", [s.to_dict() for s in journey.steps])
            self.session.update("current_step", 0)
            self.session.update("total_steps", journey.total_steps)
            self.session.update("current_screen", SCREEN_CALMING)
        self.session.update("alternative_attempts", self.session.alternative_attempts + 1)
        return AlternativeResponse(
            content=result["content"],
            is_alternative=result["is_alternative"],
            requires_calming_flow=result["requires_calming_flow"],
            calming_exercise=calming,
        )

    def reset(self) -> None:
        """Start over. No effect when no journey exists."""
        if self.machine.journey is None:
            return
        self.machine.reset()
        self.session.clear()
