"""
JourneyBuilder: turn a technique choice into a fixed, ordered step list.

    act               -> one calming-exercise step
    classifier-driven -> one reframe step per buffet statement for the
                         classified label (generic_fallback when unsure)
    cbt / socratic    -> authored sequence for topic/emotion, filtered to
                         the technique's tag, else a supportive fallback

The builder never raises for missing content or classifier trouble, and
never returns an empty sequence.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..content import templates
from ..content.store import ContentStep, ContentStore
from ..llm.classifier import ClassificationAdapter
from .errors import ContentMissingError, InvalidInputError
from .model import (
    FALLBACK_LABEL,
    ClassificationResult,
    SessionAttributes,
    Step,
    StepKind,
    TechniqueId,
)

logger = logging.getLogger(__name__)

TAG_CBT = "cbt_reframe"
TAG_SOCRATIC = "socratic"

TECHNIQUE_TAGS: Dict[TechniqueId, str] = {
    TechniqueId.CBT: TAG_CBT,
    TechniqueId.SOCRATIC: TAG_SOCRATIC,
}

TAG_KINDS: Dict[str, StepKind] = {
    TAG_CBT: StepKind.REFRAME,
    TAG_SOCRATIC: StepKind.QUESTION,
    "act_defusion": StepKind.EXERCISE,
    "exercise": StepKind.EXERCISE,
    "fallback": StepKind.FALLBACK,
}


def fallback_sequence() -> Tuple[Step, ...]:
    """Fixed supportive journey for topic/emotion pairs with no content."""
    return tuple(
        Step(content=content, alternative=alternative, kind=StepKind.FALLBACK, ordinal=i)
        for i, (content, alternative) in enumerate(templates.FALLBACK_SEQUENCE)
    )


class JourneyBuilder:
    """Builds step sequences from content and (optionally) classification."""

    def __init__(
        self,
        content: ContentStore,
        adapter: Optional[ClassificationAdapter] = None,
    ):
        self.content = content
        self.adapter = adapter

    async def build(
        self, technique: TechniqueId, attrs: SessionAttributes
    ) -> Tuple[Step, ...]:
        try:
            if technique is TechniqueId.ACT:
                steps = self.build_calming(attrs.topic)
            elif technique is TechniqueId.CLASSIFIER_DRIVEN:
                steps = await self._build_from_buffet(attrs.free_text)
            else:
                steps = self._build_guided(technique, attrs.topic, attrs.emotion)
        except (ContentMissingError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"[JourneyBuilder] Sequence build failed, using generic fallback: {e}")
            steps = fallback_sequence()

        logger.info(f"[JourneyBuilder] Built {technique.value} journey with {len(steps)} steps")
        return steps

    def build_calming(self, topic: Optional[str]) -> Tuple[Step, ...]:
        """Single-step journey holding the calming exercise for `topic`."""
        exercise = self.content.calming_exercise(topic)
        return (
            Step(
                content=exercise.instructions,
                alternative=templates.CALMING_ALTERNATIVE,
                kind=StepKind.EXERCISE,
                ordinal=0,
            ),
        )

    # ── classifier-driven ───────────────────────────────────────────────

    async def _classify(self, text: str) -> ClassificationResult:
        if self.adapter is None:
            logger.warning("[JourneyBuilder] No classifier configured, using fallback")
            return ClassificationResult.fallback()
        try:
            return await self.adapter.classify(text)
        except InvalidInputError:
            logger.warning("[JourneyBuilder] No usable free text, using fallback")
            return ClassificationResult.fallback()

    async def _build_from_buffet(self, text: str) -> Tuple[Step, ...]:
        result = await self._classify(text)
        buffet = self.content.buffet()

        if result.is_high_confidence and buffet.get(result.top_label):
            label = result.top_label
        else:
            label = FALLBACK_LABEL
        logger.info(
            f"[JourneyBuilder] Buffet label {label} "
            f"(classified {result.top_label} at {result.top_confidence:.2f})"
        )

        template = (
            templates.BUFFET_FALLBACK_ALTERNATIVE
            if result.is_fallback
            else templates.BUFFET_ALTERNATIVE
        )
        return tuple(
            Step(
                content=statement,
                alternative=template.format(statement=statement),
                kind=StepKind.REFRAME,
                ordinal=i,
            )
            for i, statement in enumerate(buffet[label])
        )

    # ── cbt / socratic ──────────────────────────────────────────────────

    def _build_guided(
        self,
        technique: TechniqueId,
        topic: Optional[str],
        emotion: Optional[str],
    ) -> Tuple[Step, ...]:
        try:
            authored = self.content.sequence(topic, emotion)
        except ContentMissingError:
            logger.info(f"[JourneyBuilder] No content for {topic}/{emotion}, using fallback sequence")
            return fallback_sequence()

        selected = _filter_by_tag(authored, TECHNIQUE_TAGS.get(technique))
        return tuple(
            Step(
                content=entry.content,
                alternative=entry.alternative,
                kind=TAG_KINDS.get(entry.type, StepKind.REFRAME),
                ordinal=i,
            )
            for i, entry in enumerate(selected)
        )


def _filter_by_tag(entries: List[ContentStep], tag: Optional[str]) -> List[ContentStep]:
    """Keep entries with `tag`; if none match, keep the mixed list."""
    if tag is None:
        return entries
    matching = [e for e in entries if e.type == tag]
    return matching or entries
