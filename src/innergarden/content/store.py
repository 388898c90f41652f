"""
Read-only content store for therapeutic sequences, calming exercises and
the thought buffet.

Content comes from the built-in library or from a directory of authored
JSON files. Lookups that have no answer raise ContentMissingError; the
journey builder is responsible for absorbing it.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.errors import ContentMissingError
from ..core.model import FALLBACK_LABEL
from ..core.utils import normalize_label
from . import library

logger = logging.getLogger(__name__)

THERAPEUTIC_FILE = "therapeutic-content.json"
BUFFET_FILE = "thought-buffet.json"
TOPICS_FILE = "topics.json"
EMOTIONS_FILE = "emotions.json"


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


@dataclass(frozen=True)
class CalmingExercise:
    """An ACT defusion exercise: a short intro plus guided steps."""
    title: str
    instructions: str
    steps: Tuple[str, ...] = ()
    closing: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalmingExercise":
        """Raises KeyError/TypeError for anything that isn't well-formed text."""
        title, instructions = data["title"], data["instructions"]
        steps = data.get("steps", [])
        closing = data.get("closing", "")
        if not _is_text(title) or not _is_text(instructions):
            raise TypeError("title and instructions must be non-empty strings")
        if not isinstance(steps, list) or not all(isinstance(s, str) for s in steps):
            raise TypeError("steps must be a list of strings")
        if not isinstance(closing, str):
            raise TypeError("closing must be a string")
        return cls(title=title, instructions=instructions, steps=tuple(steps), closing=closing)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "instructions": self.instructions,
            "steps": list(self.steps),
            "closing": self.closing,
        }


DEFAULT_CALMING_EXERCISE = CalmingExercise.from_dict(library.LEAVES_ON_A_STREAM)


@dataclass(frozen=True)
class ContentStep:
    """One authored entry from sequences[topic][emotion]."""
    type: str
    content: str
    alternative: Optional[str] = None


@dataclass
class ContentStore:
    """
    Unified access to all therapeutic content.

    Usage:
        store = ContentStore.default()
        steps = store.sequence("Money", "anxious")
        exercise = store.calming_exercise("Money")
        buffet = store.buffet()
    """

    sequences: Dict[str, Dict[str, List[Dict[str, Any]]]] = field(
        default_factory=lambda: copy.deepcopy(library.SEQUENCES)
    )
    exercises: Dict[str, Dict[str, Any]] = field(
        default_factory=lambda: copy.deepcopy(library.ACT_DEFUSION_EXERCISES)
    )
    thought_buffet: Dict[str, List[str]] = field(
        default_factory=lambda: library.THOUGHT_BUFFET
    )
    topic_info: Dict[str, Dict[str, str]] = field(
        default_factory=lambda: copy.deepcopy(library.TOPICS)
    )
    palettes: Dict[str, List[str]] = field(
        default_factory=lambda: copy.deepcopy(library.EMOTION_PALETTES)
    )
    subtopic_triggers: Dict[str, Dict[str, Dict[str, List[str]]]] = field(
        default_factory=lambda: copy.deepcopy(library.SUBTOPIC_TRIGGERS)
    )

    def __post_init__(self):
        self.thought_buffet = _validated_buffet(self.thought_buffet)

    # ── Construction ────────────────────────────────────────────────────

    @classmethod
    def default(cls) -> "ContentStore":
        return cls()

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "ContentStore":
        """
        Load authored JSON content. Each file is optional; anything missing
        or unreadable falls back to the built-in library.
        """
        root = Path(directory)
        kwargs: Dict[str, Any] = {}

        therapeutic = _read_json(root / THERAPEUTIC_FILE)
        if isinstance(therapeutic, dict):
            if isinstance(therapeutic.get("sequences"), dict):
                kwargs["sequences"] = therapeutic["sequences"]
            if isinstance(therapeutic.get("act_defusion_exercises"), dict):
                kwargs["exercises"] = therapeutic["act_defusion_exercises"]
            if isinstance(therapeutic.get("subtopic_triggers"), dict):
                kwargs["subtopic_triggers"] = therapeutic["subtopic_triggers"]

        buffet = _read_json(root / BUFFET_FILE)
        if isinstance(buffet, dict):
            kwargs["thought_buffet"] = buffet

        topics = _read_json(root / TOPICS_FILE)
        if isinstance(topics, dict) and isinstance(topics.get("topics"), list):
            descriptions = topics.get("topicDescriptions", {})
            icons = topics.get("topicIcons", {})
            kwargs["topic_info"] = {
                t: {"description": descriptions.get(t, ""), "icon": icons.get(t, "")}
                for t in topics["topics"]
            }

        emotions = _read_json(root / EMOTIONS_FILE)
        if isinstance(emotions, dict):
            kwargs["palettes"] = {
                topic: [e for e in entry["palette"] if _is_text(e)]
                for topic, entry in emotions.items()
                if isinstance(entry, dict) and isinstance(entry.get("palette"), list)
            }

        logger.info(f"[ContentStore] Loaded {len(kwargs)} content sections from {root}")
        return cls(**kwargs)

    # ── Topics & emotions ───────────────────────────────────────────────

    def topics(self) -> List[str]:
        return list(self.topic_info.keys())

    def topic_description(self, topic: str) -> str:
        return self.topic_info.get(topic, {}).get("description", "")

    def emotion_palette(self, topic: str) -> List[str]:
        """Emotions offered for a topic; short defaults for unknown topics."""
        palette = self.palettes.get(topic)
        if palette:
            return list(palette)
        return list(library.FALLBACK_EMOTIONS.get(topic, library.DEFAULT_EMOTIONS))

    # ── Lookups ─────────────────────────────────────────────────────────

    def calming_exercise(self, topic: Optional[str] = None) -> CalmingExercise:
        """Topic-specific exercise, else the generic one, else the built-in."""
        for key in (topic, "generic"):
            if key and key in self.exercises:
                try:
                    return CalmingExercise.from_dict(self.exercises[key])
                except (KeyError, TypeError) as e:
                    logger.warning(f"[ContentStore] Malformed calming exercise {key!r}: {e}")
        return DEFAULT_CALMING_EXERCISE

    def sequence(self, topic: Optional[str], emotion: Optional[str]) -> List[ContentStep]:
        """Authored steps for a topic/emotion pair, in order."""
        by_emotion = self.sequences.get(topic or "")
        raw = by_emotion.get(emotion or "") if isinstance(by_emotion, dict) else None
        if not isinstance(raw, list):
            raise ContentMissingError(topic or "", emotion or "")

        steps = []
        for entry in raw:
            if not isinstance(entry, dict) or not _is_text(entry.get("content")):
                logger.warning(f"[ContentStore] Skipping malformed step in {topic}/{emotion}")
                continue
            kind = entry.get("type")
            alternative = entry.get("alternative")
            steps.append(ContentStep(
                type=kind if isinstance(kind, str) else "",
                content=entry["content"],
                alternative=alternative if _is_text(alternative) else None,
            ))
        if not steps:
            raise ContentMissingError(topic or "", emotion or "")
        return steps

    def buffet(self) -> Dict[str, List[str]]:
        """Normalised label -> statements. Always contains generic_fallback."""
        return {k: list(v) for k, v in self.thought_buffet.items()}

    def buffet_entry(self, label: str) -> List[str]:
        statements = self.thought_buffet.get(normalize_label(label))
        if not statements:
            raise ContentMissingError(label)
        return list(statements)

    def select_subtopic(
        self, topic: str, keywords: Sequence[str], emotion: str
    ) -> str:
        """
        Choose which subtopic of `topic` best fits the user.

        Order: direct emotion match, keyword triggers, emotion triggers,
        first authored subtopic, then the emotion itself.
        """
        by_emotion = self.sequences.get(topic)
        available = list(by_emotion) if isinstance(by_emotion, dict) else []
        if not available:
            return emotion
        if emotion in available:
            return emotion

        triggers = self.subtopic_triggers.get(topic, {})
        lowered = [k.lower() for k in keywords]
        for subtopic in available:
            hints = triggers.get(subtopic, {})
            for trigger in hints.get("keywords", []):
                t = trigger.lower()
                if any(t in k or k in t for k in lowered):
                    return subtopic
            if emotion in hints.get("emotions", []):
                return subtopic

        return available[0]


def _validated_buffet(buffet: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """Normalise keys and guarantee a non-empty generic_fallback entry."""
    normalized: Dict[str, List[str]] = {}
    for label, statements in buffet.items():
        if not isinstance(statements, (list, tuple)):
            logger.warning(f"[ContentStore] Buffet entry {label!r} is not a list; skipped")
            continue
        cleaned = [s for s in statements if _is_text(s)]
        if cleaned:
            normalized[normalize_label(label)] = cleaned
    if not normalized.get(FALLBACK_LABEL):
        logger.warning("[ContentStore] Buffet has no generic_fallback entry; using built-in")
        normalized[FALLBACK_LABEL] = list(library.THOUGHT_BUFFET[FALLBACK_LABEL])
    return normalized


def _read_json(path: Path) -> Any:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"[ContentStore] Could not read {path.name}: {e}")
        return None
