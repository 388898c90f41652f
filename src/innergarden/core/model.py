"""
Data model for the therapeutic journey engine.

SessionAttributes come from the caller; everything else is derived by the
selector, builder, adapter and state machine. All types here are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from .errors import InvalidInputError
from .utils import sort_by_score

MIN_INTENSITY = 0
MAX_INTENSITY = 10

FALLBACK_LABEL = "generic_fallback"
FALLBACK_SCORE = 0.3


class TechniqueId(str, Enum):
    """The four therapeutic approaches a journey can use."""
    CBT = "cbt"
    SOCRATIC = "socratic"
    ACT = "act"
    CLASSIFIER_DRIVEN = "classifier-driven"


class StepKind(str, Enum):
    REFRAME = "reframe"
    QUESTION = "question"
    EXERCISE = "exercise"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SessionAttributes:
    """
    What the user told us before the journey starts.

    Missing fields are meaningful: no topic/emotion pushes the selector and
    builder onto their default paths.
    """
    intensity: int = 0
    free_text: str = ""
    topic: Optional[str] = None
    emotion: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.intensity, bool) or not isinstance(self.intensity, int):
            raise InvalidInputError(f"intensity must be an integer, got {self.intensity!r}")
        if not MIN_INTENSITY <= self.intensity <= MAX_INTENSITY:
            raise InvalidInputError(
                f"intensity must be in [{MIN_INTENSITY}, {MAX_INTENSITY}], got {self.intensity}"
            )
        # Normalise "absent" representations
        if self.free_text is None:
            object.__setattr__(self, "free_text", "")
        if self.topic == "":
            object.__setattr__(self, "topic", None)
        if self.emotion == "":
            object.__setattr__(self, "emotion", None)

    @property
    def has_free_text(self) -> bool:
        return bool(self.free_text.strip())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionAttributes":
        """Build from a loose dict, accepting camelCase keys from UI payloads."""
        return cls(
            intensity=data.get("intensity", 0),
            free_text=data.get("free_text", data.get("freeText", "")) or "",
            topic=data.get("topic"),
            emotion=data.get("emotion"),
        )


@dataclass(frozen=True)
class Step:
    """One prompt in a journey."""
    content: str
    alternative: Optional[str]
    kind: StepKind
    ordinal: int

    @property
    def alternative_or_content(self) -> str:
        return self.alternative or self.content

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "alternative": self.alternative,
            "kind": self.kind.value,
            "ordinal": self.ordinal,
        }


@dataclass(frozen=True)
class Journey:
    """
    A technique plus its fixed, ordered step list.

    Progress through the steps lives in the state machine, not here.
    `diverted_from` records the original technique after a stuck-user
    diversion into the calming exercise.
    """
    technique: TechniqueId
    steps: Tuple[Step, ...]
    diverted_from: Optional[TechniqueId] = None

    def __post_init__(self):
        if not self.steps:
            raise ValueError("A journey needs at least one step")

    @property
    def total_steps(self) -> int:
        return len(self.steps)


@dataclass(frozen=True)
class ClassificationResult:
    """
    Normalised classifier output.

    labels and scores are parallel and sorted descending; top_confidence is
    scores[0]. Build through from_scores() or fallback(), never directly.
    """
    labels: Tuple[str, ...]
    scores: Tuple[float, ...]
    top_label: str
    top_confidence: float
    is_high_confidence: bool
    is_fallback: bool = False

    def __post_init__(self):
        if len(self.labels) != len(self.scores):
            raise ValueError("labels and scores must be parallel")
        if any(a < b for a, b in zip(self.scores, self.scores[1:])):
            raise ValueError("scores must be sorted descending")
        if self.scores and self.top_confidence != self.scores[0]:
            raise ValueError("top_confidence must equal the first score")

    @classmethod
    def from_scores(
        cls,
        labels: Sequence[str],
        scores: Sequence[float],
        threshold: float,
    ) -> "ClassificationResult":
        ordered_labels, ordered_scores = sort_by_score(labels, scores)
        top_label = ordered_labels[0] if ordered_labels else FALLBACK_LABEL
        top_conf = ordered_scores[0] if ordered_scores else 0.0
        return cls(
            labels=tuple(ordered_labels),
            scores=tuple(ordered_scores),
            top_label=top_label,
            top_confidence=top_conf,
            is_high_confidence=top_conf >= threshold,
        )

    @classmethod
    def fallback(cls) -> "ClassificationResult":
        """Low-confidence stand-in used whenever the classifier fails."""
        return cls(
            labels=(FALLBACK_LABEL,),
            scores=(FALLBACK_SCORE,),
            top_label=FALLBACK_LABEL,
            top_confidence=FALLBACK_SCORE,
            is_high_confidence=False,
            is_fallback=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": list(self.labels),
            "scores": list(self.scores),
            "top_label": self.top_label,
            "top_confidence": self.top_confidence,
            "is_high_confidence": self.is_high_confidence,
            "is_fallback": self.is_fallback,
        }
