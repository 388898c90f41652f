"""
Technique selection policy.

A pure function of the session attributes plus one bit of environment
(whether a classifier is usable). Rules are checked in priority order and
the first match wins:

    1. intensity >= 7                      -> act
    2. free text and a classifier          -> classifier-driven
    3. topic and emotion both present      -> cbt (high/medium tier) or socratic (low tier)
    4. anything else                       -> cbt
"""

from __future__ import annotations

from typing import FrozenSet

from .model import SessionAttributes, TechniqueId

HIGH_INTENSITY_THRESHOLD = 7

TIER_HIGH = "high"
TIER_MEDIUM = "medium"
TIER_LOW = "low"

HIGH_TIER_EMOTIONS: FrozenSet[str] = frozenset({
    "overwhelmed", "ashamed", "desperate", "heartbroken", "worthless", "defeated",
})
MEDIUM_TIER_EMOTIONS: FrozenSet[str] = frozenset({
    "anxious", "resentful", "lonely", "rejected", "inadequate", "embarrassed",
})

TIER_TECHNIQUE = {
    TIER_HIGH: TechniqueId.CBT,
    # Medium is deterministic so the policy stays testable
    TIER_MEDIUM: TechniqueId.CBT,
    TIER_LOW: TechniqueId.SOCRATIC,
}


def emotion_tier(emotion: str) -> str:
    """Curated tier lookup; unknown emotions are low tier."""
    key = emotion.strip().lower()
    if key in HIGH_TIER_EMOTIONS:
        return TIER_HIGH
    if key in MEDIUM_TIER_EMOTIONS:
        return TIER_MEDIUM
    return TIER_LOW


def select_technique(
    attrs: SessionAttributes, classifier_available: bool = False
) -> TechniqueId:
    """Pick the technique for a new journey. Total and side-effect free."""
    if attrs.intensity >= HIGH_INTENSITY_THRESHOLD:
        return TechniqueId.ACT
    if attrs.has_free_text and classifier_available:
        return TechniqueId.CLASSIFIER_DRIVEN
    if attrs.topic and attrs.emotion:
        return TIER_TECHNIQUE[emotion_tier(attrs.emotion)]
    return TechniqueId.CBT
