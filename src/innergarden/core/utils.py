"""
Small shared helpers: label normalization and score ordering.
"""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

import numpy as np

_WHITESPACE = re.compile(r"\s+")


def normalize_label(label: str) -> str:
    """
    Canonical form for classifier labels and buffet keys.

    "Fear of failure" -> "fear_of_failure". Used by both the classification
    adapter and the buffet lookup so the two can never disagree.
    """
    return _WHITESPACE.sub("_", label.strip()).lower()


def sort_by_score(
    labels: Sequence[str], scores: Sequence[float]
) -> Tuple[List[str], List[float]]:
    """Sort parallel label/score lists descending; ties keep input order."""
    values = np.asarray(scores, dtype=np.float64)
    order = np.argsort(-values, kind="stable")
    return [labels[i] for i in order], [float(values[i]) for i in order]


def clamp(x: float, low: float, high: float) -> float:
    return float(min(max(x, low), high))


def preview(text: str, limit: int = 40) -> str:
    """Short, single-line preview of user text for debug logs."""
    flat = _WHITESPACE.sub(" ", text.strip())
    return flat if len(flat) <= limit else flat[:limit] + "..."
