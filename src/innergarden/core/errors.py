"""
Exception taxonomy for the journey engine.

Only InvalidInputError and NoActiveJourneyError ever reach callers.
ClassifierUnavailableError and ContentMissingError are raised internally
and absorbed into fallback content.
"""

from __future__ import annotations


class InnerGardenError(Exception):
    """Base class for engine errors."""


class InvalidInputError(InnerGardenError, ValueError):
    """Raised when caller-supplied input fails validation."""


class NoActiveJourneyError(InnerGardenError, RuntimeError):
    """Raised when a journey transition is requested with no live journey."""

    def __init__(self, message: str = "No active journey. Call begin_journey first."):
        super().__init__(message)


class ClassifierUnavailableError(InnerGardenError):
    """Raised when the text classifier cannot be loaded or called."""


class ContentMissingError(InnerGardenError, LookupError):
    """Raised when the content store has no entry for a lookup key."""

    def __init__(self, *key: str):
        self.key = key
        super().__init__(f"No content for {' / '.join(repr(k) for k in key)}")
