"""
Pydantic models for the engine's boundary: what the UI sends and receives.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# REQUEST MODELS
# =============================================================================

class BeginJourneyRequest(BaseModel):
    """Session attributes gathered before a journey."""
    intensity: int = Field(0, ge=0, le=10, description="Self-reported distress (0-10)")
    free_text: str = Field("", description="Optional freeform description of what's on the user's mind")
    topic: Optional[str] = Field(None, description="Selected topic, e.g. Money")
    emotion: Optional[str] = Field(None, description="Selected emotion from the topic's palette")


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class CalmingExerciseData(BaseModel):
    """A calming (ACT defusion) exercise."""
    title: str
    instructions: str
    steps: List[str] = Field(default_factory=list)
    closing: str = ""


class BeginJourneyResponse(BaseModel):
    technique: str
    first_step_content: str
    total_steps: int
    kind: str
    calming_exercise: Optional[CalmingExerciseData] = None


class AdvanceResponse(BaseModel):
    content: str
    step: int
    total_steps: int
    is_complete: bool = False
    kind: str = ""


class AlternativeResponse(BaseModel):
    content: str
    is_alternative: bool
    requires_calming_flow: bool = False
    calming_exercise: Optional[CalmingExerciseData] = None


class ModelStatus(BaseModel):
    """Classifier loading status for a progress screen."""
    state: str
    progress: float
    stage: str
