"""
Text templates for journey steps, closing summaries and loading stages.
"""

from __future__ import annotations

# Universally supportive sequence used when a topic/emotion pair has no content
# (content, alternative)
FALLBACK_SEQUENCE = [
    ("It's okay if your thoughts feel tangled.", "Your feelings are valid."),
    ("This moment is temporary and will pass.", "Be gentle with yourself."),
    ("Reflecting shows self-awareness.", "You deserve compassion."),
]

# Alternative phrasings for buffet statements
BUFFET_ALTERNATIVE = "Let's reframe that: {statement}"
BUFFET_FALLBACK_ALTERNATIVE = "Here's another perspective: {statement}"

CALMING_ALTERNATIVE = "Let's approach those thoughts mindfully."

# =============================================================================
# CLOSING SUMMARIES
# =============================================================================

DEFAULT_TOPIC_PHRASE = "this area of your life"
DEFAULT_EMOTION_PHRASE = "your feelings"

SUMMARY_ACT = (
    "You felt overwhelmed about {topic}, and you've worked through those "
    "thoughts using mindful defusion."
)
SUMMARY_CLASSIFIER = (
    "You worked through your thoughts with personalised insights and "
    "shifted your view of {topic}."
)
SUMMARY_HIGH_INTENSITY = (
    "You faced intense emotions about {topic} and worked through them to "
    "regain balance."
)
SUMMARY_MEDIUM_INTENSITY = (
    "You began {emotion} about {topic} and worked through those feelings "
    "to find a clearer perspective."
)
SUMMARY_LOW_INTENSITY = (
    "You've worked through your reflections on {topic} and strengthened "
    "resilience."
)

# =============================================================================
# MODEL LOADING STAGES (percentage, label)
# =============================================================================

STAGE_STARTING = (0, "Warming up the engine...")
STAGE_ENVIRONMENT = (10, "Initializing model environment...")
STAGE_WEIGHTS = (40, "Loading compassionate intelligence...")
STAGE_CONNECTING = (40, "Connecting to the local language model...")
STAGE_READY = (100, "Model ready for classification")
STAGE_FAILED = (100, "Having trouble loading the model. Falling back to basic mode...")
