"""
Classifier configuration.

Values come from environment variables, with a .env file (first one found
walking up from the working directory) filling in anything unset.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

# Candidate labels for zero-shot classification: psychological states the
# thought buffet has reframes for.
CANDIDATE_LABELS: List[str] = [
    "feeling of worthlessness",
    "anxiety about the future",
    "lack of motivation",
    "conflict between desire and action",
    "self-criticism",
    "fear of failure",
    "financial scarcity mindset",
    "loneliness in relationships",
    "imposter syndrome",
    "procrastination due to feeling overwhelmed",
    "perfectionism paralysis",
    "social comparison anxiety",
    "rejection sensitivity",
    "abandonment fears",
    "career dissatisfaction",
    "body image concerns",
    "relationship conflict avoidance",
    "decision-making paralysis",
    "chronic self-doubt",
    "emotional numbness",
]

CONFIDENCE_THRESHOLD = 0.45

BACKEND_PIPELINE = "pipeline"
BACKEND_CHAT = "chat"

DEFAULT_MODEL = "cross-encoder/nli-deberta-v3-base"
DEFAULT_MODEL_PATH = "./models"
DEFAULT_CHAT_URL = "http://localhost:11434/v1"
DEFAULT_CHAT_MODEL = "llama3.1:8b"

_TRUTHY = {"1", "true", "yes", "on"}


def load_dotenv() -> None:
    """Load .env file into os.environ (only vars not already set)."""
    for parent in [Path.cwd()] + list(Path.cwd().parents):
        env_path = parent / ".env"
        if env_path.exists():
            for line in env_path.read_text().splitlines():
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" in line:
                    key, value = line.split("=", 1)
                    key, value = key.strip(), value.strip()
                    if key and key not in os.environ:
                        os.environ[key] = value
            break  # only load the first .env found


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


@dataclass
class ModelConfig:
    """
    Settings for the text classifier backend.

    Environment variables:
        INNERGARDEN_CLASSIFIER         — "pipeline" (local model) or "chat"
        INNERGARDEN_MODEL              — zero-shot model id
        INNERGARDEN_MODEL_PATH         — directory holding local model copies
        INNERGARDEN_ALLOW_REMOTE_MODELS — allow downloading the model
        INNERGARDEN_DEVICE             — auto / cpu / cuda
        INNERGARDEN_CLASSIFY_TIMEOUT   — seconds per classification call
        LLM_BASE_URL / LLM_MODEL / LLM_API_KEY — chat backend
    """

    backend: str = BACKEND_PIPELINE
    model_name: str = DEFAULT_MODEL
    local_model_path: str = DEFAULT_MODEL_PATH
    allow_remote_models: bool = False
    device: str = "auto"
    multi_label: bool = True
    classify_timeout: float = 20.0
    confidence_threshold: float = CONFIDENCE_THRESHOLD
    candidate_labels: List[str] = field(default_factory=lambda: list(CANDIDATE_LABELS))
    chat_base_url: str = DEFAULT_CHAT_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    chat_api_key: str = ""

    @classmethod
    def from_env(cls) -> "ModelConfig":
        load_dotenv()
        return cls(
            backend=_env("INNERGARDEN_CLASSIFIER", BACKEND_PIPELINE).lower(),
            model_name=_env("INNERGARDEN_MODEL", DEFAULT_MODEL),
            local_model_path=_env("INNERGARDEN_MODEL_PATH", DEFAULT_MODEL_PATH),
            allow_remote_models=_env("INNERGARDEN_ALLOW_REMOTE_MODELS", "false").lower() in _TRUTHY,
            device=_env("INNERGARDEN_DEVICE", "auto").lower(),
            classify_timeout=float(_env("INNERGARDEN_CLASSIFY_TIMEOUT", "20")),
            chat_base_url=_env("LLM_BASE_URL", DEFAULT_CHAT_URL).rstrip("/"),
            chat_model=_env("LLM_MODEL", DEFAULT_CHAT_MODEL),
            chat_api_key=os.environ.get("LLM_API_KEY", "").strip(),
        )

    @property
    def local_model_dir(self) -> Path:
        return Path(self.local_model_path) / self.model_name
