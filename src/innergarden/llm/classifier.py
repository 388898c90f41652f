"""
Text classification: backends plus the adapter the journey builder uses.

A backend is any callable `(text, labels, multi_label) -> {"labels", "scores"}`.
Two are provided:
  - PipelineClassifier: local transformers zero-shot pipeline (default)
  - ChatClassifier: OpenAI-compatible chat endpoint asked for label scores

ClassificationAdapter sits on top of the ModelGate. It validates input,
normalises output and turns every backend failure into a low-confidence
fallback result so the journey never breaks on a classifier problem.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import numbers
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import numpy as np

from ..content import templates
from ..core.errors import ClassifierUnavailableError, InvalidInputError
from ..core.model import ClassificationResult
from ..core.utils import normalize_label, preview
from .client import ChatAPIError, ChatClient
from .config import BACKEND_CHAT, BACKEND_PIPELINE, ModelConfig
from .gate import ModelGate, ProgressCallback

logger = logging.getLogger(__name__)

RawClassifier = Callable[[str, Sequence[str], bool], Mapping[str, Any]]
Loader = Callable[[ProgressCallback], RawClassifier]


# =============================================================================
# BACKENDS
# =============================================================================

class PipelineClassifier:
    """Adapts a transformers zero-shot-classification pipeline to the backend shape."""

    def __init__(self, pipe: Any):
        self._pipe = pipe

    def __call__(
        self, text: str, labels: Sequence[str], multi_label: bool = True
    ) -> Dict[str, Any]:
        out = self._pipe(text, candidate_labels=list(labels), multi_label=multi_label)
        return {"labels": list(out["labels"]), "scores": list(out["scores"])}


def load_pipeline_classifier(config: ModelConfig) -> Loader:
    """Loader for the local zero-shot model. Runs in a worker thread."""

    def _load(progress: ProgressCallback) -> RawClassifier:
        progress(*templates.STAGE_ENVIRONMENT)
        local_dir = config.local_model_dir
        if local_dir.exists():
            source = str(local_dir)
        elif config.allow_remote_models:
            source = config.model_name
        else:
            raise ClassifierUnavailableError(
                f"Model {config.model_name!r} not found in {config.local_model_path} "
                "and remote models are disabled"
            )

        progress(*templates.STAGE_WEIGHTS)
        from transformers import pipeline

        kwargs: Dict[str, Any] = {"model": source}
        if config.device != "auto":
            kwargs["device"] = config.device
        pipe = pipeline("zero-shot-classification", **kwargs)
        logger.info(f"[Classifier] Zero-shot pipeline loaded from {source}")
        return PipelineClassifier(pipe)

    return _load


CHAT_SYSTEM_PROMPT = """\
You are a text classifier for a self-reflection app.
Given a short personal reflection and a list of candidate psychological states,
rate how strongly the text expresses EACH state, independently, from 0.0 to 1.0.
Several states may apply at once.

Always respond with a valid JSON object, no other text."""

CHAT_CLASSIFY_PROMPT = """\
Text: "{text}"

Candidate states:
{labels_text}

Respond with JSON:
{{
    "scores": {{<state exactly as written>: <float 0.0-1.0>, ...}}
}}"""


class ChatClassifier:
    """
    Label scoring through a chat completion endpoint.

    Missing labels in the reply score 0.0; unknown ones are ignored.
    """

    def __init__(self, client: ChatClient):
        self.client = client

    def __call__(
        self, text: str, labels: Sequence[str], multi_label: bool = True
    ) -> Dict[str, Any]:
        prompt = CHAT_CLASSIFY_PROMPT.format(
            text=text.replace('"', "'"),
            labels_text="\n".join(f"  - {label}" for label in labels),
        )
        try:
            response = self.client.chat_completion(
                messages=[
                    {"role": "system", "content": CHAT_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.0,
                max_tokens=512,
                response_format={"type": "json_object"},
            )
            scores = json.loads(response)["scores"]
            values = [float(scores.get(label, 0.0)) for label in labels]
        except (ChatAPIError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise ClassifierUnavailableError(f"Chat classification failed: {e}") from e

        return {"labels": list(labels), "scores": values}


def load_chat_classifier(config: ModelConfig) -> Loader:
    def _load(progress: ProgressCallback) -> RawClassifier:
        progress(*templates.STAGE_CONNECTING)
        client = ChatClient.from_config(config)
        try:
            client.ping()
        except ChatAPIError as e:
            raise ClassifierUnavailableError(str(e)) from e
        logger.info(f"[Classifier] Chat backend ready at {config.chat_base_url}")
        return ChatClassifier(client)

    return _load


def make_loader(config: ModelConfig) -> Loader:
    """Pick the backend loader named by the config."""
    if config.backend == BACKEND_CHAT:
        return load_chat_classifier(config)
    if config.backend != BACKEND_PIPELINE:
        logger.warning(f"[Classifier] Unknown backend {config.backend!r}, using {BACKEND_PIPELINE}")
    return load_pipeline_classifier(config)


# =============================================================================
# ADAPTER
# =============================================================================

class ClassificationAdapter:
    """
    classify(text, labels) -> ClassificationResult, never raising for
    classifier trouble.

    Only empty/whitespace text is rejected (InvalidInputError). Load
    failures, timeouts, backend exceptions and malformed output all come
    back as ClassificationResult.fallback().

    config.classify_timeout bounds both the wait for the model to load and
    the classification call itself. A slow first load is not cancelled;
    later calls pick up the model once it is ready.
    """

    def __init__(self, gate: ModelGate, config: Optional[ModelConfig] = None):
        self.gate = gate
        self.config = config or ModelConfig()

    @property
    def is_available(self) -> bool:
        return not self.gate.is_failed

    async def classify(
        self, text: str, labels: Optional[Sequence[str]] = None
    ) -> ClassificationResult:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Invalid text input for classification")

        candidates = list(labels) if labels is not None else list(self.config.candidate_labels)
        if not candidates:
            logger.warning("[Classifier] No candidate labels given, using fallback")
            return ClassificationResult.fallback()

        logger.debug(f"[Classifier] Classifying '{preview(text)}' against {len(candidates)} labels")
        try:
            # The load keeps running in the background if this call gives up on it
            model = await asyncio.wait_for(
                asyncio.shield(self.gate.ensure_loaded()),
                timeout=self.config.classify_timeout,
            )
            if model is None:
                raise ClassifierUnavailableError("classifier failed to load")
            raw = await asyncio.wait_for(
                asyncio.to_thread(model, text, candidates, self.config.multi_label),
                timeout=self.config.classify_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"[Classifier] Timed out after {self.config.classify_timeout}s, using fallback"
            )
            return ClassificationResult.fallback()
        except Exception as e:
            logger.warning(f"[Classifier] Classification failed, using fallback: {e}")
            return ClassificationResult.fallback()

        result = self.process_raw(raw)
        if not result.is_fallback:
            logger.info(
                f"[Classifier] Top label {result.top_label} "
                f"({result.top_confidence:.2f}, high={result.is_high_confidence})"
            )
        return result

    def process_raw(self, raw: Any) -> ClassificationResult:
        """Validate and normalise one backend response."""
        labels = _as_list(raw.get("labels")) if isinstance(raw, Mapping) else None
        scores = _as_list(raw.get("scores")) if isinstance(raw, Mapping) else None
        if not _well_formed(labels, scores):
            logger.warning(f"[Classifier] Unexpected classification result shape: {type(raw).__name__}")
            return ClassificationResult.fallback()
        return ClassificationResult.from_scores(
            [normalize_label(label) for label in labels],
            [float(s) for s in scores],
            threshold=self.config.confidence_threshold,
        )


def _as_list(values: Any) -> Optional[list]:
    """Backends may hand back lists, tuples or 1-d numpy arrays."""
    if isinstance(values, np.ndarray):
        return values.tolist() if values.ndim == 1 else None
    if isinstance(values, (list, tuple)):
        return list(values)
    return None


def _well_formed(labels: Optional[list], scores: Optional[list]) -> bool:
    if labels is None or scores is None:
        return False
    if not labels or len(labels) != len(scores):
        return False
    if not all(isinstance(label, str) and label.strip() for label in labels):
        return False
    for s in scores:
        if isinstance(s, (bool, np.bool_)) or not isinstance(s, numbers.Real):
            return False
        if math.isnan(s) or not 0.0 <= s <= 1.0:
            return False
    return True
