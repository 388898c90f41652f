"""
ModelGate: load the text classifier at most once per process.

    UNINITIALIZED -> LOADING -> READY     (terminal)
                             -> FAILED    (terminal until reset)

The first caller of ensure_loaded() starts the load in a worker thread;
callers arriving while it is LOADING await the same pending future and
share its result. A FAILED gate returns None immediately instead of
retrying, which sends the adapter down its fallback path.

Progress listeners receive (percentage, stage label). They are best
effort: a listener that raises is logged and skipped, never allowed to
fail the load.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from ..content import templates
from ..core.utils import clamp

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


class GateState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ModelGate:
    """
    Lazily initialised, reference-counted holder for one classifier backend.

    Construct isolated instances in tests; use get_model_gate() for the
    process-wide one.
    """

    def __init__(self, loader: Optional[Callable[[ProgressCallback], Any]] = None):
        self._loader = loader
        self._listeners: List[ProgressCallback] = []
        self._ref_count = 0
        self._generation = 0
        self._init_state()

    def _init_state(self) -> None:
        self._state = GateState.UNINITIALIZED
        self._model: Any = None
        self._error: Optional[BaseException] = None
        self._pending: Optional[asyncio.Future] = None
        self.progress, self.stage = templates.STAGE_STARTING

    # ── State ───────────────────────────────────────────────────────────

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is GateState.READY

    @property
    def is_failed(self) -> bool:
        return self._state is GateState.FAILED

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def ref_count(self) -> int:
        return self._ref_count

    def acquire(self) -> "ModelGate":
        self._ref_count += 1
        return self

    def release(self) -> None:
        if self._ref_count == 0:
            logger.warning("[ModelGate] release() without matching acquire()")
            return
        self._ref_count -= 1

    # ── Progress ────────────────────────────────────────────────────────

    def add_progress_listener(self, callback: ProgressCallback) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_progress_listener(self, callback: ProgressCallback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _report(self, percentage: float, stage: str) -> None:
        self.progress = clamp(percentage, 0.0, 100.0)
        self.stage = stage
        logger.debug(f"[ModelGate] {self.progress:.0f}% - {stage}")
        for callback in list(self._listeners):
            try:
                callback(self.progress, stage)
            except Exception as e:
                logger.warning(f"[ModelGate] Progress listener failed: {e}")

    # ── Loading ─────────────────────────────────────────────────────────

    async def ensure_loaded(self) -> Optional[Any]:
        """Return the loaded backend, loading it on first use; None if FAILED."""
        if self._state is GateState.READY:
            return self._model
        if self._state is GateState.FAILED:
            return None
        if self._state is GateState.LOADING and self._pending is not None:
            return await asyncio.shield(self._pending)
        return await self._load()

    async def _load(self) -> Optional[Any]:
        if self._loader is None:
            self._state = GateState.FAILED
            self._error = RuntimeError("No classifier loader configured")
            logger.warning("[ModelGate] No loader configured; classifier unavailable")
            return None

        generation = self._generation
        pending = asyncio.get_running_loop().create_future()
        self._pending = pending
        self._state = GateState.LOADING
        logger.info("[ModelGate] Loading classifier...")
        self._report(*templates.STAGE_STARTING)

        result: Optional[Any] = None
        try:
            model = await asyncio.to_thread(self._loader, self._report)
        except asyncio.CancelledError:
            if generation == self._generation:
                # Let the next caller start over
                self._init_state()
            raise
        except Exception as e:
            if generation == self._generation:
                self._state = GateState.FAILED
                self._error = e
                logger.warning(f"[ModelGate] Classifier load failed: {e}")
                self._report(*templates.STAGE_FAILED)
        else:
            if generation == self._generation:
                self._model = model
                self._state = GateState.READY
                result = model
                logger.info("[ModelGate] Classifier ready")
                self._report(*templates.STAGE_READY)
            else:
                logger.info("[ModelGate] Discarding classifier loaded before reset")
        finally:
            if generation == self._generation:
                self._pending = None
            if not pending.done():
                pending.set_result(result)
        return result

    def reset(self) -> None:
        """Forget everything, including a load still in flight."""
        self._generation += 1
        pending = self._pending
        self._init_state()
        if pending is not None and not pending.done():
            pending.set_result(None)
        logger.debug("[ModelGate] Reset")


# Process-wide gate (created on first use)
_gate: Optional[ModelGate] = None


def get_model_gate(
    loader: Optional[Callable[[ProgressCallback], Any]] = None,
) -> ModelGate:
    """
    The shared gate. `loader` only matters on the very first call; without
    one the backend named by the environment config is used.
    """
    global _gate
    if _gate is None:
        if loader is None:
            from .classifier import make_loader
            from .config import ModelConfig
            loader = make_loader(ModelConfig.from_env())
        _gate = ModelGate(loader)
    return _gate


def clear_model_gate() -> None:
    """Drop the shared gate entirely (for tests)."""
    global _gate
    if _gate is not None:
        _gate.reset()
    _gate = None
