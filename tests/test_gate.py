"""Tests for llm/gate.py — single-load model gate and its progress channel."""

import asyncio
import time

import pytest

from innergarden.llm.gate import (
    GateState,
    ModelGate,
    clear_model_gate,
    get_model_gate,
)


class CountingLoader:
    """Loader stand-in that counts calls and optionally dawdles."""

    def __init__(self, result="model", delay=0.0, error=None):
        self.calls = 0
        self.result = result
        self.delay = delay
        self.error = error

    def __call__(self, progress):
        self.calls += 1
        progress(50, "Halfway there")
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def _fresh_shared_gate():
    clear_model_gate()
    yield
    clear_model_gate()


class TestLoading:
    def test_starts_uninitialized(self):
        gate = ModelGate(CountingLoader())
        assert gate.state is GateState.UNINITIALIZED
        assert gate.progress == 0

    def test_loads_once_and_caches(self):
        loader = CountingLoader()
        gate = ModelGate(loader)

        async def run():
            first = await gate.ensure_loaded()
            second = await gate.ensure_loaded()
            return first, second

        assert asyncio.run(run()) == ("model", "model")
        assert loader.calls == 1
        assert gate.is_ready

    def test_concurrent_callers_share_one_load(self):
        """Callers arriving while LOADING wait for the in-flight load."""
        loader = CountingLoader(delay=0.05)
        gate = ModelGate(loader)

        async def run():
            return await asyncio.gather(*(gate.ensure_loaded() for _ in range(5)))

        assert asyncio.run(run()) == ["model"] * 5
        assert loader.calls == 1
        assert gate.state is GateState.READY

    def test_failure_is_terminal(self):
        loader = CountingLoader(error=OSError("no weights"))
        gate = ModelGate(loader)

        async def run():
            return await gate.ensure_loaded(), await gate.ensure_loaded()

        assert asyncio.run(run()) == (None, None)
        assert loader.calls == 1
        assert gate.is_failed
        assert isinstance(gate.error, OSError)

    def test_concurrent_callers_see_failure(self):
        loader = CountingLoader(delay=0.05, error=RuntimeError("bad"))
        gate = ModelGate(loader)

        async def run():
            return await asyncio.gather(*(gate.ensure_loaded() for _ in range(3)))

        assert asyncio.run(run()) == [None, None, None]
        assert loader.calls == 1

    def test_missing_loader_fails(self):
        gate = ModelGate()
        assert asyncio.run(gate.ensure_loaded()) is None
        assert gate.is_failed


class TestProgress:
    def test_listener_receives_stages(self):
        events = []
        gate = ModelGate(CountingLoader())
        gate.add_progress_listener(lambda pct, stage: events.append(pct))
        asyncio.run(gate.ensure_loaded())
        assert events[0] == 0
        assert 50 in events
        assert events[-1] == 100
        assert gate.progress == 100

    def test_raising_listener_does_not_fail_load(self):
        def broken(pct, stage):
            raise ValueError("ui went away")

        gate = ModelGate(CountingLoader())
        gate.add_progress_listener(broken)
        assert asyncio.run(gate.ensure_loaded()) == "model"
        assert gate.is_ready

    def test_progress_is_clamped(self):
        gate = ModelGate(lambda progress: progress(250, "overshoot") or "model")
        seen = []
        gate.add_progress_listener(lambda pct, stage: seen.append(pct))
        asyncio.run(gate.ensure_loaded())
        assert max(seen) == 100

    def test_removed_listener_not_called(self):
        events = []

        def listener(pct, stage):
            events.append(pct)

        gate = ModelGate(CountingLoader())
        gate.add_progress_listener(listener)
        gate.remove_progress_listener(listener)
        asyncio.run(gate.ensure_loaded())
        assert events == []


class TestReset:
    def test_reset_allows_reload(self):
        loader = CountingLoader()
        gate = ModelGate(loader)
        asyncio.run(gate.ensure_loaded())
        gate.reset()
        assert gate.state is GateState.UNINITIALIZED
        asyncio.run(gate.ensure_loaded())
        assert loader.calls == 2

    def test_reset_clears_failure(self):
        loader = CountingLoader(error=OSError("offline"))
        gate = ModelGate(loader)
        asyncio.run(gate.ensure_loaded())
        gate.reset()
        assert gate.state is GateState.UNINITIALIZED
        assert gate.error is None

    def test_reset_during_load_discards_result(self):
        loader = CountingLoader(delay=0.1)
        gate = ModelGate(loader)

        async def run():
            task = asyncio.ensure_future(gate.ensure_loaded())
            await asyncio.sleep(0.02)
            assert gate.state is GateState.LOADING
            gate.reset()
            return await task

        assert asyncio.run(run()) is None
        assert gate.state is GateState.UNINITIALIZED

    def test_reset_twice_is_harmless(self):
        gate = ModelGate(CountingLoader())
        gate.reset()
        gate.reset()
        assert gate.state is GateState.UNINITIALIZED


class TestSharedGate:
    def test_same_instance_every_call(self):
        first = get_model_gate(CountingLoader())
        assert get_model_gate() is first
        assert get_model_gate(CountingLoader()) is first

    def test_clear_creates_fresh_instance(self):
        first = get_model_gate(CountingLoader())
        clear_model_gate()
        assert get_model_gate(CountingLoader()) is not first

    def test_reference_counting(self):
        gate = ModelGate(CountingLoader())
        gate.acquire()
        gate.acquire()
        assert gate.ref_count == 2
        gate.release()
        gate.release()
        gate.release()
        assert gate.ref_count == 0
