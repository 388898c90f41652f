"""Tests for core/session.py."""

import pytest

from innergarden.core.model import SessionAttributes
from innergarden.core.session import SCREEN_JOURNEY, SCREEN_LANDING, SessionState


class TestSessionState:
    def test_update_records_order(self):
        state = SessionState()
        state.update("current_step", 1)
        state.update("current_screen", SCREEN_JOURNEY)
        assert state.current_step == 1
        assert state.updates == [("current_step", 1), ("current_screen", SCREEN_JOURNEY)]

    @pytest.mark.parametrize("key", ["not_a_field", "updates"])
    def test_unknown_key_rejected(self, key):
        with pytest.raises(KeyError):
            SessionState().update(key, 1)

    def test_snapshot_is_a_copy(self):
        state = SessionState()
        state.update("journey_sequence", [{"content": "a"}])
        snap = state.snapshot()
        snap["journey_sequence"][0]["content"] = "changed"
        assert state.journey_sequence[0]["content"] == "a"
        assert "updates" not in snap

    def test_clear(self):
        state = SessionState()
        state.attributes = SessionAttributes(intensity=3, topic="Money")
        state.update("total_steps", 3)
        state.update("completion_summary", "done")
        state.clear()
        assert state.attributes is None
        assert state.total_steps == 0
        assert state.completion_summary is None
        assert state.current_screen == SCREEN_LANDING
        assert state.updates == []
