"""Tests for core/state_machine.py."""

import pytest

from innergarden.content import templates
from innergarden.content.store import ContentStore
from innergarden.core.errors import NoActiveJourneyError
from innergarden.core.journey import JourneyBuilder
from innergarden.core.model import Journey, SessionAttributes, Step, StepKind, TechniqueId
from innergarden.core.state_machine import (
    MAX_ALTERNATIVE_ATTEMPTS,
    Active,
    Complete,
    DivertedToCalming,
    JourneyStateMachine,
    closing_summary,
    next_on_advance,
    next_on_alternative,
)


def _journey(technique=TechniqueId.CBT, n=3):
    steps = tuple(
        Step(content=f"step {i}", alternative=f"alt {i}", kind=StepKind.REFRAME, ordinal=i)
        for i in range(n)
    )
    return Journey(technique=technique, steps=steps)


@pytest.fixture
def machine():
    sm = JourneyStateMachine(JourneyBuilder(ContentStore.default()))
    sm.start(_journey(), SessionAttributes(intensity=5, topic="Money", emotion="anxious"))
    return sm


class TestPureTransitions:
    def test_advance_moves_forward_and_clears_retries(self):
        assert next_on_advance(Active(0, 1), 3) == Active(1, 0)

    def test_advance_past_last_step(self):
        assert next_on_advance(Active(2, 0), 3) is None

    def test_alternative_counts_retries(self):
        assert next_on_alternative(Active(1, 0)) == Active(1, 1)

    def test_alternative_limit(self):
        assert next_on_alternative(Active(1, MAX_ALTERNATIVE_ATTEMPTS - 1)) is None


class TestAdvance:
    def test_walks_every_step_then_completes(self, machine):
        first = machine.advance()
        assert first["content"] == "step 1"
        assert first["step"] == 2
        assert first["total_steps"] == 3
        assert not first["is_complete"]

        machine.advance()
        done = machine.advance()
        assert done["is_complete"]
        assert done["step"] == 3
        assert done["kind"] == "completion"
        assert machine.is_complete
        assert isinstance(machine.state, Complete)

    def test_advance_after_complete_raises(self, machine):
        for _ in range(3):
            machine.advance()
        with pytest.raises(NoActiveJourneyError):
            machine.advance()
        with pytest.raises(NoActiveJourneyError):
            machine.request_alternative()

    def test_advance_without_journey_raises(self):
        sm = JourneyStateMachine(JourneyBuilder(ContentStore.default()))
        with pytest.raises(NoActiveJourneyError):
            sm.advance()

    def test_single_step_journey_completes_at_once(self, machine):
        machine.start(_journey(TechniqueId.ACT, n=1), SessionAttributes(intensity=9, topic="Money"))
        result = machine.advance()
        assert result["is_complete"]
        assert result["step"] == 1
        assert result["total_steps"] == 1

    def test_advance_resets_retry_count(self, machine):
        machine.request_alternative()
        assert machine.retry_count == 1
        machine.advance()
        assert machine.retry_count == 0
        assert machine.current_index == 1


class TestAlternative:
    def test_first_request_rephrases(self, machine):
        result = machine.request_alternative()
        assert result["content"] == "alt 0"
        assert result["is_alternative"]
        assert not result["requires_calming_flow"]
        assert machine.current_index == 0

    def test_missing_alternative_repeats_content(self, machine):
        steps = (Step(content="only", alternative=None, kind=StepKind.FALLBACK, ordinal=0),)
        machine.start(Journey(technique=TechniqueId.CBT, steps=steps), SessionAttributes(intensity=5))
        assert machine.request_alternative()["content"] == "only"

    @pytest.mark.parametrize("technique", list(TechniqueId))
    def test_second_request_diverts_for_every_technique(self, machine, technique):
        machine.start(_journey(technique), SessionAttributes(intensity=5, topic="Romance"))
        machine.request_alternative()
        result = machine.request_alternative()

        assert result["requires_calming_flow"]
        assert result["calming_exercise"]["title"]
        assert result["content"] == result["calming_exercise"]["instructions"]
        assert machine.is_diverted
        assert machine.journey.technique is TechniqueId.ACT
        assert machine.journey.diverted_from is technique
        assert machine.journey.total_steps == 1

    def test_diverted_alternative_repeats_exercise(self, machine):
        machine.request_alternative()
        first = machine.request_alternative()
        again = machine.request_alternative()
        assert again == first
        assert isinstance(machine.state, DivertedToCalming)

    def test_diverted_advance_completes_with_act_summary(self, machine):
        machine.request_alternative()
        machine.request_alternative()
        result = machine.advance()
        assert result["is_complete"]
        assert result["content"] == templates.SUMMARY_ACT.format(topic="money")


class TestReset:
    def test_reset_is_idempotent(self, machine):
        machine.reset()
        machine.reset()
        assert machine.journey is None
        assert machine.state is None
        assert not machine.is_active

    def test_reset_on_fresh_machine(self):
        sm = JourneyStateMachine(JourneyBuilder(ContentStore.default()))
        sm.reset()
        assert sm.journey is None


class TestClosingSummary:
    def test_act(self):
        text = closing_summary(SessionAttributes(intensity=9, topic="Money"), TechniqueId.ACT)
        assert text == templates.SUMMARY_ACT.format(topic="money")

    def test_classifier(self):
        text = closing_summary(SessionAttributes(intensity=5, topic="Romance"), TechniqueId.CLASSIFIER_DRIVEN)
        assert "romance" in text

    def test_medium_intensity_names_emotion(self):
        text = closing_summary(
            SessionAttributes(intensity=5, topic="Money", emotion="anxious"), TechniqueId.CBT
        )
        assert "feeling anxious" in text

    def test_low_intensity(self):
        text = closing_summary(SessionAttributes(intensity=1, topic="Self-Image"), TechniqueId.SOCRATIC)
        assert text == templates.SUMMARY_LOW_INTENSITY.format(topic="self-image")

    def test_missing_topic_uses_default_phrase(self):
        text = closing_summary(SessionAttributes(intensity=1), TechniqueId.SOCRATIC)
        assert templates.DEFAULT_TOPIC_PHRASE in text
