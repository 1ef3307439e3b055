"""Tests for MoodEngine: classification, stimuli, thoughts, time."""

import random

import pytest

from soulforge import Mood, MoodEngine, Stimulus, ThoughtType, classify_mood
from soulforge.mood import (
    MOOD_TRANSITIONS,
    THOUGHT_TEMPLATES,
    classify_thought,
    is_natural_transition,
)


@pytest.fixture
def engine(clock, rng):
    return MoodEngine(rng=rng, clock=clock)


# ── Classification ─────────────────────────────────────────────────────


class TestClassifyMood:
    @pytest.mark.parametrize("energy,stress,confidence,social,expected", [
        (75, 80, 60, 80, Mood.ANXIOUS),
        (50, 80, 60, 80, Mood.FRUSTRATED),
        (20, 10, 60, 80, Mood.CONTEMPLATIVE),
        (20, 50, 60, 80, Mood.MELANCHOLIC),
        (85, 10, 75, 80, Mood.JOYFUL),
        (85, 10, 60, 80, Mood.EXCITED),
        (65, 30, 75, 50, Mood.CONTENT),
        (50, 30, 75, 50, Mood.CALM),
        (50, 50, 60, 80, Mood.CURIOUS),
        (50, 50, 60, 50, Mood.NEUTRAL),
        (50, 50, 80, 80, Mood.NEUTRAL),
    ])
    def test_table(self, energy, stress, confidence, social, expected):
        assert classify_mood(energy, stress, confidence, social) == expected

    def test_pure(self, engine):
        before = classify_mood(40, 45, 55, 75)
        engine.update_mood(Stimulus("negative", 100))
        assert classify_mood(40, 45, 55, 75) == before

    def test_adjacency_is_informational(self):
        assert set(MOOD_TRANSITIONS) == set(Mood)
        assert is_natural_transition("neutral", "curious")
        assert not is_natural_transition(Mood.JOYFUL, Mood.ANXIOUS)


# ── Stimuli ────────────────────────────────────────────────────────────


class TestUpdateMood:
    def test_positive(self, engine):
        mood = engine.update_mood(Stimulus("positive", 50))
        state = engine.state
        assert state.energy == pytest.approx(85)
        assert state.stress == pytest.approx(10)
        assert state.confidence == pytest.approx(72.5)
        assert mood == Mood.JOYFUL

    def test_negative_twice(self, engine):
        engine.update_mood(Stimulus("negative", 100))
        assert engine.mood == Mood.NEUTRAL
        engine.update_mood(Stimulus("negative", 100))
        state = engine.state
        assert state.energy == pytest.approx(30)
        assert state.stress == pytest.approx(100)
        assert state.confidence == pytest.approx(30)
        assert engine.mood == Mood.FRUSTRATED

    def test_neutral_steps_toward_baseline(self, engine):
        engine.update_mood(Stimulus("positive", 50))
        engine.update_mood(Stimulus("neutral", 0))
        state = engine.state
        assert state.energy == pytest.approx(80)
        assert state.stress == pytest.approx(15)
        assert state.confidence == pytest.approx(69.5)

    def test_neutral_does_not_overshoot(self, engine):
        engine.update_mood(Stimulus("neutral", 0))
        state = engine.state
        assert (state.energy, state.stress, state.confidence) == (70, 20, 60)

    def test_clamped(self, engine):
        for _ in range(10):
            engine.update_mood(Stimulus("positive", 100))
        state = engine.state
        assert state.energy == 100
        assert state.stress == 0
        assert state.confidence == 100
        for _ in range(10):
            engine.update_mood(Stimulus("negative", 250))
        state = engine.state
        assert state.energy == 0
        assert state.stress == 100
        assert state.confidence == 0

    def test_unknown_polarity(self):
        with pytest.raises(ValueError):
            Stimulus("ecstatic", 50)

    def test_change_records_history_and_thought(self, engine):
        engine.update_mood(Stimulus("positive", 50, context="good news"))
        history = engine.mood_history()
        assert [e.mood for e in history] == [Mood.NEUTRAL, Mood.JOYFUL]
        thought = engine.recent_thoughts(1)[0]
        assert thought.type == ThoughtType.EMOTION
        assert thought.content == "I'm feeling joyful now because of good news."
        assert thought.triggers == ["mood_change", "good news"]

    def test_no_change_no_thought(self, engine):
        engine.update_mood(Stimulus("negative", 100))
        assert engine.recent_thoughts() == []
        assert len(engine.mood_history()) == 1

    def test_state_is_a_copy(self, engine):
        engine.state.energy = 0
        assert engine.state.energy == 70


# ── Internal monologue ─────────────────────────────────────────────────


class TestMonologue:
    def test_rate_limited(self, engine, clock):
        first = engine.generate_internal_monologue()
        assert first is not None
        assert engine.generate_internal_monologue() is None
        clock.advance(29)
        assert engine.generate_internal_monologue() is None
        clock.advance(2)
        assert engine.generate_internal_monologue() is not None

    def test_template_from_current_mood(self, engine):
        thought = engine.generate_internal_monologue("chat")
        assert thought.content in THOUGHT_TEMPLATES[Mood.NEUTRAL]
        assert thought.triggers == ["chat"]
        assert thought.type == classify_thought(thought.content)

    def test_seeded_rng_is_deterministic(self, clock):
        a = MoodEngine(rng=random.Random(7), clock=clock)
        b = MoodEngine(rng=random.Random(7), clock=clock)
        contents_a, contents_b = [], []
        for _ in range(5):
            contents_a.append(a.generate_internal_monologue().content)
            contents_b.append(b.generate_internal_monologue().content)
            clock.advance(31)
        assert contents_a == contents_b

    @pytest.mark.parametrize("content,expected", [
        ("I wonder what would happen if...", ThoughtType.OBSERVATION),
        ("That's an interesting perspective.", ThoughtType.OBSERVATION),
        ("I should reflect on what this means.", ThoughtType.PLANNING),
        ("I need to process what just happened.", ThoughtType.PLANNING),
        ("I'm not sure this is going the way I hoped.", ThoughtType.EMOTION),
        ("There's no rush to decide.", ThoughtType.REFLECTION),
    ])
    def test_thought_categories(self, content, expected):
        assert classify_thought(content) == expected

    def test_ring_buffer(self, engine):
        for i in range(101):
            engine.add_thought(f"t{i}", "reflection")
        thoughts = engine.recent_thoughts(1000)
        assert len(thoughts) == 50
        assert thoughts[-1].content == "t100"

    def test_thoughts_by_type(self, engine):
        engine.add_thought("a", "planning")
        engine.add_thought("b", "decision")
        assert [t.content for t in engine.thoughts_by_type("planning")] == ["a"]
        with pytest.raises(ValueError):
            engine.add_thought("c", "daydream")


# ── Time ───────────────────────────────────────────────────────────────


class TestTimePassage:
    def test_decay(self, engine):
        mood = engine.simulate_time_passage(100)
        state = engine.state
        assert state.energy == pytest.approx(60)
        assert state.stress == pytest.approx(15)
        assert state.social_capacity == 100
        assert mood == Mood.CURIOUS
        assert len(engine.mood_history()) == 2

    def test_long_rest(self, engine):
        engine.simulate_time_passage(500)
        assert engine.mood == Mood.CONTEMPLATIVE
        assert engine.state.stress == 0

    def test_history_window(self, engine, clock):
        clock.advance(25 * 3600)
        engine.simulate_time_passage(100)
        assert [e.mood for e in engine.mood_history(24)] == [Mood.CURIOUS]
        assert len(engine.mood_history(48)) == 2

    def test_history_capped(self, engine):
        for _ in range(200):
            engine._record_mood(Mood.CALM)
        assert len(engine.mood_history()) == 100

    def test_social_capacity(self, engine):
        engine.adjust_social_capacity(-200)
        assert engine.state.social_capacity == 0
