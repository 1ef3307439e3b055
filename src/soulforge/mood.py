"""MoodEngine: emotional state dynamics, mood classification and internal monologue."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable

from soulforge.decay import apply_time_passage
from soulforge.models import (
    EmotionalState,
    Mood,
    MoodEntry,
    Polarity,
    Stimulus,
    Thought,
    ThoughtType,
    clamp,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

BASELINE_ENERGY = 70.0
BASELINE_STRESS = 20.0
BASELINE_CONFIDENCE = 60.0

THOUGHT_INTERVAL = 30.0    # seconds between spontaneous thoughts
MAX_THOUGHTS = 100         # trimmed to the newest KEEP_THOUGHTS on overflow
KEEP_THOUGHTS = 50
MAX_MOOD_HISTORY = 200     # trimmed to the newest KEEP_MOOD_HISTORY on overflow
KEEP_MOOD_HISTORY = 100

# Which moods naturally follow which. Informational: classify_mood does not consult it.
MOOD_TRANSITIONS: dict[Mood, tuple[Mood, ...]] = {
    Mood.JOYFUL: (Mood.CONTENT, Mood.EXCITED, Mood.NEUTRAL),
    Mood.CONTENT: (Mood.JOYFUL, Mood.CALM, Mood.NEUTRAL),
    Mood.NEUTRAL: (Mood.CONTENT, Mood.CURIOUS, Mood.CONTEMPLATIVE),
    Mood.MELANCHOLIC: (Mood.CONTEMPLATIVE, Mood.NEUTRAL, Mood.FRUSTRATED),
    Mood.ANXIOUS: (Mood.FRUSTRATED, Mood.NEUTRAL, Mood.CONTEMPLATIVE),
    Mood.EXCITED: (Mood.JOYFUL, Mood.CONTENT, Mood.ANXIOUS),
    Mood.CALM: (Mood.CONTENT, Mood.CONTEMPLATIVE, Mood.NEUTRAL),
    Mood.FRUSTRATED: (Mood.ANXIOUS, Mood.MELANCHOLIC, Mood.NEUTRAL),
    Mood.CURIOUS: (Mood.EXCITED, Mood.CONTENT, Mood.NEUTRAL),
    Mood.CONTEMPLATIVE: (Mood.CALM, Mood.MELANCHOLIC, Mood.NEUTRAL),
}

THOUGHT_TEMPLATES: dict[Mood, tuple[str, ...]] = {
    Mood.JOYFUL: (
        "I'm feeling really good about things right now.",
        "This is turning out better than I expected.",
        "I have a good feeling about what's coming next.",
    ),
    Mood.CONTENT: (
        "Things seem to be going well.",
        "I'm satisfied with how this is progressing.",
        "There's a nice balance to everything right now.",
    ),
    Mood.NEUTRAL: (
        "Let me think about this carefully.",
        "I wonder what the best approach would be.",
        "There are several ways to look at this.",
    ),
    Mood.MELANCHOLIC: (
        "I'm not sure this is going the way I hoped.",
        "Sometimes things don't work out as planned.",
        "I need to process what just happened.",
    ),
    Mood.ANXIOUS: (
        "I hope this goes well.",
        "There are so many variables to consider.",
        "I should prepare for different possibilities.",
    ),
    Mood.EXCITED: (
        "This is really interesting!",
        "I can't wait to see what happens next.",
        "The possibilities here are fascinating.",
    ),
    Mood.CALM: (
        "Everything feels peaceful right now.",
        "I can think clearly about this.",
        "There's no rush to decide.",
    ),
    Mood.FRUSTRATED: (
        "This isn't working the way it should.",
        "I need to find a different approach.",
        "Why is this so complicated?",
    ),
    Mood.CURIOUS: (
        "I wonder what would happen if...",
        "That's an interesting perspective.",
        "I'd like to understand this better.",
    ),
    Mood.CONTEMPLATIVE: (
        "There's something deeper to consider here.",
        "I should reflect on what this means.",
        "The implications of this are worth thinking about.",
    ),
}


def classify_mood(energy: float, stress: float, confidence: float,
                  social_capacity: float) -> Mood:
    """Pure decision table, evaluated top to bottom."""
    if stress > 70:
        return Mood.ANXIOUS if energy > 60 else Mood.FRUSTRATED
    if energy < 30:
        return Mood.MELANCHOLIC if stress > 40 else Mood.CONTEMPLATIVE
    if energy > 80 and stress < 30:
        return Mood.JOYFUL if confidence > 70 else Mood.EXCITED
    if confidence > 70 and stress < 40:
        return Mood.CONTENT if energy > 60 else Mood.CALM
    if social_capacity > 70 and 50 < confidence < 80:
        return Mood.CURIOUS
    return Mood.NEUTRAL


def classify_thought(content: str) -> ThoughtType:
    if "wonder" in content or "interesting" in content:
        return ThoughtType.OBSERVATION
    if "should" in content or "need to" in content:
        return ThoughtType.PLANNING
    if "feeling" in content or "I'm" in content:
        return ThoughtType.EMOTION
    return ThoughtType.REFLECTION


def is_natural_transition(current: Mood | str, new: Mood | str) -> bool:
    return Mood(new) in MOOD_TRANSITIONS[Mood(current)]


def move_toward(current: float, target: float, step: float) -> float:
    if current < target:
        return min(target, current + step)
    if current > target:
        return max(target, current - step)
    return current


class MoodEngine:
    """One EmotionalState, never replaced, only mutated.

    Also owns the thought ring buffer and the mood history.
    """

    def __init__(self, initial_mood: str | Mood = Mood.NEUTRAL,
                 rng: random.Random | None = None,
                 clock: Clock = time.time,
                 thought_interval: float = THOUGHT_INTERVAL) -> None:
        self._state = EmotionalState(mood=Mood(initial_mood))
        self._rng = rng or random.Random()
        self._clock = clock
        self.thought_interval = thought_interval
        self._thoughts: list[Thought] = []
        self._history: list[MoodEntry] = []
        self._record_mood(self._state.mood)

    # ── state ──────────────────────────────────────────────────────────

    @property
    def state(self) -> EmotionalState:
        """A copy; mutate through the engine."""
        return self._state.copy()

    @property
    def mood(self) -> Mood:
        return self._state.mood

    def restore(self, state: EmotionalState | dict) -> None:
        """Overwrite the scalars (and label) from a snapshot."""
        if isinstance(state, dict):
            state = EmotionalState(**state)
        self._state.mood = state.mood
        self._state.energy = state.energy
        self._state.stress = state.stress
        self._state.confidence = state.confidence
        self._state.social_capacity = state.social_capacity

    # ── stimulus ───────────────────────────────────────────────────────

    def update_mood(self, stimulus: Stimulus) -> Mood:
        """Applies a stimulus, reclassifies, and records the change if any."""
        s = self._state
        intensity = stimulus.intensity

        if stimulus.polarity is Polarity.POSITIVE:
            s.energy = clamp(s.energy + intensity * 0.3)
            s.stress = clamp(s.stress - intensity * 0.2)
            s.confidence = clamp(s.confidence + intensity * 0.25)
        elif stimulus.polarity is Polarity.NEGATIVE:
            s.energy = clamp(s.energy - intensity * 0.2)
            s.stress = clamp(s.stress + intensity * 0.4)
            s.confidence = clamp(s.confidence - intensity * 0.15)
        else:
            # Vuelta gradual a la línea base
            s.energy = move_toward(s.energy, BASELINE_ENERGY, 5)
            s.stress = move_toward(s.stress, BASELINE_STRESS, 5)
            s.confidence = move_toward(s.confidence, BASELINE_CONFIDENCE, 3)

        if self._reclassify():
            because = f" because of {stimulus.context}" if stimulus.context else ""
            triggers = ["mood_change"]
            if stimulus.context:
                triggers.append(stimulus.context)
            self.add_thought(f"I'm feeling {s.mood.value} now{because}.",
                             ThoughtType.EMOTION, triggers)
        return s.mood

    def adjust_social_capacity(self, change: float) -> None:
        self._state.social_capacity = clamp(self._state.social_capacity + change)

    def simulate_time_passage(self, minutes: float) -> Mood:
        apply_time_passage(self._state, minutes)
        self._reclassify()
        return self._state.mood

    # ── thoughts ───────────────────────────────────────────────────────

    def generate_internal_monologue(self, context: str | None = None) -> Thought | None:
        """A spontaneous thought, at most one per thought_interval seconds."""
        if self._thoughts:
            elapsed = self._clock() - self._thoughts[-1].timestamp
            if elapsed < self.thought_interval:
                return None

        templates = THOUGHT_TEMPLATES.get(self._state.mood)
        if not templates:
            return None
        content = self._rng.choice(templates)
        return self.add_thought(content, classify_thought(content),
                                [context] if context else None)

    def add_thought(self, content: str, type: str | ThoughtType,
                    triggers: list[str] | None = None) -> Thought:
        thought = Thought(
            content=content,
            type=ThoughtType(type),
            timestamp=self._clock(),
            triggers=list(triggers or []),
        )
        self._thoughts.append(thought)
        if len(self._thoughts) > MAX_THOUGHTS:
            self._thoughts = self._thoughts[-KEEP_THOUGHTS:]
        return thought

    def recent_thoughts(self, count: int = 10) -> list[Thought]:
        return self._thoughts[-count:] if count > 0 else []

    def thoughts_by_type(self, type: str | ThoughtType) -> list[Thought]:
        type = ThoughtType(type)
        return [t for t in self._thoughts if t.type == type]

    # ── history ────────────────────────────────────────────────────────

    def mood_history(self, hours: float = 24) -> list[MoodEntry]:
        cutoff = self._clock() - hours * 3600
        return [e for e in self._history if e.timestamp >= cutoff]

    def _reclassify(self) -> bool:
        s = self._state
        new = classify_mood(s.energy, s.stress, s.confidence, s.social_capacity)
        if new == s.mood:
            return False
        logger.debug("mood %s -> %s", s.mood.value, new.value)
        s.mood = new
        self._record_mood(new)
        return True

    def _record_mood(self, mood: Mood) -> None:
        self._history.append(MoodEntry(mood=mood, timestamp=self._clock()))
        if len(self._history) > MAX_MOOD_HISTORY:
            self._history = self._history[-KEEP_MOOD_HISTORY:]

    def __repr__(self) -> str:
        s = self._state
        return (f"MoodEngine(mood={s.mood.value}, energy={s.energy:.0f}, "
                f"stress={s.stress:.0f}, confidence={s.confidence:.0f})")
