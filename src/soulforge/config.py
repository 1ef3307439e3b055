"""Soul configuration: an immutable SoulConfig and a SoulBuilder ending in build()."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable

from soulforge.classify import ComposeFn, ImpactFn
from soulforge.consolidate import LONG_TERM_CAPACITY, SHORT_TERM_CAPACITY
from soulforge.models import BigFive, Identity, Mood, PersonalityConfig, clamp

if TYPE_CHECKING:
    from soulforge.soul import Soul

DEFAULT_THOUGHT_INTERVAL = 30.0  # seconds
DEFAULT_EMPATHY = 70.0
DEFAULT_LEARNING_RATE = 5.0


@dataclass(frozen=True)
class SoulConfig:
    """Construction input for a Soul. Numbers are clamped, never rejected."""

    identity: Identity = field(default_factory=Identity)
    personality: PersonalityConfig = field(default_factory=PersonalityConfig)
    initial_mood: Mood = Mood.NEUTRAL
    short_term_capacity: int = SHORT_TERM_CAPACITY
    memory_capacity: int = LONG_TERM_CAPACITY  # long-term
    thought_interval: float = DEFAULT_THOUGHT_INTERVAL
    empathy_level: float = DEFAULT_EMPATHY
    learning_rate: float = DEFAULT_LEARNING_RATE
    enable_traces: bool = False

    def __post_init__(self) -> None:
        set_ = object.__setattr__
        set_(self, "initial_mood", Mood(self.initial_mood))
        set_(self, "short_term_capacity", max(1, int(self.short_term_capacity)))
        set_(self, "memory_capacity", max(1, int(self.memory_capacity)))
        set_(self, "thought_interval", max(0.0, float(self.thought_interval)))
        set_(self, "empathy_level", clamp(float(self.empathy_level)))
        set_(self, "learning_rate", clamp(float(self.learning_rate)))


@dataclass(frozen=True)
class SoulBuilder:
    """Each with_* returns a new builder; build() makes the Soul.

        soul = (SoulBuilder()
                .with_identity(name="Ada", role="Tutor")
                .with_empathy(85)
                .build())
    """

    config: SoulConfig = field(default_factory=SoulConfig)
    rng: random.Random | None = None
    clock: Callable[[], float] = time.time
    impact_fn: ImpactFn | None = None
    compose_fn: ComposeFn | None = None

    def _with(self, **changes) -> SoulBuilder:
        return replace(self, config=replace(self.config, **changes))

    def with_identity(self, identity: Identity | None = None, **fields) -> SoulBuilder:
        base = identity or self.config.identity
        return self._with(identity=replace(base, **fields))

    def with_personality(self, personality: PersonalityConfig | None = None,
                         big_five: BigFive | dict | None = None,
                         **fields) -> SoulBuilder:
        base = personality or self.config.personality
        if big_five is not None:
            fields["big_five"] = BigFive(**big_five) if isinstance(big_five, dict) else big_five
        return self._with(personality=replace(base, **fields))

    def with_mood(self, mood: str | Mood) -> SoulBuilder:
        return self._with(initial_mood=Mood(mood))

    def with_empathy(self, level: float) -> SoulBuilder:
        return self._with(empathy_level=level)

    def with_learning_rate(self, rate: float) -> SoulBuilder:
        return self._with(learning_rate=rate)

    def with_memory_capacity(self, long_term: int,
                             short_term: int | None = None) -> SoulBuilder:
        if short_term is None:
            return self._with(memory_capacity=long_term)
        return self._with(memory_capacity=long_term, short_term_capacity=short_term)

    def with_thought_interval(self, seconds: float) -> SoulBuilder:
        return self._with(thought_interval=seconds)

    def with_traces(self, enabled: bool = True) -> SoulBuilder:
        return self._with(enable_traces=enabled)

    def with_rng(self, rng: random.Random) -> SoulBuilder:
        return replace(self, rng=rng)

    def with_clock(self, clock: Callable[[], float]) -> SoulBuilder:
        return replace(self, clock=clock)

    def with_classifier(self, impact_fn: ImpactFn) -> SoulBuilder:
        return replace(self, impact_fn=impact_fn)

    def with_composer(self, compose_fn: ComposeFn) -> SoulBuilder:
        return replace(self, compose_fn=compose_fn)

    def build(self) -> Soul:
        from soulforge.soul import Soul
        return Soul(self.config, rng=self.rng, clock=self.clock,
                    impact_fn=self.impact_fn, compose_fn=self.compose_fn)
