"""Preset souls."""

from __future__ import annotations

import random
import time
from typing import Callable

from soulforge.config import SoulBuilder
from soulforge.soul import Soul


def _builder(rng: random.Random | None, clock: Callable[[], float]) -> SoulBuilder:
    builder = SoulBuilder().with_clock(clock)
    return builder.with_rng(rng) if rng is not None else builder


def create_soul(name: str, role: str, rng: random.Random | None = None,
                clock: Callable[[], float] = time.time) -> Soul:
    return _builder(rng, clock).with_identity(name=name, role=role).build()


def create_companion(name: str, rng: random.Random | None = None,
                     clock: Callable[[], float] = time.time) -> Soul:
    return (_builder(rng, clock)
            .with_identity(name=name, role="Companion")
            .with_empathy(85)
            .with_personality(
                big_five={"openness": 75, "conscientiousness": 65,
                          "extraversion": 70, "agreeableness": 85,
                          "neuroticism": 25},
                mbti="ENFJ")
            .build())


def create_npc(name: str, role: str, archetype: str = "The Guide",
               rng: random.Random | None = None,
               clock: Callable[[], float] = time.time) -> Soul:
    return (_builder(rng, clock)
            .with_identity(name=name, role=role)
            .with_personality(
                big_five={"openness": 60, "conscientiousness": 70,
                          "extraversion": 55, "agreeableness": 65,
                          "neuroticism": 40},
                archetype=archetype)
            .build())


def create_teacher(name: str, subject: str | None = None,
                   rng: random.Random | None = None,
                   clock: Callable[[], float] = time.time) -> Soul:
    role = f"{subject} Teacher" if subject else "Teacher"
    return (_builder(rng, clock)
            .with_identity(name=name, role=role)
            .with_empathy(80)
            .with_personality(
                big_five={"openness": 85, "conscientiousness": 90,
                          "extraversion": 60, "agreeableness": 75,
                          "neuroticism": 20},
                mbti="ENFJ",
                archetype="The Mentor")
            .build())
