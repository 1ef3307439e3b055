#!/usr/bin/env python3
"""
soulforge demo: a day in the life of a companion.

No LLM needed. No API keys. Just run it.
"""

import os
import random
import tempfile

from soulforge import Soul, Storage, create_companion


def header(text):
    print(f"\n{'='*64}")
    print(f"  {text}")
    print(f"{'='*64}\n")


def show(soul, label=""):
    state = soul.mood.state
    if label:
        print(f"  [{label}] mood={state.mood.value}")
    for name in ("energy", "stress", "confidence", "social_capacity"):
        value = getattr(state, name)
        n = int(value / 5)
        bar = "█" * n + "░" * (20 - n)
        print(f"    {bar} {value:5.1f} | {name}")
    print()


def chat(soul, text, pid="carlos", name="Carlos"):
    result = soul.respond(text, pid, name)
    print(f"  {name}: {text}")
    print(f"  {soul.identity.name} ({result.mood.value}): {result.response}")
    for thought in result.thoughts:
        print(f"    ~ ({thought.type.value}) {thought.content}")
    print()


def main():
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    mia = create_companion("Mia", rng=random.Random(7))

    header("SOULFORGE: a companion's day")
    show(mia, "Waking up")

    # ── Morning ────────────────────────────────────────────────────────

    header("MORNING: Good news")

    chat(mia, "I got the job! This is amazing, I love it")
    chat(mia, "What should we do to celebrate?")
    show(mia, "After good news")

    # ── Afternoon ──────────────────────────────────────────────────────

    header("AFTERNOON: Things go wrong")

    chat(mia, "The first day was terrible. I hate the commute, it's awful")
    chat(mia, "My manager was angry and the coffee was bad")
    show(mia, "After a bad afternoon")

    # ── Evening ────────────────────────────────────────────────────────

    header("EVENING: Time heals")

    mia.simulate_time_passage(240)
    show(mia, "Four hours later")

    reflection = mia.reflect()
    for insight in reflection.insights:
        print(f"  INSIGHT: {insight}")
    print(f"  TREND: {reflection.mood_trend}")
    print(f"  DRIFT: {reflection.personality_changes}\n")

    # ── Persist ────────────────────────────────────────────────────────

    header("PERSIST: One file, one soul")

    with Storage(db_path) as storage:
        storage.save_soul(mia.export())
        restored = Soul()
        restored.load(storage.load_soul(mia.id))

    stats = restored.memory.get_stats()
    print(f"  Restored {restored.identity.name}: {stats.total} memories "
          f"({stats.short_term_count} short-term, {stats.long_term_count} long-term)")
    print(f"  {restored.personality.get_personality_description()}\n")

    os.unlink(db_path)


if __name__ == "__main__":
    main()
