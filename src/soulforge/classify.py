"""Pluggable text hooks: emotional-impact classification and response composition.

Both defaults are deterministic keyword/template rules. Swap them for a real
sentiment model or generator by passing callables with the same contract:

    ImpactFn:   text -> EmotionalImpact
    ComposeFn:  ResponseRequest -> str
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from soulforge.models import (
    BehavioralTendencies,
    BigFive,
    ConversationContext,
    EmotionalImpact,
    EmotionalState,
    Memory,
    Mood,
    Polarity,
    ResponseStyle,
)

POSITIVE_WORDS = ("happy", "good", "great", "wonderful", "amazing",
                  "love", "like", "fantastic")
NEGATIVE_WORDS = ("sad", "bad", "terrible", "awful", "hate",
                  "dislike", "horrible", "angry")


def keyword_impact(text: str) -> EmotionalImpact:
    """Counts lexicon words present in text; the majority polarity wins."""
    lower = text.lower()
    positive = sum(1 for w in POSITIVE_WORDS if w in lower)
    negative = sum(1 for w in NEGATIVE_WORDS if w in lower)

    polarity = Polarity.NEUTRAL
    intensity = 20.0
    if positive > negative:
        polarity = Polarity.POSITIVE
        intensity = min(80.0, 30.0 + positive * 15)
    elif negative > positive:
        polarity = Polarity.NEGATIVE
        intensity = min(80.0, 30.0 + negative * 15)

    if polarity is Polarity.POSITIVE:
        weight = intensity
    elif polarity is Polarity.NEGATIVE:
        weight = -intensity
    else:
        weight = 0.0

    return EmotionalImpact(
        polarity=polarity,
        intensity=intensity,
        importance=30.0 + min(50.0, len(text) / 2),
        emotional_weight=weight,
    )


@dataclass
class ResponseRequest:
    """Everything a composer may look at to produce a reply."""

    text: str
    context: ConversationContext
    memories: list[Memory]          # relevant prior memories, best first
    style: ResponseStyle
    state: EmotionalState
    traits: BigFive
    tendencies: BehavioralTendencies
    extra: dict = field(default_factory=dict)


def template_response(req: ResponseRequest) -> str:
    """Small decision tree over question / mood / memory hit / personality."""
    mood = req.state.mood
    reply = "I understand what you're saying."

    if "?" in req.text:
        if req.tendencies.curiosity_level > 70:
            reply = "That's a fascinating question. Let me think about it..."
        else:
            reply = "I'll consider that question."
    elif mood is Mood.JOYFUL:
        reply = "That sounds wonderful!"
    elif mood is Mood.CONTEMPLATIVE:
        reply = "That gives me something to think about."
    elif mood is Mood.CURIOUS:
        reply = "That's really interesting. Tell me more."

    if req.memories and req.context.participant_name in req.memories[0].content:
        reply += " This reminds me of our previous conversations."

    if req.traits.agreeableness > 70:
        reply = "I really appreciate you sharing that. " + reply
    if req.style.empathy > 80:
        reply = "I can sense this is important to you. " + reply

    return reply


ImpactFn = Callable[[str], EmotionalImpact]
ComposeFn = Callable[[ResponseRequest], str]
