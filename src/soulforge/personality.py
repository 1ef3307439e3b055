"""PersonalityModel: Big Five trait vector, response style and slow adaptation.

Traits live in a numpy vector in TRAITS order. Adaptation is an exponential
moving average toward a target, never an absolute set.
"""

from __future__ import annotations

import logging

import numpy as np

from soulforge.models import (
    TRAITS,
    BehavioralTendencies,
    BigFive,
    ConversationContext,
    DecisionStyle,
    EmotionalState,
    Mood,
    PersonalityConfig,
    Prediction,
    ResponseStyle,
)

logger = logging.getLogger(__name__)

DEFAULT_ADAPTATION_RATE = 5.0  # % of the gap closed per update

_INDEX = {name: i for i, name in enumerate(TRAITS)}


class PersonalityModel:
    def __init__(self, config: PersonalityConfig | None = None,
                 adaptation_rate: float = DEFAULT_ADAPTATION_RATE) -> None:
        config = config or PersonalityConfig()
        self._traits = np.array([getattr(config.big_five, t) for t in TRAITS],
                                dtype=np.float64)
        self.mbti = config.mbti
        self.temperament = config.temperament
        self.archetype = config.archetype
        self.adaptation_rate = float(np.clip(adaptation_rate, 0.0, 100.0))

    # ── traits ─────────────────────────────────────────────────────────

    def __getitem__(self, trait: str) -> float:
        if trait not in _INDEX:
            raise ValueError(f"Unknown trait: {trait!r}")
        return float(self._traits[_INDEX[trait]])

    @property
    def big_five(self) -> BigFive:
        return BigFive(**self.traits())

    def traits(self) -> dict[str, float]:
        return {name: float(v) for name, v in zip(TRAITS, self._traits)}

    def config(self) -> PersonalityConfig:
        return PersonalityConfig(
            big_five=self.big_five,
            mbti=self.mbti,
            temperament=self.temperament,
            archetype=self.archetype,
        )

    def update_traits(self, targets: dict[str, float]) -> dict[str, float]:
        """Move each named trait toward its target by adaptation_rate percent.

        Returns the applied change per trait.
        """
        unknown = set(targets) - set(_INDEX)
        if unknown:
            raise ValueError(f"Unknown trait(s): {sorted(unknown)}")
        if not targets:
            return {}

        idx = np.array([_INDEX[t] for t in targets])
        target = np.array([float(v) for v in targets.values()], dtype=np.float64)
        before = self._traits[idx].copy()
        step = (target - before) * (self.adaptation_rate / 100.0)
        self._traits[idx] = np.clip(before + step, 0.0, 100.0)

        changes = {t: float(self._traits[i] - b)
                   for t, i, b in zip(targets, idx, before)}
        logger.debug("traits adapted: %s", changes)
        return changes

    # ── derived styles ─────────────────────────────────────────────────

    def derive_response_style(self, state: EmotionalState,
                              context: ConversationContext) -> ResponseStyle:
        extraversion, agreeableness, neuroticism, conscientiousness = (
            self["extraversion"], self["agreeableness"],
            self["neuroticism"], self["conscientiousness"],
        )

        verbosity = "moderate"
        if extraversion > 70 and state.social_capacity > 60:
            verbosity = "verbose"
        elif extraversion < 30 or state.social_capacity < 30:
            verbosity = "concise"

        formality = "neutral"
        if conscientiousness > 70:
            formality = "formal"
        elif extraversion > 60 and agreeableness > 60:
            formality = "casual"

        if context.relationship in ("friend", "family"):
            formality = "casual"
            if verbosity == "concise":
                verbosity = "moderate"
        elif context.relationship == "professional":
            formality = "formal"

        empathy = round(agreeableness * (1 - 0.3 * neuroticism / 100))
        assertiveness = round(
            extraversion * state.confidence / 100 * (1 - 0.2 * agreeableness / 100)
        )

        return ResponseStyle(
            tone=self._tone(state.mood),
            verbosity=verbosity,
            formality=formality,
            empathy=empathy,
            assertiveness=assertiveness,
        )

    def _tone(self, mood: Mood) -> str:
        if mood is Mood.JOYFUL:
            return "enthusiastic" if self["extraversion"] > 60 else "warm"
        if mood is Mood.CONTENT:
            return "pleasant"
        if mood is Mood.EXCITED:
            return "energetic"
        if mood is Mood.ANXIOUS:
            return "worried" if self["neuroticism"] > 60 else "cautious"
        if mood is Mood.FRUSTRATED:
            return "strained" if self["agreeableness"] > 70 else "direct"
        if mood is Mood.MELANCHOLIC:
            return "thoughtful"
        if mood is Mood.CONTEMPLATIVE:
            return "reflective"
        if mood is Mood.CURIOUS:
            return "inquisitive"
        if mood is Mood.CALM:
            return "serene"
        return "friendly" if self["agreeableness"] > 60 else "neutral"

    def derive_decision_style(self) -> DecisionStyle:
        o, c, n = self["openness"], self["conscientiousness"], self["neuroticism"]

        analysis_depth = "moderate"
        if o > 70 and c > 60:
            analysis_depth = "deep"
        elif o < 40 or c < 40:
            analysis_depth = "shallow"

        risk_tolerance = "moderate"
        if n > 60:
            risk_tolerance = "low"
        elif o > 70 and n < 40:
            risk_tolerance = "high"

        time_preference = "considered"
        if c > 75:
            time_preference = "deliberate"
        elif c < 40:
            time_preference = "immediate"

        return DecisionStyle(
            analysis_depth=analysis_depth,
            risk_tolerance=risk_tolerance,
            time_preference=time_preference,
            social_consideration=round(self["agreeableness"]),
        )

    def derive_behavioral_tendencies(self) -> BehavioralTendencies:
        o, c, e, n = (self["openness"], self["conscientiousness"],
                      self["extraversion"], self["neuroticism"])
        return BehavioralTendencies(
            curiosity_level=round(o),
            social_seeking=round(e),
            emotional_expression=round((100 - n + e) / 2),
            planning_orientation=round(c),
            change_adaptability=round((o + (100 - n)) / 2),
        )

    def predict_reaction(self, situation: str, state: EmotionalState) -> Prediction:
        """Heuristic guess at how this personality meets a situation."""
        reaction = "thoughtful consideration"
        confidence = 50
        reasoning = "Based on balanced personality traits"

        if self["openness"] > 70:
            reaction = "curious exploration"
            confidence += 20
            reasoning = "High openness suggests interest in new experiences"
        if self["conscientiousness"] > 70:
            reaction = "careful planning and analysis"
            confidence += 15
            reasoning += ", high conscientiousness indicates systematic approach"
        if self["neuroticism"] > 60:
            reaction = "cautious evaluation"
            confidence += 10
            reasoning += ", neuroticism suggests careful risk assessment"

        if state.mood is Mood.ANXIOUS:
            reaction = "hesitant consideration"
            reasoning += ", current anxious mood increases caution"
        elif state.mood is Mood.EXCITED:
            reaction = "enthusiastic engagement"
            reasoning += ", current excited mood increases openness"

        return Prediction(likely_reaction=reaction,
                          confidence=min(90, confidence),
                          reasoning=reasoning)

    def get_personality_description(self) -> str:
        words = []
        e, a, c, n, o = (self["extraversion"], self["agreeableness"],
                         self["conscientiousness"], self["neuroticism"],
                         self["openness"])
        if e > 60:
            words.append("outgoing")
        elif e < 40:
            words.append("reserved")
        if a > 70:
            words.append("compassionate")
        elif a < 30:
            words.append("competitive")
        if c > 70:
            words.append("organized")
        elif c < 30:
            words.append("spontaneous")
        if n > 60:
            words.append("sensitive")
        elif n < 30:
            words.append("resilient")
        if o > 70:
            words.append("creative")
        elif o < 30:
            words.append("practical")

        tendencies = ", ".join(words) if words else "balanced"
        return (f"{self.mbti} personality type with {tendencies} tendencies. "
                f"{self.archetype} archetype.")

    def __repr__(self) -> str:
        vec = ", ".join(f"{t[0].upper()}={v:.0f}" for t, v in zip(TRAITS, self._traits))
        return f"PersonalityModel({vec})"
