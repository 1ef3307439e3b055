"""Core data models. Memories, moods, thoughts, traits. A Soul is made of these."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class MemoryType(str, Enum):
    EPISODIC = "episodic"      # experiences, conversations
    SEMANTIC = "semantic"       # facts, self-knowledge
    PROCEDURAL = "procedural"  # how to do things
    EMOTIONAL = "emotional"     # charged moments


class Mood(str, Enum):
    JOYFUL = "joyful"
    CONTENT = "content"
    NEUTRAL = "neutral"
    MELANCHOLIC = "melancholic"
    ANXIOUS = "anxious"
    EXCITED = "excited"
    CALM = "calm"
    FRUSTRATED = "frustrated"
    CURIOUS = "curious"
    CONTEMPLATIVE = "contemplative"


class ThoughtType(str, Enum):
    REFLECTION = "reflection"
    DECISION = "decision"
    OBSERVATION = "observation"
    PLANNING = "planning"
    EMOTION = "emotion"


class Polarity(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Temperament(str, Enum):
    SANGUINE = "sanguine"
    CHOLERIC = "choleric"
    MELANCHOLIC = "melancholic"
    PHLEGMATIC = "phlegmatic"


MBTI_TYPES = frozenset({
    "INTJ", "INTP", "ENTJ", "ENTP",
    "INFJ", "INFP", "ENFJ", "ENFP",
    "ISTJ", "ISFJ", "ESTJ", "ESFJ",
    "ISTP", "ISFP", "ESTP", "ESFP",
})

TRAITS = ("openness", "conscientiousness", "extraversion",
          "agreeableness", "neuroticism")

SHORT_TERM = "short_term"
LONG_TERM = "long_term"
TIERS = (SHORT_TERM, LONG_TERM)


# ── Memory ─────────────────────────────────────────────────────────────


@dataclass
class Memory:
    """A stored experience. Importance and emotional weight are always in range."""

    content: str
    type: MemoryType = MemoryType.EPISODIC
    importance: float = 50.0         # 0-100
    emotional_weight: float = 0.0    # -100..100, valence
    created_at: float = field(default_factory=time.time)
    tags: list[str] = field(default_factory=list)
    associations: list[str] = field(default_factory=list)  # ids of related memories
    id: str = field(default_factory=_new_id)
    tier: str | None = None          # working list holding it; None until stored

    def __post_init__(self) -> None:
        self.type = MemoryType(self.type)
        if self.tier is not None and self.tier not in TIERS:
            raise ValueError(f"unknown memory tier: {self.tier!r}")
        self.importance = clamp(self.importance)
        self.emotional_weight = clamp(self.emotional_weight, -100.0, 100.0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "type": self.type.value,
            "importance": self.importance,
            "emotional_weight": self.emotional_weight,
            "created_at": self.created_at,
            "tags": list(self.tags),
            "associations": list(self.associations),
            "tier": self.tier,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Memory:
        return cls(
            id=data["id"],
            content=data["content"],
            type=MemoryType(data.get("type", "episodic")),
            importance=data.get("importance", 50.0),
            emotional_weight=data.get("emotional_weight", 0.0),
            created_at=data.get("created_at", time.time()),
            tags=list(data.get("tags", [])),
            associations=list(data.get("associations", [])),
            tier=data.get("tier"),
        )


@dataclass
class MemoryStats:
    total: int
    short_term_count: int
    long_term_count: int
    average_importance: int
    counts_by_type: dict[str, int]


# ── Mood ───────────────────────────────────────────────────────────────


@dataclass
class EmotionalState:
    """The continuous state the mood label is derived from. Scalars in 0-100."""

    mood: Mood = Mood.NEUTRAL
    energy: float = 70.0
    stress: float = 20.0
    confidence: float = 60.0
    social_capacity: float = 80.0

    def __post_init__(self) -> None:
        self.mood = Mood(self.mood)
        self.energy = clamp(self.energy)
        self.stress = clamp(self.stress)
        self.confidence = clamp(self.confidence)
        self.social_capacity = clamp(self.social_capacity)

    def copy(self) -> EmotionalState:
        return EmotionalState(self.mood, self.energy, self.stress,
                              self.confidence, self.social_capacity)

    def to_dict(self) -> dict:
        return {
            "mood": self.mood.value,
            "energy": self.energy,
            "stress": self.stress,
            "confidence": self.confidence,
            "social_capacity": self.social_capacity,
        }


@dataclass
class Stimulus:
    polarity: Polarity
    intensity: float  # 0-100
    context: str | None = None

    def __post_init__(self) -> None:
        self.polarity = Polarity(self.polarity)
        self.intensity = clamp(self.intensity)


@dataclass
class Thought:
    content: str
    type: ThoughtType = ThoughtType.REFLECTION
    timestamp: float = field(default_factory=time.time)
    triggers: list[str] = field(default_factory=list)  # what caused it
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        self.type = ThoughtType(self.type)


@dataclass
class MoodEntry:
    mood: Mood
    timestamp: float


@dataclass
class EmotionalImpact:
    """Output contract of an impact classifier."""

    polarity: Polarity
    intensity: float
    importance: float
    emotional_weight: float

    def __post_init__(self) -> None:
        self.polarity = Polarity(self.polarity)
        self.intensity = clamp(self.intensity)
        self.importance = clamp(self.importance)
        self.emotional_weight = clamp(self.emotional_weight, -100.0, 100.0)


# ── Personality ────────────────────────────────────────────────────────


@dataclass
class BigFive:
    openness: float = 60.0
    conscientiousness: float = 65.0
    extraversion: float = 45.0
    agreeableness: float = 70.0
    neuroticism: float = 35.0

    def __post_init__(self) -> None:
        for name in TRAITS:
            setattr(self, name, clamp(float(getattr(self, name))))

    def to_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in TRAITS}


@dataclass
class PersonalityConfig:
    big_five: BigFive = field(default_factory=BigFive)
    mbti: str = "ISFJ"
    temperament: Temperament = Temperament.PHLEGMATIC
    archetype: str = "The Helper"

    def __post_init__(self) -> None:
        if isinstance(self.big_five, dict):
            self.big_five = BigFive(**self.big_five)
        self.mbti = self.mbti.upper()
        if self.mbti not in MBTI_TYPES:
            raise ValueError(f"Unknown MBTI type: {self.mbti!r}")
        self.temperament = Temperament(self.temperament)

    def to_dict(self) -> dict:
        return {
            "big_five": self.big_five.to_dict(),
            "mbti": self.mbti,
            "temperament": self.temperament.value,
            "archetype": self.archetype,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PersonalityConfig:
        return cls(
            big_five=BigFive(**data.get("big_five", {})),
            mbti=data.get("mbti", "ISFJ"),
            temperament=data.get("temperament", "phlegmatic"),
            archetype=data.get("archetype", "The Helper"),
        )


@dataclass
class ResponseStyle:
    tone: str
    verbosity: str      # concise | moderate | verbose
    formality: str      # casual | neutral | formal
    empathy: int
    assertiveness: int


@dataclass
class DecisionStyle:
    analysis_depth: str    # shallow | moderate | deep
    risk_tolerance: str    # low | moderate | high
    time_preference: str   # immediate | considered | deliberate
    social_consideration: int


@dataclass
class BehavioralTendencies:
    curiosity_level: int
    social_seeking: int
    emotional_expression: int
    planning_orientation: int
    change_adaptability: int


@dataclass
class Prediction:
    likely_reaction: str
    confidence: int
    reasoning: str


# ── Identity & conversation ────────────────────────────────────────────


@dataclass
class Identity:
    """Who the soul is. Set at creation, not derived."""

    name: str = "Soul"
    role: str = "Companion"
    age: int | None = None
    background: str = ""
    goals: list[str] = field(default_factory=list)
    beliefs: list[str] = field(default_factory=list)
    values: list[str] = field(default_factory=list)
    relationships: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "role": self.role,
            "age": self.age,
            "background": self.background,
            "goals": list(self.goals),
            "beliefs": list(self.beliefs),
            "values": list(self.values),
            "relationships": dict(self.relationships),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Identity:
        return cls(**data)


@dataclass
class Turn:
    speaker: str
    message: str
    timestamp: float = field(default_factory=time.time)
    emotional_response: str | None = None


@dataclass
class ConversationContext:
    participant_id: str
    participant_name: str
    relationship: str = "acquaintance"
    current_topic: str | None = None
    history: list[Turn] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant_id,
            "participant_name": self.participant_name,
            "relationship": self.relationship,
            "current_topic": self.current_topic,
            "history": [
                {
                    "speaker": t.speaker,
                    "message": t.message,
                    "timestamp": t.timestamp,
                    "emotional_response": t.emotional_response,
                }
                for t in self.history
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ConversationContext:
        return cls(
            participant_id=data["participant_id"],
            participant_name=data["participant_name"],
            relationship=data.get("relationship", "acquaintance"),
            current_topic=data.get("current_topic"),
            history=[Turn(**t) for t in data.get("history", [])],
        )


# ── Results ────────────────────────────────────────────────────────────


@dataclass
class Response:
    response: str
    mood: Mood
    thoughts: list[Thought]
    memories: list[Memory]


@dataclass
class Reflection:
    insights: list[str]
    personality_changes: dict[str, float]
    mood_trend: str


@dataclass
class Status:
    id: str
    identity: Identity
    mood: Mood
    emotional_state: EmotionalState
    personality: str
    memory_stats: MemoryStats
    recent_thoughts: list[Thought]


@dataclass
class Trace:
    """Registro de una operación. Observabilidad sin dependencias."""

    operation: str
    input_text: str = ""
    output_text: str = ""
    source: str = ""
    duration_ms: float | None = None
    metadata: dict = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)
    id: str = field(default_factory=_new_id)
