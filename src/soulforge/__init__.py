"""soulforge: persistent digital beings. Memory, mood and personality in one loop."""

from soulforge.models import (
    BigFive,
    EmotionalImpact,
    EmotionalState,
    Identity,
    Memory,
    MemoryType,
    Mood,
    PersonalityConfig,
    Polarity,
    Stimulus,
    Thought,
    ThoughtType,
    Trace,
)
from soulforge.errors import NotFound, SoulforgeError
from soulforge.memory import MemoryStore
from soulforge.mood import MoodEngine, classify_mood
from soulforge.personality import PersonalityModel
from soulforge.classify import ResponseRequest, keyword_impact, template_response
from soulforge.config import SoulBuilder, SoulConfig
from soulforge.soul import Soul
from soulforge.factories import create_companion, create_npc, create_soul, create_teacher
from soulforge.registry import Registry
from soulforge.storage import Storage

__version__ = "0.1.0"
__all__ = [
    "Soul", "SoulConfig", "SoulBuilder", "MemoryStore", "MoodEngine",
    "PersonalityModel", "Registry", "Storage",
    "Memory", "MemoryType", "Mood", "EmotionalState", "Stimulus", "Polarity",
    "Thought", "ThoughtType", "BigFive", "PersonalityConfig", "Identity",
    "EmotionalImpact", "ResponseRequest", "Trace",
    "NotFound", "SoulforgeError",
    "classify_mood", "keyword_impact", "template_response",
    "create_soul", "create_companion", "create_npc", "create_teacher",
]
