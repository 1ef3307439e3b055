"""Registry: many souls, chat sessions with them, and simple analytics.

In-process only. A web or chat front end calls into this; none ships here.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable

from soulforge.config import SoulConfig
from soulforge.errors import NotFound
from soulforge.factories import create_companion, create_npc, create_teacher
from soulforge.models import Reflection
from soulforge.soul import Soul

logger = logging.getLogger(__name__)

KINDS = ("companion", "therapist", "teacher", "npc", "creative", "custom")

GREETINGS = {
    "companion": "Hello! I'm here to chat, help, and be a supportive presence "
                 "in your day. What's on your mind?",
    "therapist": "Welcome to our session. I'm here to provide a safe, non-judgmental "
                 "space for you to explore your thoughts and feelings. "
                 "How are you doing today?",
    "teacher": "Hi there! I'm excited to help you learn and grow. What subject "
               "or skill would you like to explore today?",
    "creative": "Greetings, fellow creator! I'm here to help spark your imagination "
                "and guide your creative journey. What story wants to be told today?",
    "npc": "Greetings, traveler. I sense you seek knowledge or perhaps... "
           "something more. What brings you to my realm?",
}
DEFAULT_GREETING = "Hello! How can I assist you today?"

TOPIC_KEYWORDS = {
    "technology": ("code", "programming", "software", "tech"),
    "emotions": ("feel", "emotion", "sad", "happy", "anxious"),
    "creativity": ("story", "creative", "art", "imagination"),
    "learning": ("learn", "understand", "explain", "teach"),
    "relationships": ("friend", "family", "love", "relationship"),
}


@dataclass
class Being:
    soul: Soul
    kind: str
    category: str = "General"
    description: str = ""
    created: float = field(default_factory=time.time)
    last_active: float = field(default_factory=time.time)
    total_interactions: int = 0
    ratings: list[float] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.soul.id

    @property
    def average_rating(self) -> float:
        return sum(self.ratings) / len(self.ratings) if self.ratings else 0.0


@dataclass
class SessionMessage:
    sender: str  # user | being
    content: str
    timestamp: float
    mood: str | None = None
    insights: list[str] = field(default_factory=list)


@dataclass
class ChatSession:
    soul_id: str
    user_id: str
    user_name: str = "User"
    messages: list[SessionMessage] = field(default_factory=list)
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    satisfaction: float | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


@dataclass
class SessionReply:
    response: str
    mood: str
    insights: list[str]
    memory_count: int


def message_insights(message: str, being: Being) -> list[str]:
    lower = message.lower()
    insights = []
    if "sad" in lower or "depressed" in lower:
        insights.append("Detected emotional distress - responding with empathy")
    if "excited" in lower or "happy" in lower:
        insights.append("User expressing positive emotions - matching energy level")
    if "how" in lower or "explain" in lower:
        insights.append("User seeking knowledge - activating teaching mode")
    if "story" in lower or "creative" in lower:
        insights.append("Creative request detected - inspiring imagination")
    if being.total_interactions > 5:
        insights.append("Building on established relationship history")
    return insights


def extract_topics(messages: list[SessionMessage]) -> list[str]:
    topics = []
    for msg in messages:
        content = msg.content.lower()
        for topic, keywords in TOPIC_KEYWORDS.items():
            if topic not in topics and any(k in content for k in keywords):
                topics.append(topic)
    return topics


class Registry:
    """Owns souls by id and chat sessions by id. Unknown ids raise NotFound."""

    def __init__(self, rng: random.Random | None = None,
                 clock: Callable[[], float] = time.time) -> None:
        self._rng = rng
        self._clock = clock
        self._beings: dict[str, Being] = {}
        self._sessions: dict[str, ChatSession] = {}

    # ── beings ─────────────────────────────────────────────────────────

    def create(self, kind: str, name: str, config: SoulConfig | None = None,
               category: str = "General", description: str = "") -> Being:
        if kind not in KINDS:
            raise ValueError(f"Unknown being kind: {kind!r}")

        if kind == "custom":
            soul = Soul(config or SoulConfig(), rng=self._rng, clock=self._clock)
        elif kind == "teacher":
            soul = create_teacher(name, rng=self._rng, clock=self._clock)
        elif kind == "npc":
            soul = create_npc(name, "Guide", rng=self._rng, clock=self._clock)
        else:
            soul = create_companion(name, rng=self._rng, clock=self._clock)

        now = self._clock()
        being = Being(soul=soul, kind=kind, category=category,
                      description=description or f"A {kind} named {name}",
                      created=now, last_active=now)
        self._beings[being.id] = being
        logger.info("registered %s %s (%s)", kind, being.id, name)
        return being

    def add(self, soul: Soul, kind: str = "custom", category: str = "General",
            description: str = "") -> Being:
        """Registers an existing soul, e.g. one restored from storage."""
        if kind not in KINDS:
            raise ValueError(f"Unknown being kind: {kind!r}")
        now = self._clock()
        being = Being(soul=soul, kind=kind, category=category,
                      description=description or f"A {kind} named {soul.identity.name}",
                      created=now, last_active=now)
        self._beings[being.id] = being
        return being

    def get(self, soul_id: str) -> Being:
        try:
            return self._beings[soul_id]
        except KeyError:
            raise NotFound("soul", soul_id) from None

    def remove(self, soul_id: str) -> None:
        """Drops the soul and every session held with it."""
        self.get(soul_id)
        del self._beings[soul_id]
        for session_id in [s.id for s in self._sessions.values() if s.soul_id == soul_id]:
            del self._sessions[session_id]

    def beings(self) -> list[Being]:
        return list(self._beings.values())

    def reflect(self, soul_id: str) -> Reflection:
        return self.get(soul_id).soul.reflect()

    # ── sessions ───────────────────────────────────────────────────────

    def session(self, session_id: str) -> ChatSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise NotFound("session", session_id) from None

    def start_session(self, soul_id: str, user_id: str,
                      user_name: str = "User") -> ChatSession:
        being = self.get(soul_id)
        session = ChatSession(soul_id=soul_id, user_id=user_id,
                              user_name=user_name, start_time=self._clock())
        greeting = being.soul.respond(GREETINGS.get(being.kind, DEFAULT_GREETING),
                                      user_id, user_name)
        session.messages.append(SessionMessage(
            sender="being", content=greeting.response,
            timestamp=self._clock(), mood=greeting.mood.value,
        ))
        self._sessions[session.id] = session
        logger.info("session %s started (soul=%s, user=%s)", session.id, soul_id, user_id)
        return session

    def send(self, session_id: str, message: str) -> SessionReply:
        session = self.session(session_id)
        being = self.get(session.soul_id)

        session.messages.append(SessionMessage(
            sender="user", content=message, timestamp=self._clock()))
        result = being.soul.respond(message, session.user_id, session.user_name)
        insights = message_insights(message, being)
        session.messages.append(SessionMessage(
            sender="being", content=result.response, timestamp=self._clock(),
            mood=result.mood.value, insights=insights,
        ))

        being.total_interactions += 1
        being.last_active = self._clock()
        return SessionReply(response=result.response, mood=result.mood.value,
                            insights=insights, memory_count=len(being.soul.memory))

    def end_session(self, session_id: str,
                    satisfaction: float | None = None) -> ChatSession:
        """Stamps the end time. The session stays registered for
        session_summary and analytics until discard_session."""
        session = self.session(session_id)
        session.end_time = self._clock()
        if satisfaction is not None:
            session.satisfaction = satisfaction
            being = self._beings.get(session.soul_id)
            if being is not None:
                being.ratings.append(satisfaction)
        logger.info("session %s ended", session_id)
        return session

    def discard_session(self, session_id: str) -> ChatSession:
        session = self.session(session_id)
        del self._sessions[session_id]
        return session

    def session_summary(self, session_id: str) -> dict:
        session = self.session(session_id)
        being = self._beings.get(session.soul_id)
        end = session.end_time if session.end_time is not None else self._clock()
        return {
            "session_id": session.id,
            "duration": round(end - session.start_time),
            "message_count": len(session.messages),
            "being_name": being.soul.identity.name if being else None,
            "topics": extract_topics(session.messages),
            "emotional_journey": [m.mood for m in session.messages if m.mood],
            "satisfaction": session.satisfaction,
        }

    # ── analytics ──────────────────────────────────────────────────────

    def analytics(self) -> dict:
        kinds: dict[str, int] = {}
        moods: dict[str, int] = {}
        for being in self._beings.values():
            kinds[being.kind] = kinds.get(being.kind, 0) + 1
            mood = being.soul.mood.mood.value
            moods[mood] = moods.get(mood, 0) + 1

        total = len(self._beings)
        interactions = sum(b.total_interactions for b in self._beings.values())
        popular = sorted(self._beings.values(),
                         key=lambda b: b.total_interactions, reverse=True)[:3]
        return {
            "total_beings": total,
            "total_sessions": len(self._sessions),
            "kinds": kinds,
            "mood_distribution": moods,
            "average_interactions": interactions / total if total else 0.0,
            "popular": [
                {"id": b.id, "name": b.soul.identity.name,
                 "interactions": b.total_interactions}
                for b in popular
            ],
        }
