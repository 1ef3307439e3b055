"""Soul: the core class. Memory, mood and personality wired into one interaction loop."""

from __future__ import annotations

import logging
import random
import time
import uuid
from collections import Counter
from typing import Callable

from soulforge.classify import (
    ComposeFn,
    ImpactFn,
    ResponseRequest,
    keyword_impact,
    template_response,
)
from soulforge.config import SoulConfig
from soulforge.errors import NotFound
from soulforge.memory import MemoryStore
from soulforge.models import (
    ConversationContext,
    EmotionalImpact,
    Identity,
    Memory,
    MemoryType,
    MoodEntry,
    PersonalityConfig,
    Reflection,
    Response,
    Status,
    Stimulus,
    Thought,
    ThoughtType,
    Trace,
    Turn,
    clamp,
)
from soulforge.mood import MoodEngine
from soulforge.personality import PersonalityModel

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

MAX_HISTORY = 20          # turns; trimmed to the newest KEEP_HISTORY on overflow
KEEP_HISTORY = 10
RECALL_LIMIT = 5
RECALL_MIN_IMPORTANCE = 30.0
RESPONSE_IMPORTANCE = 40.0
REFLECTION_IMPORTANCE = 60.0
REFLECTION_WEIGHT = 10.0
REFLECTION_PULL = 10.0    # target offset per nudge point; the EMA rate scales it down
SPONTANEOUS_CHANCE = 0.3  # per simulate_time_passage call
MAX_TRACES = 500
KEEP_TRACES = 250

QUESTION_THOUGHT = "That's an interesting question to consider."
DEFAULT_INSIGHT = "I'm continuing to learn and grow from my experiences"


class Soul:
    """Un ente persistente. Recuerda, siente, y su personalidad deriva.

    API:
        soul.respond(text, pid, name)  # one interaction, full pipeline
        soul.reflect()  # insights, mood trend, trait drift
        soul.simulate_time_passage(m)  # the caller drives time
        soul.status()  # who am I now
        soul.export() / soul.load()  # snapshot round-trip
        soul.traces()  # operation traces
    """

    def __init__(self, config: SoulConfig | None = None,
                 rng: random.Random | None = None,
                 clock: Clock = time.time,
                 impact_fn: ImpactFn | None = None,
                 compose_fn: ComposeFn | None = None) -> None:
        config = config or SoulConfig()
        self.id = uuid.uuid4().hex
        self.identity = config.identity
        self.empathy_level = config.empathy_level
        self.learning_rate = config.learning_rate
        self._enable_traces = config.enable_traces

        self._rng = rng or random.Random()
        self._base_clock = clock
        self._offset = 0.0  # simulated seconds
        self._impact_fn = impact_fn or keyword_impact
        self._compose_fn = compose_fn or template_response

        self.memory = MemoryStore(config.short_term_capacity,
                                  config.memory_capacity, clock=self.now)
        self.mood = MoodEngine(config.initial_mood, rng=self._rng, clock=self.now,
                               thought_interval=config.thought_interval)
        self.personality = PersonalityModel(config.personality, config.learning_rate)

        self._contexts: dict[str, ConversationContext] = {}
        self._traces: list[Trace] = []

        self._store_identity_memory()
        logger.info("soul %s created (%s, %s)", self.id, self.identity.name,
                    self.identity.role)

    def now(self) -> float:
        """Wall clock plus simulated time."""
        return self._base_clock() + self._offset

    # ── respond ────────────────────────────────────────────────────────

    def respond(self, text: str, participant_id: str = "user",
                participant_name: str = "User") -> Response:
        """Procesa una entrada y responde. Pipeline completo."""
        t0 = time.time()
        context = self._get_or_create_context(participant_id, participant_name)
        tag = participant_name.lower()

        impact = self._impact_fn(text)
        if not isinstance(impact, EmotionalImpact):
            logger.warning("impact classifier returned %r", type(impact).__name__)
            raise TypeError("impact classifier must return an EmotionalImpact, "
                            f"got {type(impact).__name__}")

        self.mood.update_mood(Stimulus(
            polarity=impact.polarity,
            intensity=impact.intensity,
            context=f"conversation with {participant_name}",
        ))

        record = self.memory.store(
            f'{participant_name} said: "{text}"',
            MemoryType.EPISODIC,
            impact.importance,
            impact.emotional_weight,
            ["conversation", tag, "input"],
        )

        relevant = self.memory.recall(text, RECALL_LIMIT, RECALL_MIN_IMPORTANCE)
        thoughts = self._generate_thoughts(text, context)

        state = self.mood.state
        style = self.personality.derive_response_style(state, context)
        reply = self._compose_fn(ResponseRequest(
            text=text,
            context=context,
            memories=[m for m in relevant if m.id != record.id],
            style=style,
            state=state,
            traits=self.personality.big_five,
            tendencies=self.personality.derive_behavioral_tendencies(),
        ))
        if not isinstance(reply, str):
            logger.warning("response composer returned %r", type(reply).__name__)
            raise TypeError("response composer must return a str, "
                            f"got {type(reply).__name__}")

        self.memory.store(
            f'I responded: "{reply}"',
            MemoryType.EPISODIC,
            RESPONSE_IMPORTANCE,
            impact.emotional_weight * 0.5,
            ["conversation", tag, "response"],
        )

        now = self.now()
        context.history.append(Turn(participant_name, text, now, impact.polarity.value))
        context.history.append(Turn(self.identity.name, reply, now))
        if len(context.history) > MAX_HISTORY:
            context.history = context.history[-KEEP_HISTORY:]

        self._trace("respond", text, reply, participant_id, t0)
        return Response(response=reply, mood=self.mood.mood,
                        thoughts=thoughts, memories=[record])

    def _generate_thoughts(self, text: str,
                           context: ConversationContext) -> list[Thought]:
        thoughts = []
        spontaneous = self.mood.generate_internal_monologue(
            f"conversation with {context.participant_name}")
        if spontaneous is not None:
            thoughts.append(spontaneous)

        if "?" in text:
            thoughts.append(self.mood.add_thought(
                QUESTION_THOUGHT, ThoughtType.OBSERVATION, ["question", "curiosity"]))
        return thoughts

    # ── reflect ────────────────────────────────────────────────────────

    def reflect(self) -> Reflection:
        """Reflexiona: insights, tendencia de ánimo y deriva de personalidad."""
        t0 = time.time()
        memories = self.memory.recent(10)
        thoughts = self.mood.recent_thoughts(5)
        history = self.mood.mood_history(24)

        insights = self._insights(memories, thoughts)
        trend = self._mood_trend(history)
        changes = self._adapt_personality(memories)

        self.memory.store(
            "I reflected on recent experiences and gained insights: "
            + ", ".join(insights),
            MemoryType.SEMANTIC,
            REFLECTION_IMPORTANCE,
            REFLECTION_WEIGHT,
            ["reflection", "self-awareness", "growth"],
        )
        logger.info("soul %s reflected: %d insights", self.id, len(insights))
        self._trace("reflect", f"{len(memories)} memories", trend, "", t0)
        return Reflection(insights=insights, personality_changes=changes,
                          mood_trend=trend)

    @staticmethod
    def _insights(memories: list[Memory], thoughts: list[Thought]) -> list[str]:
        insights = []
        if sum(1 for m in memories if abs(m.emotional_weight) > 50) > 3:
            insights.append("I've been having many emotionally significant experiences lately")
        if sum(1 for t in thoughts if t.type is ThoughtType.REFLECTION) > 2:
            insights.append("I've been doing a lot of reflecting recently")
        if not insights:
            insights.append(DEFAULT_INSIGHT)
        return insights

    @staticmethod
    def _mood_trend(history: list[MoodEntry]) -> str:
        if len(history) < 2:
            return "Not enough mood data to analyze trends"
        counts = Counter(entry.mood for entry in history[-5:])
        dominant = counts.most_common(1)[0][0]
        return f"Recently, I've been predominantly {dominant.value}"

    def _adapt_personality(self, memories: list[Memory]) -> dict[str, float]:
        positive = sum(1 for m in memories if m.emotional_weight > 30)
        negative = sum(1 for m in memories if m.emotional_weight < -30)

        if positive > negative:
            nudges = {"extraversion": 2.0, "neuroticism": -1.0}
        elif negative > positive:
            nudges = {"neuroticism": 1.0}
        else:
            return {}

        targets = {trait: clamp(self.personality[trait] + n * REFLECTION_PULL)
                   for trait, n in nudges.items()}
        return self.personality.update_traits(targets)

    # ── time ───────────────────────────────────────────────────────────

    def simulate_time_passage(self, minutes: float) -> Thought | None:
        """Avanza el tiempo simulado. Puede surgir un pensamiento espontáneo."""
        t0 = time.time()
        self._offset += minutes * 60
        self.mood.simulate_time_passage(minutes)

        thought = None
        if self._rng.random() < SPONTANEOUS_CHANCE:
            thought = self.mood.generate_internal_monologue("time passage")
        self._trace("simulate_time_passage", f"{minutes} minutes",
                    thought.content if thought else "", "", t0)
        return thought

    # ── contexts ───────────────────────────────────────────────────────

    def _get_or_create_context(self, participant_id: str,
                               participant_name: str) -> ConversationContext:
        context = self._contexts.get(participant_id)
        if context is None:
            context = ConversationContext(participant_id, participant_name)
            self._contexts[participant_id] = context
        return context

    def context(self, participant_id: str) -> ConversationContext:
        try:
            return self._contexts[participant_id]
        except KeyError:
            raise NotFound("participant", participant_id) from None

    def set_relationship(self, participant_id: str, relationship: str) -> None:
        self.context(participant_id).relationship = relationship

    @property
    def contexts(self) -> list[ConversationContext]:
        return list(self._contexts.values())

    # ── status ─────────────────────────────────────────────────────────

    def status(self) -> Status:
        """Quién soy ahora."""
        state = self.mood.state
        return Status(
            id=self.id,
            identity=self.identity,
            mood=state.mood,
            emotional_state=state,
            personality=self.personality.get_personality_description(),
            memory_stats=self.memory.get_stats(),
            recent_thoughts=self.mood.recent_thoughts(3),
        )

    # ── snapshot ───────────────────────────────────────────────────────

    def export(self) -> dict:
        """Plain structured snapshot; JSON-serialisable."""
        return {
            "id": self.id,
            "identity": self.identity.to_dict(),
            "personality": self.personality.config().to_dict(),
            "memories": [m.to_dict() for m in self.memory.export()],
            "conversation_contexts": [c.to_dict() for c in self._contexts.values()],
            "empathy_level": self.empathy_level,
            "learning_rate": self.learning_rate,
            "emotional_state": self.mood.state.to_dict(),
        }

    def load(self, snapshot: dict) -> None:
        """Replaces this soul's state with a snapshot from export()."""
        self.id = snapshot["id"]
        self.identity = Identity.from_dict(snapshot["identity"])
        self.empathy_level = clamp(snapshot.get("empathy_level", self.empathy_level))
        self.learning_rate = clamp(snapshot.get("learning_rate", self.learning_rate))

        self.memory.load(snapshot.get("memories", []))
        self._contexts = {}
        for data in snapshot.get("conversation_contexts", []):
            context = ConversationContext.from_dict(data)
            self._contexts[context.participant_id] = context

        self.personality = PersonalityModel(
            PersonalityConfig.from_dict(snapshot.get("personality", {})),
            self.learning_rate,
        )
        if "emotional_state" in snapshot:
            self.mood.restore(snapshot["emotional_state"])
        logger.info("soul %s loaded (%d memories, %d contexts)",
                    self.id, len(self.memory), len(self._contexts))

    # ── traces (observability) ─────────────────────────────────────────

    def _trace(self, operation: str, input_text: str,
               output_text: str, source: str, t0: float) -> None:
        """Registra un trace si enable_traces=True."""
        if not self._enable_traces:
            return
        self._traces.append(Trace(
            operation=operation,
            input_text=str(input_text)[:500],
            output_text=str(output_text)[:500],
            source=source or "",
            duration_ms=(time.time() - t0) * 1000,
        ))
        if len(self._traces) > MAX_TRACES:
            self._traces = self._traces[-KEEP_TRACES:]

    def traces(self, operation: str | None = None,
               source: str | None = None,
               limit: int = 100) -> list[Trace]:
        """Trazas, de la más reciente a la más antigua."""
        found = [t for t in reversed(self._traces)
                 if (operation is None or t.operation == operation)
                 and (source is None or t.source == source)]
        return found[:limit]

    # ── utilidades ─────────────────────────────────────────────────────

    def _store_identity_memory(self) -> None:
        self.memory.store(
            f"I am {self.identity.name}, a {self.identity.role}.",
            MemoryType.SEMANTIC, 100, 0, ["identity", "self"],
        )

    def __repr__(self) -> str:
        return (f"Soul(name={self.identity.name!r}, mood={self.mood.mood.value}, "
                f"memories={len(self.memory)})")
