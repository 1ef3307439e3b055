"""MemoryStore: owns a soul's memories, ranks them, consolidates and forgets."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from soulforge.consolidate import (
    LONG_TERM_CAPACITY,
    SHORT_TERM_CAPACITY,
    consolidate,
    split_for_import,
)
from soulforge.decay import recency_bonus
from soulforge.models import SHORT_TERM, Memory, MemoryStats, MemoryType, clamp

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class MemoryStore:
    """Primary index by id plus two working lists (short-term, long-term).

    API:
        store.store(text, type)  # something happened, record it
        store.recall(query)  # what is relevant now
        store.associate(a, b)  # link two memories
        store.strengthen(id)  # make a memory more important
        store.export() / load()  # snapshot round-trip
    """

    def __init__(self, short_term_capacity: int = SHORT_TERM_CAPACITY,
                 long_term_capacity: int = LONG_TERM_CAPACITY,
                 clock: Clock = time.time) -> None:
        self.short_term_capacity = short_term_capacity
        self.long_term_capacity = long_term_capacity
        self._clock = clock
        self._memories: dict[str, Memory] = {}
        self._short_term: list[Memory] = []
        self._long_term: list[Memory] = []

    # ── store ──────────────────────────────────────────────────────────

    def store(self, content: str,
              type: str | MemoryType = MemoryType.EPISODIC,
              importance: float = 50.0,
              emotional_weight: float = 0.0,
              tags: list[str] | None = None) -> Memory:
        """Registra un recuerdo y consolida."""
        mem = Memory(
            content=content,
            type=MemoryType(type),
            importance=importance,
            emotional_weight=emotional_weight,
            created_at=self._clock(),
            tags=list(tags or []),
            tier=SHORT_TERM,
        )
        self._memories[mem.id] = mem
        self._short_term.insert(0, mem)
        self._consolidate()
        logger.debug("stored %s memory %s (importance=%.1f)",
                     mem.type.value, mem.id, mem.importance)
        return mem

    # ── recall ─────────────────────────────────────────────────────────

    def relevance(self, mem: Memory, query: str, now: float | None = None) -> float:
        """Score = 100 on a content hit, +50 per matching tag,
        +0.5 x importance, + recency bonus."""
        query_lower = query.lower()
        score = 0.0
        if query_lower in mem.content.lower():
            score += 100.0
        for tag in mem.tags:
            if query_lower in tag.lower():
                score += 50.0
        score += mem.importance * 0.5
        score += recency_bonus(mem, self._clock() if now is None else now)
        return score

    def recall(self, query: str, limit: int = 10,
               min_importance: float = 0.0) -> list[Memory]:
        """Recuerdos relevantes para query, de mayor a menor relevancia."""
        now = self._clock()
        scored = []
        for mem in self._memories.values():
            if mem.importance < min_importance:
                continue
            score = self.relevance(mem, query, now)
            if score > 0:
                scored.append((score, mem))
        scored.sort(key=lambda x: x[0], reverse=True)
        result = [mem for _, mem in scored[:limit]]
        logger.debug("recall %r -> %d of %d candidates",
                     query[:40], len(result), len(scored))
        return result

    # ── lookups ────────────────────────────────────────────────────────

    def get(self, memory_id: str) -> Memory | None:
        return self._memories.get(memory_id)

    def by_type(self, type: str | MemoryType) -> list[Memory]:
        type = MemoryType(type)
        found = [m for m in self._memories.values() if m.type == type]
        found.sort(key=lambda m: m.created_at, reverse=True)
        return found

    def recent(self, count: int = 10) -> list[Memory]:
        ordered = sorted(self._memories.values(),
                         key=lambda m: m.created_at, reverse=True)
        return ordered[:count]

    def associated(self, memory_id: str) -> list[Memory]:
        mem = self._memories.get(memory_id)
        if mem is None:
            return []
        return [self._memories[i] for i in mem.associations if i in self._memories]

    # ── associate / strengthen ─────────────────────────────────────────

    def associate(self, id_a: str, id_b: str) -> None:
        """Symmetric, idempotent link. Unknown ids are ignored."""
        a = self._memories.get(id_a)
        b = self._memories.get(id_b)
        if a is None or b is None:
            return
        if id_b not in a.associations:
            a.associations.append(id_b)
        if id_a not in b.associations:
            b.associations.append(id_a)

    def strengthen(self, memory_id: str, amount: float = 10.0) -> None:
        mem = self._memories.get(memory_id)
        if mem is not None:
            mem.importance = clamp(mem.importance + amount)

    # ── stats ──────────────────────────────────────────────────────────

    def get_stats(self) -> MemoryStats:
        memories = list(self._memories.values())
        counts: dict[str, int] = {}
        for mem in memories:
            counts[mem.type.value] = counts.get(mem.type.value, 0) + 1
        average = sum(m.importance for m in memories) / len(memories) if memories else 0.0
        return MemoryStats(
            total=len(memories),
            short_term_count=len(self._short_term),
            long_term_count=len(self._long_term),
            average_importance=round(average),
            counts_by_type=counts,
        )

    # ── snapshot ───────────────────────────────────────────────────────

    def export(self) -> list[Memory]:
        """Short-term then long-term, each newest first. Every record carries its tier."""
        return self._short_term + self._long_term

    def load(self, memories: Iterable[Memory | dict]) -> None:
        """Reemplaza el contenido con un snapshot y re-consolida.

        Tiered records return to their own list, so an export loaded into a
        store of the same capacities keeps every memory.
        """
        records = [m if isinstance(m, Memory) else Memory.from_dict(m)
                   for m in memories]
        self._memories = {m.id: m for m in records}
        self._short_term, self._long_term = split_for_import(records)
        self._consolidate()
        logger.debug("loaded %d memories (%d kept)", len(records), len(self._memories))

    # ── consolidation ──────────────────────────────────────────────────

    def _consolidate(self) -> None:
        self._short_term, self._long_term, deleted = consolidate(
            self._short_term, self._long_term,
            self.short_term_capacity, self.long_term_capacity,
        )
        for memory_id in deleted:
            self._memories.pop(memory_id, None)
        if deleted:
            logger.debug("consolidation forgot %d memories", len(deleted))

    # ── utilidades ─────────────────────────────────────────────────────

    @property
    def short_term(self) -> list[Memory]:
        return list(self._short_term)

    @property
    def long_term(self) -> list[Memory]:
        return list(self._long_term)

    def __len__(self) -> int:
        return len(self._memories)

    def __repr__(self) -> str:
        return (f"MemoryStore(memories={len(self._memories)}, "
                f"short_term={len(self._short_term)}, long_term={len(self._long_term)})")
