"""Memory consolidation. Important short-term memories move to long-term; the rest are forgotten."""

from __future__ import annotations

from soulforge.models import LONG_TERM, SHORT_TERM, Memory

SHORT_TERM_CAPACITY = 50
LONG_TERM_CAPACITY = 1000
PROMOTION_THRESHOLD = 60.0


def split_for_import(memories: list[Memory],
                     threshold: float = PROMOTION_THRESHOLD) -> tuple[list[Memory], list[Memory]]:
    """Partition a snapshot into (short_term, long_term).

    Memories that carry a tier go back to the list they were exported from,
    in snapshot order. Untiered ones (older snapshots) are routed by
    importance and the affected lists are re-sorted newest first.
    """
    short_term: list[Memory] = []
    long_term: list[Memory] = []
    untiered = False
    for mem in memories:
        if mem.tier is None:
            untiered = True
            mem.tier = LONG_TERM if mem.importance >= threshold else SHORT_TERM
        (long_term if mem.tier == LONG_TERM else short_term).append(mem)
    if untiered:
        short_term.sort(key=lambda m: m.created_at, reverse=True)
        long_term.sort(key=lambda m: m.created_at, reverse=True)
    return short_term, long_term


def consolidate(short_term: list[Memory], long_term: list[Memory],
                short_capacity: int = SHORT_TERM_CAPACITY,
                long_capacity: int = LONG_TERM_CAPACITY,
                threshold: float = PROMOTION_THRESHOLD,
                ) -> tuple[list[Memory], list[Memory], list[str]]:
    """One consolidation pass over the working lists (both newest first).

    - Short-term overflow is cut from the tail. Each cut memory with
      importance >= threshold is prepended to long-term, the others die.
    - Long-term overflow is cut from the tail (oldest) and dies.

    Returns:
        (short_term, long_term, deleted_ids)
    """
    deleted_ids: list[str] = []

    if len(short_term) > short_capacity:
        overflow = short_term[short_capacity:]
        short_term = short_term[:short_capacity]
        promoted = []
        for mem in overflow:
            if mem.importance >= threshold:
                mem.tier = LONG_TERM
                promoted.append(mem)
            else:
                deleted_ids.append(mem.id)
        long_term = promoted + long_term

    if len(long_term) > long_capacity:
        deleted_ids.extend(mem.id for mem in long_term[long_capacity:])
        long_term = long_term[:long_capacity]

    return short_term, long_term, deleted_ids
