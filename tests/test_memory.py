"""Tests for MemoryStore: storage, relevance, consolidation."""

import pytest

from soulforge import Memory, MemoryStore, MemoryType
from soulforge.consolidate import consolidate
from soulforge.decay import DAY, recency_bonus


@pytest.fixture
def store(clock):
    return MemoryStore(clock=clock)


# ── Store ──────────────────────────────────────────────────────────────


class TestStore:
    def test_basic(self, store, clock):
        mem = store.store("User likes math", "semantic", 70, 20, ["math"])
        assert isinstance(mem, Memory)
        assert mem.type == MemoryType.SEMANTIC
        assert mem.created_at == clock.now
        assert len(store) == 1
        assert store.short_term[0] is mem

    def test_clamps_on_write(self, store):
        mem = store.store("Too much", importance=150, emotional_weight=-300)
        assert mem.importance == 100
        assert mem.emotional_weight == -100

    def test_unknown_type_fails_fast(self, store):
        with pytest.raises(ValueError):
            store.store("x", type="dream")

    def test_newest_first(self, store):
        a = store.store("first")
        b = store.store("second")
        assert store.short_term == [b, a]


# ── Recall ─────────────────────────────────────────────────────────────


class TestRecall:
    def test_content_hit_ranks_first(self, store):
        store.store("a dog ran in the park")
        cat = store.store("the cat sat on the mat")
        results = store.recall("cat")
        assert results[0] is cat
        assert len(results) == 2

    def test_relevance_formula(self, store, clock):
        mem = store.store("Music theory lesson", importance=40,
                          tags=["music", "musical", "art"])
        # 100 content + 2 x 50 tags + 0.5 x 40 + 20 recency
        assert store.relevance(mem, "MUSIC") == pytest.approx(240)

    def test_tag_hit_beats_importance(self, store):
        tagged = store.store("something", importance=10, tags=["python"])
        store.store("unrelated", importance=90)
        assert store.recall("python")[0] is tagged

    def test_min_importance_filters(self, store):
        store.store("low", importance=10)
        high = store.store("high", importance=80)
        assert store.recall("", min_importance=30) == [high]

    def test_limit(self, store):
        for i in range(8):
            store.store(f"fact {i}")
        assert len(store.recall("fact", limit=3)) == 3

    def test_zero_score_excluded(self, store, clock):
        store.store("forgettable", importance=0)
        clock.advance(30 * DAY)
        kept = store.store("recent trivia", importance=0)
        # old one: no match, no importance, no recency -> excluded
        assert store.recall("zzz") == [kept]

    def test_recency_bonus(self, clock):
        mem = Memory(content="x", created_at=clock.now)
        assert recency_bonus(mem, clock.now) == 20
        assert recency_bonus(mem, clock.now + 5 * DAY) == pytest.approx(15)
        assert recency_bonus(mem, clock.now + 40 * DAY) == 0

    def test_recent_and_by_type(self, store, clock):
        a = store.store("one", "semantic")
        clock.advance(10)
        b = store.store("two", "episodic")
        clock.advance(10)
        c = store.store("three", "semantic")
        assert store.recent(2) == [c, b]
        assert store.by_type("semantic") == [c, a]


# ── Associate / strengthen ─────────────────────────────────────────────


class TestAssociate:
    def test_symmetric_and_idempotent(self, store):
        a = store.store("a")
        b = store.store("b")
        store.associate(a.id, b.id)
        store.associate(b.id, a.id)
        assert a.associations == [b.id]
        assert b.associations == [a.id]
        assert store.associated(a.id) == [b]

    def test_unknown_id_is_noop(self, store):
        a = store.store("a")
        store.associate(a.id, "missing")
        assert a.associations == []
        assert store.associated("missing") == []

    def test_strengthen_clamps(self, store):
        mem = store.store("a", importance=95)
        store.strengthen(mem.id)
        assert mem.importance == 100
        store.strengthen("missing")  # no error


# ── Consolidation ──────────────────────────────────────────────────────


class TestConsolidation:
    def test_overflow_deletes_unimportant(self, store):
        oldest = store.store("oldest", importance=40)
        for i in range(50):
            store.store(f"fact {i}", importance=50)
        stats = store.get_stats()
        assert stats.short_term_count == 50
        assert stats.long_term_count == 0
        assert store.get(oldest.id) is None
        assert len(store) == 50

    def test_overflow_promotes_important(self, store):
        oldest = store.store("oldest", importance=70)
        for i in range(50):
            store.store(f"fact {i}", importance=50)
        assert store.long_term == [oldest]
        assert store.get(oldest.id) is oldest
        assert len(store) == 51

    def test_promotion_threshold_inclusive(self):
        short = [Memory(content=str(i), importance=60) for i in range(3)]
        s, l, deleted = consolidate(short, [], short_capacity=2)
        assert len(s) == 2
        assert l == [short[2]]
        assert deleted == []

    def test_long_term_evicts_oldest(self, clock):
        store = MemoryStore(short_term_capacity=2, long_term_capacity=2, clock=clock)
        mems = [store.store(f"m{i}", importance=80) for i in range(5)]
        assert [m.content for m in store.short_term] == ["m4", "m3"]
        assert [m.content for m in store.long_term] == ["m2", "m1"]
        assert store.get(mems[0].id) is None
        assert len(store) == 4


# ── Stats & snapshot ───────────────────────────────────────────────────


class TestSnapshot:
    def test_stats(self, store):
        store.store("a", "semantic", importance=20)
        store.store("b", "episodic", importance=40)
        store.store("c", "episodic", importance=90)
        stats = store.get_stats()
        assert stats.total == 3
        assert stats.average_importance == 50
        assert stats.counts_by_type == {"semantic": 1, "episodic": 2}

    def test_empty_stats(self, store):
        assert store.get_stats().average_importance == 0

    def test_round_trip(self, store, clock):
        for i in range(5):
            store.store(f"fact {i}", importance=30 + i * 10, tags=["t"])
        other = MemoryStore(clock=clock)
        other.load([m.to_dict() for m in store.export()])
        assert len(other) == len(store)
        assert [m.id for m in other.short_term] == [m.id for m in store.short_term]
        assert other.long_term == []

    def test_round_trip_with_full_long_term(self, clock):
        store = MemoryStore(short_term_capacity=2, long_term_capacity=2, clock=clock)
        for i in range(4):
            store.store(f"m{i}", importance=80)
        assert len(store.long_term) == 2
        other = MemoryStore(short_term_capacity=2, long_term_capacity=2, clock=clock)
        other.load([m.to_dict() for m in store.export()])
        assert len(other) == len(store) == 4
        assert [m.content for m in other.short_term] == ["m3", "m2"]
        assert [m.content for m in other.long_term] == ["m1", "m0"]

    def test_export_records_tier(self, clock):
        store = MemoryStore(short_term_capacity=1, clock=clock)
        old = store.store("old", importance=90)
        new = store.store("new")
        tiers = {d["id"]: d["tier"] for d in (m.to_dict() for m in store.export())}
        assert tiers == {new.id: "short_term", old.id: "long_term"}

    def test_untiered_snapshot_split_by_importance(self, store, clock):
        records = [{"id": f"m{i}", "content": f"fact {i}", "importance": 30 + i * 10,
                    "created_at": clock.now + i} for i in range(5)]
        store.load(records)
        assert len(store) == 5
        assert [m.id for m in store.long_term] == ["m4", "m3"]  # importance 70 and 60
        assert [m.id for m in store.short_term] == ["m2", "m1", "m0"]

    def test_unknown_tier(self):
        with pytest.raises(ValueError):
            Memory(content="x", tier="archive")

    def test_load_reconsolidates(self, clock):
        records = [Memory(content=f"m{i}", importance=10, created_at=clock.now + i)
                   for i in range(60)]
        store = MemoryStore(clock=clock)
        store.load(records)
        assert len(store) == 50
        # the ten oldest were forgotten
        assert store.get(records[0].id) is None
        assert store.get(records[59].id) is not None

    def test_load_replaces(self, store):
        store.store("old")
        store.load([])
        assert len(store) == 0
