"""Tests for Registry: many souls, chat sessions, analytics."""

import pytest

from soulforge import Identity, NotFound, Registry, SoulConfig
from soulforge.registry import GREETINGS


@pytest.fixture
def registry(clock, rng):
    return Registry(rng=rng, clock=clock)


class TestBeings:
    def test_create_and_get(self, registry):
        being = registry.create("companion", "Mia")
        assert registry.get(being.id) is being
        assert being.soul.identity.name == "Mia"
        assert being.description == "A companion named Mia"

    def test_custom(self, registry):
        config = SoulConfig(identity=Identity(name="Rex", role="Guard"), empathy_level=20)
        being = registry.create("custom", "Rex", config=config)
        assert being.soul.identity.role == "Guard"
        assert being.soul.empathy_level == 20

    def test_unknown_kind(self, registry):
        with pytest.raises(ValueError):
            registry.create("dragon", "Smaug")

    def test_unknown_soul(self, registry):
        with pytest.raises(NotFound):
            registry.get("missing")
        with pytest.raises(NotFound):
            registry.reflect("missing")

    def test_remove(self, registry):
        being = registry.create("teacher", "Ada")
        registry.remove(being.id)
        assert registry.beings() == []
        with pytest.raises(NotFound):
            registry.remove(being.id)


class TestSessions:
    def test_start_greets(self, registry):
        being = registry.create("teacher", "Ada")
        session = registry.start_session(being.id, "u1", "Ana")
        assert len(session.messages) == 1
        assert session.messages[0].sender == "being"
        assert session.messages[0].mood is not None
        greeting = GREETINGS["teacher"]
        assert being.soul.memory.recall(greeting)[0].content == f'Ana said: "{greeting}"'

    def test_send(self, registry):
        being = registry.create("companion", "Mia")
        session = registry.start_session(being.id, "u1")
        reply = registry.send(session.id, "I feel sad today")
        assert "Detected emotional distress - responding with empathy" in reply.insights
        assert reply.memory_count == len(being.soul.memory)
        assert being.total_interactions == 1
        assert [m.sender for m in session.messages] == ["being", "user", "being"]

    def test_unknown_session(self, registry):
        with pytest.raises(NotFound):
            registry.send("missing", "hi")
        with pytest.raises(NotFound):
            registry.session_summary("missing")

    def test_summary_and_end(self, registry, clock):
        being = registry.create("companion", "Mia")
        session = registry.start_session(being.id, "u1")
        registry.send(session.id, "Can you explain this code to me?")
        clock.advance(90)
        registry.end_session(session.id, satisfaction=4)
        summary = registry.session_summary(session.id)
        assert summary["duration"] == 90
        assert summary["message_count"] == 3
        assert summary["being_name"] == "Mia"
        assert "technology" in summary["topics"]
        assert "learning" in summary["topics"]
        assert len(summary["emotional_journey"]) == 2
        assert being.average_rating == 4

    def test_ended_session_kept_until_discarded(self, registry):
        being = registry.create("companion", "Mia")
        session = registry.start_session(being.id, "u1")
        registry.end_session(session.id)
        assert registry.session_summary(session.id)["message_count"] == 1
        assert registry.analytics()["total_sessions"] == 1
        assert registry.discard_session(session.id) is session
        assert registry.analytics()["total_sessions"] == 0
        with pytest.raises(NotFound):
            registry.session(session.id)

    def test_remove_drops_sessions(self, registry):
        mia = registry.create("companion", "Mia")
        ada = registry.create("teacher", "Ada")
        gone = registry.start_session(mia.id, "u1")
        kept = registry.start_session(ada.id, "u1")
        registry.remove(mia.id)
        with pytest.raises(NotFound):
            registry.session(gone.id)
        assert registry.session(kept.id) is kept


class TestAnalytics:
    def test_empty(self, registry):
        stats = registry.analytics()
        assert stats["total_beings"] == 0
        assert stats["average_interactions"] == 0.0

    def test_counts(self, registry):
        a = registry.create("companion", "Mia")
        registry.create("npc", "Bram")
        session = registry.start_session(a.id, "u1")
        registry.send(session.id, "hello")
        registry.send(session.id, "hello again")
        stats = registry.analytics()
        assert stats["total_beings"] == 2
        assert stats["total_sessions"] == 1
        assert stats["kinds"] == {"companion": 1, "npc": 1}
        assert sum(stats["mood_distribution"].values()) == 2
        assert stats["average_interactions"] == 1.0
        assert stats["popular"][0]["name"] == "Mia"
