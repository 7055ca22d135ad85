"""Tests for achievement candidates and the session sink."""

from afterlife.state.schema import GameSession, StatCounters
from afterlife.systems.achievements import (
    AchievementSink,
    SessionAchievements,
    achievements_for_counters,
    achievements_for_npc,
    achievements_for_record,
)


class TestCandidates:

    def test_record_and_follow_up_share_achievement(self):
        assert achievements_for_record("rest-7") == ["doom-birthday"]
        assert achievements_for_record("rest-7-follow") == ["doom-birthday"]
        assert achievements_for_record("rest-1") == []

    def test_npc_only_when_helped(self):
        assert achievements_for_npc("npc-18-teacher", helped=True) == ["future-hope"]
        assert achievements_for_npc("npc-18-teacher", helped=False) == []
        assert achievements_for_npc("npc-1-stranger", helped=True) == []

    def test_cat_threshold(self):
        assert achievements_for_counters(StatCounters(cat_play_count=29)) == []
        assert achievements_for_counters(StatCounters(cat_play_count=30)) == ["cat-servant"]


class TestSessionAchievements:

    def test_idempotent(self):
        session = GameSession()
        sink = SessionAchievements(session)

        assert isinstance(sink, AchievementSink)
        assert sink.unlock("self-love") is True
        assert sink.unlock("self-love") is False
        assert session.unlocked_achievements == ["self-love"]
