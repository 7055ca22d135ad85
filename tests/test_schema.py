"""Tests for session models."""

from afterlife.state.schema import (
    GamePhase,
    GameSession,
    MapTier,
    Meter,
    ResourceState,
    UnlockState,
    VisitFlags,
    WeekSummary,
)


class TestResourceState:

    def test_defaults(self):
        stats = ResourceState()
        assert (stats.stamina, stats.combat, stats.social, stats.money) == (100, 15, 30, 500)

    def test_get_set_by_meter(self):
        stats = ResourceState()
        stats.set(Meter.SANITY, 42)
        assert stats.get(Meter.SANITY) == 42


class TestFlags:

    def test_visit_flags(self):
        visited = VisitFlags()
        assert not visited.any
        visited.mark(MapTier.CITY)
        assert visited.visited(MapTier.CITY)
        assert visited.any

    def test_open_tiers_in_order(self):
        assert UnlockState(mall=True, suburb=True).open_tiers() == [MapTier.SUBURB, MapTier.MALL]


class TestWeekSummary:

    def test_deltas(self):
        summary = WeekSummary(
            week=4,
            start_stats=ResourceState(),
            end_stats=ResourceState(stamina=80, money=620),
            action_counts={"debt_work": 1},
        )
        assert summary.deltas["stamina"] == -20
        assert summary.deltas["money"] == 120
        assert summary.deltas["sanity"] == 0
        assert not summary.idle

    def test_idle_week(self):
        summary = WeekSummary(week=1, start_stats=ResourceState(), end_stats=ResourceState())
        assert summary.idle


class TestGameSession:

    def test_new_session(self):
        session = GameSession()
        assert session.week == 1
        assert session.phase == GamePhase.STORY
        assert session.never_rest is True
        assert len(session.id) == 8
        assert not session.ready_to_advance

    def test_log_appends(self):
        session = GameSession()
        session.log("hello")
        assert session.journal == ["hello"]
