"""Tests for the map unlock gate."""

from afterlife.state.schema import MapTier, UnlockState
from afterlife.systems.unlocks import TierRule, UnlockGate


class TestUnlockGate:

    def test_nothing_open_in_week_one(self):
        state = UnlockGate().evaluate(UnlockState(), week=1, combat=15)
        assert state.open_tiers() == []

    def test_suburb_opens_in_week_two(self):
        state = UnlockGate().evaluate(UnlockState(), week=2, combat=15)
        assert state.open_tiers() == [MapTier.SUBURB]

    def test_city_by_combat(self):
        state = UnlockGate().evaluate(UnlockState(), week=3, combat=30)
        assert state.city and not state.mall

    def test_city_by_week(self):
        state = UnlockGate().evaluate(UnlockState(), week=12, combat=0)
        assert state.city

    def test_mall_by_combat_or_week(self):
        gate = UnlockGate()
        assert gate.evaluate(UnlockState(), week=3, combat=60).mall
        assert gate.evaluate(UnlockState(), week=25, combat=0).mall
        assert not gate.evaluate(UnlockState(), week=24, combat=59).mall

    def test_unlocks_never_revert(self):
        """Combat dropping below the threshold keeps the tier open."""
        previous = UnlockState(suburb=True, city=True)
        state = UnlockGate().evaluate(previous, week=4, combat=0)
        assert state.city

    def test_newly_opened(self):
        previous = UnlockState(suburb=True)
        current = UnlockState(suburb=True, city=True)
        assert UnlockGate.newly_opened(previous, current) == [MapTier.CITY]
        assert UnlockGate.newly_opened(current, current) == []

    def test_custom_rules(self):
        rules = {
            MapTier.SUBURB: TierRule(week=1),
            MapTier.CITY: TierRule(week=2),
            MapTier.MALL: TierRule(week=3),
        }
        state = UnlockGate(rules).evaluate(UnlockState(), week=2, combat=0)
        assert state.open_tiers() == [MapTier.SUBURB, MapTier.CITY]

    def test_requirement_text(self):
        gate = UnlockGate()
        assert gate.requirement_text(MapTier.SUBURB) == "Opens in week 2"
        assert "30" in gate.requirement_text(MapTier.CITY)
