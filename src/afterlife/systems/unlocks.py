"""
Map unlock gate.

Expedition tiers open by week or by combat strength. The gate is a ratchet:
each flag is OR-ed with its previous value, so a tier never closes again even
if combat later drops.
"""

from dataclasses import dataclass

from ..state.schema import MapTier, UnlockState


@dataclass(frozen=True)
class TierRule:
    """A tier opens at `week`, or earlier once combat reaches `combat`."""
    week: int
    combat: int | None = None

    def satisfied(self, week: int, combat: int) -> bool:
        if week >= self.week:
            return True
        return self.combat is not None and combat >= self.combat


DEFAULT_RULES: dict[MapTier, TierRule] = {
    MapTier.SUBURB: TierRule(week=2),
    MapTier.CITY: TierRule(week=12, combat=30),
    MapTier.MALL: TierRule(week=25, combat=60),
}


class UnlockGate:
    """Recomputes unlock flags at each week advance."""

    def __init__(self, rules: dict[MapTier, TierRule] | None = None):
        self.rules = rules or DEFAULT_RULES

    def evaluate(self, previous: UnlockState, week: int, combat: int) -> UnlockState:
        """New unlock state: previous flags OR this week's predicates."""
        return UnlockState(**{
            tier.value: previous.is_open(tier) or self.rules[tier].satisfied(week, combat)
            for tier in MapTier
        })

    @staticmethod
    def newly_opened(previous: UnlockState, current: UnlockState) -> list[MapTier]:
        return [
            tier for tier in MapTier
            if current.is_open(tier) and not previous.is_open(tier)
        ]

    def requirement_text(self, tier: MapTier) -> str:
        """Human-readable unlock condition for map displays."""
        rule = self.rules[tier]
        if rule.combat is None:
            return f"Opens in week {rule.week}"
        return f"Combat >= {rule.combat} or week {rule.week}"
