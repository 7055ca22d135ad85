"""
Long-term statistic accumulator.

Two update points:
1. Per action: each completed daily action, expedition, NPC decision, trade
   or choice bumps its counter by exactly one.
2. Per week: checkpoint() tests the meters against independent thresholds
   and bumps every long-term counter whose threshold is met.

All counters are monotonically non-decreasing.
"""

from dataclasses import dataclass

from ..state.schema import Alignment, ResourceState, StatCounters

HIGH_SANITY = 80
HEALTHY_LEVEL = 60
HUNGER_THRESHOLD = 30


@dataclass(frozen=True)
class CheckpointResult:
    """Which long-term counters one weekly checkpoint incremented."""
    high_sanity: bool
    healthy: bool
    hungry_or_thirsty: bool
    stamina_zero: bool

    @property
    def incremented(self) -> list[str]:
        names = []
        if self.high_sanity:
            names.append("weeks_high_sanity")
        if self.healthy:
            names.append("weeks_healthy")
        if self.hungry_or_thirsty:
            names.append("weeks_hunger_or_thirst")
        if self.stamina_zero:
            names.append("stamina_zero_weeks")
        return names


class StatAccumulator:
    """Tallies counters on a StatCounters instance (mutated in place)."""

    def __init__(
        self,
        counters: StatCounters,
        align_counts: dict[Alignment, int],
        hunger_threshold: int = HUNGER_THRESHOLD,
    ):
        self.counters = counters
        self.align_counts = align_counts
        self.hunger_threshold = hunger_threshold

    # ─── Per-action increments ──────────────────────────────────

    def record_choice(self, alignment: Alignment) -> None:
        """Bump both the alignment map and its dedicated counter."""
        self.align_counts[alignment] = self.align_counts.get(alignment, 0) + 1
        field_name = f"{alignment.value}_choice_count"
        setattr(self.counters, field_name, getattr(self.counters, field_name) + 1)

    def record_daily(self) -> None:
        self.counters.total_daily_events += 1

    def record_explore(self) -> None:
        self.counters.total_explore_events += 1

    def record_npc(self) -> None:
        self.counters.total_npc_events += 1

    def record_purchase(self) -> None:
        self.counters.total_items_bought += 1

    def record_sale(self) -> None:
        self.counters.total_items_sold += 1

    def record_never_give_up(self) -> None:
        self.counters.never_give_up_clicks += 1

    def record_debt_work(self) -> None:
        self.counters.debt_work_count += 1

    def record_cat_play(self) -> None:
        self.counters.cat_play_count += 1

    # ─── Weekly checkpoint ──────────────────────────────────────

    def checkpoint(self, stats: ResourceState) -> CheckpointResult:
        """
        Evaluate the four weekly thresholds. They are independent: one week
        can bump several counters.
        """
        result = CheckpointResult(
            high_sanity=stats.sanity >= HIGH_SANITY,
            healthy=stats.satiety >= HEALTHY_LEVEL and stats.hydration >= HEALTHY_LEVEL,
            hungry_or_thirsty=(
                stats.satiety < self.hunger_threshold
                or stats.hydration < self.hunger_threshold
            ),
            stamina_zero=stats.stamina <= 0,
        )

        if result.high_sanity:
            self.counters.weeks_high_sanity += 1
        if result.healthy:
            self.counters.weeks_healthy += 1
        if result.hungry_or_thirsty:
            self.counters.weeks_hunger_or_thirst += 1
        if result.stamina_zero:
            self.counters.stamina_zero_weeks += 1

        return result
