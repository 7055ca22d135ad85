"""
Pydantic models for a Shadow Afterlife run.

One GameSession holds everything a run accumulates: the eight meters, the
week/phase position, long-term counters, ratchet flags and the reached ending.
Designed to serialize to JSON through SessionSnapshot.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class Meter(str, Enum):
    STAMINA = "stamina"
    SATIETY = "satiety"
    HYDRATION = "hydration"
    HEALTH = "health"
    COMBAT = "combat"
    SOCIAL = "social"
    SANITY = "sanity"
    MONEY = "money"


class Alignment(str, Enum):
    POSITIVE = "positive"    # Push forward, spend yourself
    RATIONAL = "rational"    # Think it through
    SLACK = "slack"          # Lie flat and let the week pass


class GamePhase(str, Enum):
    """Per-week sub-state of a run."""
    STORY = "story"          # Weekly narrative choice pending
    ACTIONS = "actions"      # Free actions, expeditions, week end
    ENDED = "ended"          # Terminal, no further transitions


class DailyAction(str, Enum):
    EXERCISE = "exercise"
    COOK = "cook"
    DRINK = "drink"
    PLAY_WITH_CAT = "playWithCat"
    READ = "read"
    REST = "rest"


class MapTier(str, Enum):
    """Expedition danger tiers, cheapest first."""
    SUBURB = "suburb"
    CITY = "city"
    MALL = "mall"


class EndingType(str, Enum):
    DEATH = "death"
    EASTER = "easter"
    EXTREME = "extreme"
    SPECIAL = "special"
    NORMAL = "normal"


def generate_id() -> str:
    return str(uuid4())[:8]


# -----------------------------------------------------------------------------
# Meters and counters
# -----------------------------------------------------------------------------

class ResourceState(BaseModel):
    """The eight meters. Bounds are enforced by ResourceLedger, not here."""
    stamina: int = 100
    satiety: int = 100
    hydration: int = 100
    health: int = 100
    combat: int = 15
    social: int = 30
    sanity: int = 100
    money: int = 500

    def get(self, meter: Meter) -> int:
        return getattr(self, meter.value)

    def set(self, meter: Meter, value: int) -> None:
        setattr(self, meter.value, value)


class StatCounters(BaseModel):
    """Run-wide tallies. Every field only ever grows."""
    positive_choice_count: int = 0
    rational_choice_count: int = 0
    slack_choice_count: int = 0

    total_daily_events: int = 0
    total_explore_events: int = 0
    total_npc_events: int = 0
    total_items_bought: int = 0
    total_items_sold: int = 0

    weeks_high_sanity: int = 0
    weeks_healthy: int = 0
    weeks_hunger_or_thirst: int = 0
    stamina_zero_weeks: int = 0

    never_give_up_clicks: int = 0
    debt_work_count: int = 0
    cat_play_count: int = 0

    def choice_count(self, alignment: Alignment) -> int:
        return getattr(self, f"{alignment.value}_choice_count")


class VisitFlags(BaseModel):
    """Set the first time an expedition of a tier completes. Never reset."""
    suburb: bool = False
    city: bool = False
    mall: bool = False

    def visited(self, tier: MapTier) -> bool:
        return getattr(self, tier.value)

    def mark(self, tier: MapTier) -> None:
        setattr(self, tier.value, True)

    @property
    def any(self) -> bool:
        return self.suburb or self.city or self.mall


class UnlockState(BaseModel):
    """Which expedition tiers are open. Only ever gains unlocks."""
    suburb: bool = False
    city: bool = False
    mall: bool = False

    def is_open(self, tier: MapTier) -> bool:
        return getattr(self, tier.value)

    def open_tiers(self) -> list[MapTier]:
        return [tier for tier in MapTier if self.is_open(tier)]


# -----------------------------------------------------------------------------
# Content records (opaque narrative data)
# -----------------------------------------------------------------------------

class Ending(BaseModel):
    """Catalog entry. Exactly one is attached to a finished run."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: EndingType
    condition_text: str = ""
    body: str = ""


class FlavorRecord(BaseModel):
    """A drawable narrative unit. Has no numeric effect of its own."""
    id: str
    category: str  # e.g. "daily.exercise", "explore.city", "npc"
    title: str
    description: str = ""
    help_outcome: str | None = None     # NPC encounters only
    refuse_outcome: str | None = None   # NPC encounters only


class WeeklyOption(BaseModel):
    id: str  # "A" | "B" | "C"
    label: str
    description: str = ""
    alignment: Alignment


class WeeklyStory(BaseModel):
    week: int
    title: str
    body: str = ""
    options: list[WeeklyOption] = Field(default_factory=list)

    def option(self, option_id: str) -> WeeklyOption | None:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None


class Achievement(BaseModel):
    id: str
    name: str
    how_to_get: str = ""
    flavor: str = ""


class WeekSummary(BaseModel):
    """Settlement view of one week: meters at start and end, what was done."""
    week: int
    start_stats: ResourceState
    end_stats: ResourceState
    action_counts: dict[str, int] = Field(default_factory=dict)

    @property
    def deltas(self) -> dict[str, int]:
        return {
            meter.value: self.end_stats.get(meter) - self.start_stats.get(meter)
            for meter in Meter
        }

    @property
    def idle(self) -> bool:
        """Nothing worth recording happened this week."""
        return not any(count > 0 for count in self.action_counts.values())


# -----------------------------------------------------------------------------
# Session aggregate
# -----------------------------------------------------------------------------

def _empty_align_counts() -> dict[Alignment, int]:
    return {alignment: 0 for alignment in Alignment}


class GameSession(BaseModel):
    """
    Complete mutable state of one run.

    Passed explicitly to the engine's command handlers; there is no ambient
    session. Mutated only through PhaseController commands.
    """
    id: str = Field(default_factory=generate_id)
    week: int = 1
    phase: GamePhase = GamePhase.STORY

    stats: ResourceState = Field(default_factory=ResourceState)
    counters: StatCounters = Field(default_factory=StatCounters)
    align_counts: dict[Alignment, int] = Field(default_factory=_empty_align_counts)
    visited: VisitFlags = Field(default_factory=VisitFlags)
    unlocked: UnlockState = Field(default_factory=UnlockState)
    never_rest: bool = True

    # Per-week working state
    current_story: WeeklyStory | None = None
    selected_option: WeeklyOption | None = None
    rest_clicks_this_week: int = 0
    week_closed: bool = False  # end_week() ran; only NPC/advance remain
    week_start_stats: ResourceState = Field(default_factory=ResourceState)
    week_action_counts: dict[str, int] = Field(default_factory=dict)
    pending_npc: FlavorRecord | None = None
    settlement: WeekSummary | None = None

    ending: Ending | None = None
    unlocked_achievements: list[str] = Field(default_factory=list)
    journal: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.ENDED

    @property
    def awaiting_npc(self) -> bool:
        return self.pending_npc is not None

    @property
    def ready_to_advance(self) -> bool:
        """Week closed and every pre-settlement step resolved."""
        return (
            self.phase == GamePhase.ACTIONS
            and self.week_closed
            and self.pending_npc is None
        )

    def log(self, entry: str) -> None:
        self.journal.append(entry)
        self.updated_at = datetime.now()


class SessionSnapshot(BaseModel):
    """
    Persisted shape of a run.

    The first four fields are the minimum needed to resume. Everything after
    them defaults, so a minimal snapshot still loads; history it lacks simply
    restarts at zero.
    """
    week: int
    phase: GamePhase
    stats: ResourceState
    align_counts: dict[Alignment, int] = Field(default_factory=_empty_align_counts)

    version: str = "1.0"
    id: str = Field(default_factory=generate_id)
    counters: StatCounters = Field(default_factory=StatCounters)
    visited: VisitFlags = Field(default_factory=VisitFlags)
    unlocked: UnlockState = Field(default_factory=UnlockState)
    never_rest: bool = True
    unlocked_achievements: list[str] = Field(default_factory=list)
    ending_id: str | None = None
    saved_at: datetime = Field(default_factory=datetime.now)

    # Per-week working state; a run saved mid-week resumes where it stopped
    current_story: WeeklyStory | None = None
    selected_option: WeeklyOption | None = None
    rest_clicks_this_week: int = 0
    week_closed: bool = False
    week_start_stats: ResourceState | None = None
    week_action_counts: dict[str, int] = Field(default_factory=dict)
    pending_npc: FlavorRecord | None = None
    settlement: WeekSummary | None = None

    @classmethod
    def from_session(cls, session: GameSession) -> "SessionSnapshot":
        return cls(
            id=session.id,
            week=session.week,
            phase=session.phase,
            stats=session.stats.model_copy(),
            align_counts=dict(session.align_counts),
            counters=session.counters.model_copy(),
            visited=session.visited.model_copy(),
            unlocked=session.unlocked.model_copy(),
            never_rest=session.never_rest,
            unlocked_achievements=list(session.unlocked_achievements),
            ending_id=session.ending.id if session.ending else None,
            current_story=session.current_story,
            selected_option=session.selected_option,
            rest_clicks_this_week=session.rest_clicks_this_week,
            week_closed=session.week_closed,
            week_start_stats=session.week_start_stats.model_copy(),
            week_action_counts=dict(session.week_action_counts),
            pending_npc=session.pending_npc,
            settlement=session.settlement,
        )

    def to_session(self) -> GameSession:
        """
        Rebuild a session at the exact point it was saved. A minimal
        snapshot without working state starts its week from the saved stats.
        """
        counts = _empty_align_counts()
        counts.update(self.align_counts)
        return GameSession(
            id=self.id,
            week=self.week,
            phase=self.phase,
            stats=self.stats.model_copy(),
            counters=self.counters.model_copy(),
            align_counts=counts,
            visited=self.visited.model_copy(),
            unlocked=self.unlocked.model_copy(),
            never_rest=self.never_rest,
            unlocked_achievements=list(self.unlocked_achievements),
            current_story=self.current_story,
            selected_option=self.selected_option,
            rest_clicks_this_week=self.rest_clicks_this_week,
            week_closed=self.week_closed,
            week_start_stats=(self.week_start_stats or self.stats).model_copy(),
            week_action_counts=dict(self.week_action_counts),
            pending_npc=self.pending_npc,
            settlement=self.settlement,
        )
