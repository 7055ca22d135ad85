"""
Phase controller for a Shadow Afterlife run.

Owns the per-week state machine and sequences the week:
    STORY --select_option--> ACTIONS --end_week--> [NPC knock] --> settlement
    settlement --advance_week--> STORY (next week) | ENDED (final week)

Design principles:
- Controller sequences and delegates: meters go through ResourceLedger,
  draws through RandomEventResolver, tallies through StatAccumulator.
- A command issued in the wrong phase changes nothing. It returns a
  rejected ActionOutcome; it never raises.
- A stamina-gated action that cannot pay its cost is aborted whole.
- Week advance derives decay, stamina reset, unlocks and the week increment
  from one pre-transition snapshot and commits them together.
- Every accepted command emits an event via the EventBus.

Usage:
    controller = PhaseController(content=YamlContentProvider())

    controller.select_option("B")
    controller.daily_action("drink")
    result = controller.end_week()
    if result.npc:
        controller.resolve_npc(help=True)
    controller.advance_week()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from pydantic import BaseModel, Field

from ..config import EngineConfig, merge_config
from ..content.provider import (
    NPC_CATEGORY,
    ContentProvider,
    YamlContentProvider,
    daily_category,
    explore_category,
    generic_story,
)
from ..state.event_bus import EventBus, EventType, get_event_bus
from ..state.schema import (
    Alignment,
    DailyAction,
    Ending,
    FlavorRecord,
    GamePhase,
    GameSession,
    MapTier,
    Meter,
    SessionSnapshot,
    WeekSummary,
    WeeklyOption,
)
from ..state.store import SnapshotStore
from .achievements import (
    AchievementSink,
    SessionAchievements,
    achievements_for_counters,
    achievements_for_npc,
    achievements_for_record,
)
from .endings import EndingCatalog, EndingClassifier
from .events import RandomEventResolver
from .ledger import SANITY_STORY_CEILING, ResourceLedger
from .stats import StatAccumulator
from .trade import BONUS_ITEM_ID, Inventory, InventoryGateway
from .unlocks import UnlockGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipe:
    """Guarded stamina cost plus unconditional meter changes."""
    stamina_cost: int = 0
    effects: dict[Meter, int] = field(default_factory=dict)


DAILY_RECIPES: dict[DailyAction, Recipe] = {
    DailyAction.EXERCISE: Recipe(10, {Meter.COMBAT: 2, Meter.HEALTH: 1}),
    DailyAction.COOK: Recipe(5, {Meter.SATIETY: 12, Meter.SANITY: 2}),
    DailyAction.DRINK: Recipe(0, {Meter.HYDRATION: 15, Meter.SANITY: 2}),
    DailyAction.PLAY_WITH_CAT: Recipe(0, {Meter.SANITY: 6}),
    DailyAction.READ: Recipe(0, {Meter.SANITY: 5, Meter.SOCIAL: 1}),
}

EXPLORE_RECIPES: dict[MapTier, Recipe] = {
    MapTier.SUBURB: Recipe(8, {Meter.SATIETY: -2, Meter.HYDRATION: -2}),
    MapTier.CITY: Recipe(15, {Meter.SATIETY: -5, Meter.HYDRATION: -5}),
    MapTier.MALL: Recipe(20, {Meter.SATIETY: -8, Meter.HYDRATION: -8}),
}

NPC_HELP_EFFECTS = {Meter.SOCIAL: 5, Meter.SANITY: 3, Meter.SATIETY: -5, Meter.HYDRATION: -5}
NPC_REFUSE_EFFECTS = {Meter.SANITY: -5}

DEBT_WORK = Recipe(20, {Meter.HEALTH: -10, Meter.MONEY: 120})

POSITIVE_STAMINA_COST = 5
POSITIVE_COMBAT_GAIN = 3
STORY_SANITY_GAIN = {Alignment.RATIONAL: 3, Alignment.SLACK: 5}

REST_RECOVERY = 15
REST_SANITY_GAIN = 5
REST_PENALTY = 5
NEVER_GIVE_UP = "Never give up!"

FALLBACK_TEXT = "Nothing remarkable happens, but you make it through."

ALIGNMENT_LABELS = {
    Alignment.POSITIVE: "Positive choice",
    Alignment.RATIONAL: "Rational choice",
    Alignment.SLACK: "Slack choice",
}

ACTION_LABELS = {
    DailyAction.EXERCISE: "Exercise",
    DailyAction.COOK: "Cook",
    DailyAction.DRINK: "Drink",
    DailyAction.PLAY_WITH_CAT: "Play with the cat",
    DailyAction.READ: "Read",
    DailyAction.REST: "Rest",
}

TIER_LABELS = {
    MapTier.SUBURB: "Suburb expedition",
    MapTier.CITY: "City expedition",
    MapTier.MALL: "Mall expedition",
}


class ActionOutcome(BaseModel):
    """
    Result of one engine command.

    A rejected outcome (accepted=False) guarantees the session was not
    touched. `reason` names why: illegal_phase, insufficient_stamina,
    insufficient_funds, locked, unknown_option, unknown_action,
    unknown_tier, unknown_item, not_owned, no_effect.
    """
    command: str
    accepted: bool = True
    reason: str | None = None

    title: str = ""
    text: str = ""
    record_id: str | None = None  # Drawn flavor record, if any
    bonus_item: str | None = None

    npc: FlavorRecord | None = None  # Set when end_week() knocked
    settlement: WeekSummary | None = None
    ending: Ending | None = None
    achievements: list[str] = Field(default_factory=list)
    unlocked_maps: list[MapTier] = Field(default_factory=list)

    @property
    def ended(self) -> bool:
        return self.ending is not None


class PhaseController:
    """
    Sequences a run. One controller drives one session at a time.

    Responsibilities:
    - Phase state machine enforcement (illegal commands are no-ops)
    - Applying action recipes through the ledger
    - Drawing flavor records, rolling the NPC gate and bonus items
    - Weekly checkpoint, settlement and atomic week advance
    - Terminal triggers: final-week classification and the rest ratchet
    """

    def __init__(
        self,
        session: GameSession | None = None,
        content: ContentProvider | None = None,
        resolver: RandomEventResolver | None = None,
        classifier: EndingClassifier | None = None,
        inventory: InventoryGateway | None = None,
        achievements: AchievementSink | None = None,
        unlock_gate: UnlockGate | None = None,
        config: EngineConfig | dict | None = None,
        bus: EventBus | None = None,
    ):
        self.config = merge_config(config)
        self.content = content or YamlContentProvider()
        self.resolver = resolver or RandomEventResolver(seed=self.config["seed"])
        self.classifier = classifier or EndingClassifier(
            EndingCatalog(self.content.endings())
        )
        self.unlock_gate = unlock_gate or UnlockGate()
        self._bus = bus or get_event_bus()
        self._achievement_sink = achievements

        # Inventories we build ourselves are rebuilt on restart
        self._inventory_factory: Callable[[], InventoryGateway] | None = None
        if inventory is None:
            self._inventory_factory = Inventory
            inventory = Inventory()
        self.inventory = inventory

        if session is None:
            self.session = GameSession()
            self._start_week()
        else:
            self.session = session
            if session.phase == GamePhase.STORY and session.current_story is None:
                session.current_story = self._story_for(session.week)

    # ─── Components bound to the current session ─────────────────

    @property
    def ledger(self) -> ResourceLedger:
        return ResourceLedger(self.session.stats, max_stamina=self.config["max_stamina"])

    @property
    def stats(self) -> StatAccumulator:
        return StatAccumulator(
            self.session.counters,
            self.session.align_counts,
            hunger_threshold=self.config["hunger_threshold"],
        )

    @property
    def achievement_sink(self) -> AchievementSink:
        return self._achievement_sink or SessionAchievements(self.session)

    @property
    def phase(self) -> GamePhase:
        return self.session.phase

    @property
    def week(self) -> int:
        return self.session.week

    # ─── Internals ───────────────────────────────────────────────

    def _emit(self, event_type: EventType, **data) -> None:
        self._bus.emit(
            event_type,
            session_id=self.session.id,
            week=self.session.week,
            **data,
        )

    def _reject(self, command: str, reason: str) -> ActionOutcome:
        logger.debug(
            "Rejected %s in %s phase (week %d): %s",
            command, self.session.phase.value, self.session.week, reason,
        )
        self._emit(EventType.ACTION_REJECTED, command=command, reason=reason)
        return ActionOutcome(command=command, accepted=False, reason=reason)

    def _week_open(self) -> bool:
        """Free actions are legal: ACTIONS phase and end_week() not yet run."""
        return self.session.phase == GamePhase.ACTIONS and not self.session.week_closed

    def _story_for(self, week: int):
        return self.content.story_for_week(week) or generic_story(week)

    def _start_week(self) -> None:
        session = self.session
        session.current_story = self._story_for(session.week)
        session.selected_option = None
        session.rest_clicks_this_week = 0
        session.week_closed = False
        session.week_start_stats = session.stats.model_copy()
        session.week_action_counts = {}
        session.pending_npc = None
        session.settlement = None
        logger.info("Week %d begins", session.week)
        self._emit(EventType.WEEK_STARTED, title=session.current_story.title)

    def _count_action(self, key: str) -> None:
        counts = self.session.week_action_counts
        counts[key] = counts.get(key, 0) + 1

    def _draw(self, category: str) -> FlavorRecord | None:
        return self.resolver.draw_or(self.content.pool(category), None)

    def _unlock(self, achievement_ids: list[str]) -> list[str]:
        """Report candidates to the sink; return only the new unlocks."""
        unlocked = []
        for achievement_id in achievement_ids:
            if self.achievement_sink.unlock(achievement_id):
                unlocked.append(achievement_id)
                self._emit(EventType.ACHIEVEMENT_UNLOCKED, achievement=achievement_id)
        return unlocked

    def _flavor_outcome(
        self,
        command: str,
        record: FlavorRecord | None,
        fallback_title: str,
    ) -> ActionOutcome:
        if record is None:
            return ActionOutcome(command=command, title=fallback_title, text=FALLBACK_TEXT)
        return ActionOutcome(
            command=command,
            title=record.title,
            text=record.description,
            record_id=record.id,
            achievements=self._unlock(achievements_for_record(record.id)),
        )

    def _settle(self) -> WeekSummary:
        session = self.session
        summary = WeekSummary(
            week=session.week,
            start_stats=session.week_start_stats.model_copy(),
            end_stats=session.stats.model_copy(),
            action_counts=dict(session.week_action_counts),
        )
        session.settlement = summary
        self._emit(EventType.WEEK_SETTLED, deltas=summary.deltas)
        return summary

    def _finish(self, ending: Ending, reason: str) -> None:
        session = self.session
        session.ending = ending
        session.phase = GamePhase.ENDED
        session.pending_npc = None
        session.log(f"Ending reached: {ending.name}")
        logger.info("Run %s ended in week %d: %s (%s)", session.id, session.week, ending.id, reason)
        self._emit(
            EventType.RUN_ENDED,
            ending=ending.id,
            tier=ending.type.value,
            reason=reason,
        )

    # ─── Story phase ─────────────────────────────────────────────

    def select_option(self, option: WeeklyOption | str) -> ActionOutcome:
        """
        Make the weekly narrative choice and open the actions phase.

        Args:
            option: A WeeklyOption, or the id of one of the current story's
                options ("A", "B", "C")
        """
        command = "select_option"
        session = self.session
        if session.phase != GamePhase.STORY:
            return self._reject(command, "illegal_phase")

        if isinstance(option, str):
            story = session.current_story
            resolved = story.option(option) if story else None
            if resolved is None:
                return self._reject(command, "unknown_option")
            option = resolved

        ledger = self.ledger
        if option.alignment == Alignment.POSITIVE:
            # Skipped, not aborted, when stamina is short
            ledger.consume(Meter.STAMINA, POSITIVE_STAMINA_COST)
            ledger.adjust(Meter.COMBAT, POSITIVE_COMBAT_GAIN)
        else:
            ledger.adjust(
                Meter.SANITY,
                STORY_SANITY_GAIN[option.alignment],
                ceiling=SANITY_STORY_CEILING,
            )

        self.stats.record_choice(option.alignment)
        session.selected_option = option
        session.phase = GamePhase.ACTIONS
        session.log(
            f"Week {session.week}: {ALIGNMENT_LABELS[option.alignment]} "
            f"{option.id} - {option.label}"
        )

        logger.info("Week %d: selected %s (%s)", session.week, option.id, option.alignment.value)
        self._emit(
            EventType.OPTION_SELECTED,
            option=option.id,
            alignment=option.alignment.value,
        )
        return ActionOutcome(command=command, title=option.label, text=option.description)

    # ─── Actions phase ───────────────────────────────────────────

    def daily_action(self, kind: DailyAction | str) -> ActionOutcome:
        """Perform one daily action and draw its flavor record."""
        command = "daily_action"
        if not self._week_open():
            return self._reject(command, "illegal_phase")
        try:
            action = DailyAction(kind)
        except ValueError:
            return self._reject(command, "unknown_action")

        if action == DailyAction.REST:
            return self._rest()

        recipe = DAILY_RECIPES[action]
        ledger = self.ledger
        if not ledger.consume(Meter.STAMINA, recipe.stamina_cost):
            return self._reject(command, "insufficient_stamina")
        ledger.apply(recipe.effects)

        stats = self.stats
        stats.record_daily()
        if action == DailyAction.PLAY_WITH_CAT:
            stats.record_cat_play()
        self._count_action(action.value)

        record = self._draw(daily_category(action))
        outcome = self._flavor_outcome(command, record, ACTION_LABELS[action])
        outcome.achievements += self._unlock(achievements_for_counters(self.session.counters))
        self.session.log(f"[Daily] {ACTION_LABELS[action]}: {outcome.title}")

        logger.debug("Daily action %s -> %s", action.value, outcome.record_id)
        self._emit(EventType.DAILY_ACTION, action=action.value, record_id=outcome.record_id)
        return outcome

    def _rest(self) -> ActionOutcome:
        """
        First rest of the week recovers; every later one costs stamina and
        pushes toward the rest ratchet ending.
        """
        command = "daily_action"
        session = self.session
        ledger = self.ledger
        stats = self.stats

        if session.rest_clicks_this_week == 0:
            ledger.recover(REST_RECOVERY)
            ledger.adjust(Meter.SANITY, REST_SANITY_GAIN)
            session.never_rest = False
            session.rest_clicks_this_week = 1
            stats.record_daily()
            self._count_action(DailyAction.REST.value)

            record = self._draw(daily_category(DailyAction.REST))
            outcome = self._flavor_outcome(command, record, ACTION_LABELS[DailyAction.REST])
            session.log(f"[Daily] Rest: {outcome.title}")
        else:
            # Penalty floors at zero; it is never aborted
            ledger.adjust(Meter.STAMINA, -REST_PENALTY)
            session.rest_clicks_this_week += 1
            stats.record_never_give_up()
            stats.record_daily()
            self._count_action(DailyAction.REST.value)
            outcome = ActionOutcome(command=command, title=NEVER_GIVE_UP, text=NEVER_GIVE_UP)

            if session.rest_clicks_this_week >= self.config["rest_click_limit"]:
                ending = self.classifier.catalog.rest_easter()
                self._finish(ending, reason="rest_ratchet")
                outcome.ending = ending

        self._emit(
            EventType.DAILY_ACTION,
            action=DailyAction.REST.value,
            record_id=outcome.record_id,
            rest_clicks=session.rest_clicks_this_week,
        )
        return outcome

    def explore(self, tier: MapTier | str) -> ActionOutcome:
        """Go on an expedition to an unlocked tier."""
        command = "explore"
        session = self.session
        if not self._week_open():
            return self._reject(command, "illegal_phase")
        try:
            tier = MapTier(tier)
        except ValueError:
            return self._reject(command, "unknown_tier")
        if not session.unlocked.is_open(tier):
            return self._reject(command, "locked")

        recipe = EXPLORE_RECIPES[tier]
        ledger = self.ledger
        if not ledger.consume(Meter.STAMINA, recipe.stamina_cost):
            return self._reject(command, "insufficient_stamina")
        ledger.apply(recipe.effects)

        self.stats.record_explore()
        session.visited.mark(tier)
        self._count_action(f"explore.{tier.value}")

        record = self._draw(explore_category(tier))
        outcome = self._flavor_outcome(command, record, TIER_LABELS[tier])

        if self.resolver.chance(self.config["explore_bonus_chance"]):
            self.inventory.add_item(BONUS_ITEM_ID, 1)
            outcome.bonus_item = BONUS_ITEM_ID

        session.log(f"[Explore] {TIER_LABELS[tier]}: {outcome.title}")
        logger.debug("Explored %s -> %s (bonus=%s)", tier.value, outcome.record_id, outcome.bonus_item)
        self._emit(
            EventType.EXPLORE,
            tier=tier.value,
            record_id=outcome.record_id,
            bonus_item=outcome.bonus_item,
        )
        return outcome

    def debt_work(self) -> ActionOutcome:
        """Work a shift to pay down debt: money now, health and stamina spent."""
        command = "debt_work"
        if not self._week_open():
            return self._reject(command, "illegal_phase")

        ledger = self.ledger
        if not ledger.consume(Meter.STAMINA, DEBT_WORK.stamina_cost):
            return self._reject(command, "insufficient_stamina")
        ledger.apply(DEBT_WORK.effects)
        self.stats.record_debt_work()
        self._count_action("debt_work")

        count = self.session.counters.debt_work_count
        self.session.log(f"[Work] Debt shift #{count}")
        self._emit(EventType.DEBT_WORKED, count=count)
        return ActionOutcome(
            command=command,
            title="Debt shift",
            text=f"You worked off part of the debt. Shifts so far: {count}.",
        )

    # ─── Trade ───────────────────────────────────────────────────

    def buy(self, item_id: str) -> ActionOutcome:
        """Buy one item; money is debited with guarded consumption."""
        command = "buy"
        if not self._week_open():
            return self._reject(command, "illegal_phase")
        price = self.inventory.price_of(item_id)
        if price is None or price <= 0:
            return self._reject(command, "unknown_item")
        if not self.ledger.consume(Meter.MONEY, price):
            return self._reject(command, "insufficient_funds")

        self.inventory.add_item(item_id, 1)
        self.stats.record_purchase()
        self.session.log(f"[Trade] Bought {item_id} for {price}")
        self._emit(EventType.ITEM_BOUGHT, item=item_id, price=price)
        name = self.inventory.name_of(item_id)
        return ActionOutcome(command=command, title="Bought", text=f"Bought {name} x1")

    def sell(self, item_id: str) -> ActionOutcome:
        """Sell one item for half its price."""
        command = "sell"
        if not self._week_open():
            return self._reject(command, "illegal_phase")
        price = self.inventory.price_of(item_id)
        if price is None or price <= 0:
            return self._reject(command, "unknown_item")
        if not self.inventory.remove_item(item_id, 1):
            return self._reject(command, "not_owned")

        earned = price // 2
        self.ledger.adjust(Meter.MONEY, earned)
        self.stats.record_sale()
        self.session.log(f"[Trade] Sold {item_id} for {earned}")
        self._emit(EventType.ITEM_SOLD, item=item_id, earned=earned)
        name = self.inventory.name_of(item_id)
        return ActionOutcome(command=command, title="Sold", text=f"Sold {name} x1 for {earned}")

    def use_item(self, item_id: str) -> ActionOutcome:
        """Consume one item and apply its meter effects."""
        command = "use_item"
        if self.session.phase == GamePhase.ENDED:
            return self._reject(command, "illegal_phase")
        effects = self.inventory.effects_of(item_id)
        if not effects:
            return self._reject(command, "no_effect")
        if not self.inventory.remove_item(item_id, 1):
            return self._reject(command, "not_owned")

        self.ledger.apply(effects)
        self._emit(EventType.ITEM_USED, item=item_id)
        return ActionOutcome(
            command=command, title="Used", text=f"Used {self.inventory.name_of(item_id)}"
        )

    # ─── Week end ────────────────────────────────────────────────

    def end_week(self) -> ActionOutcome:
        """
        Close the week: run the weekly checkpoint, then maybe an NPC knocks.

        The knock chance is min(1, social / npc_gate_divisor). With a knock,
        the outcome carries `npc` and settlement waits for resolve_npc();
        otherwise it carries the settlement directly.
        """
        command = "end_week"
        session = self.session
        if not self._week_open():
            return self._reject(command, "illegal_phase")

        session.week_closed = True
        checkpoint = self.stats.checkpoint(session.stats)
        self._emit(EventType.WEEK_CLOSED, checkpoint=checkpoint.incremented)

        chance = min(1.0, session.stats.social / self.config["npc_gate_divisor"])
        pool = self.content.pool(NPC_CATEGORY)
        if pool and self.resolver.chance(chance):
            npc = self.resolver.draw(pool)
            session.pending_npc = npc
            logger.debug("NPC knock in week %d: %s", session.week, npc.id)
            self._emit(EventType.NPC_ENCOUNTER, npc=npc.id)
            return ActionOutcome(
                command=command,
                title=npc.title,
                text=npc.description,
                record_id=npc.id,
                npc=npc,
            )

        summary = self._settle()
        return ActionOutcome(
            command=command,
            title=f"Week {session.week} settlement",
            settlement=summary,
        )

    def resolve_npc(self, help: bool) -> ActionOutcome:
        """Help or refuse the NPC at the door. Both count as an NPC event."""
        command = "resolve_npc"
        session = self.session
        npc = session.pending_npc
        if session.phase != GamePhase.ACTIONS or npc is None:
            return self._reject(command, "illegal_phase")

        self.ledger.apply(NPC_HELP_EFFECTS if help else NPC_REFUSE_EFFECTS)
        self.stats.record_npc()
        session.pending_npc = None
        session.log(f"[NPC] {npc.title}: {'helped' if help else 'refused'}")

        achievements = self._unlock(achievements_for_npc(npc.id, help))
        self._emit(EventType.NPC_RESOLVED, npc=npc.id, helped=help)

        summary = self._settle()
        return ActionOutcome(
            command=command,
            title=npc.title,
            text=(npc.help_outcome if help else npc.refuse_outcome) or "",
            record_id=npc.id,
            settlement=summary,
            achievements=achievements,
        )

    def advance_week(self) -> ActionOutcome:
        """
        Leave settlement: either classify the run (final week) or move to
        the next week's story.
        """
        command = "advance_week"
        session = self.session
        if not session.ready_to_advance:
            return self._reject(command, "illegal_phase")

        if session.week >= self.config["final_week"]:
            verdict = self.classifier.explain(session)
            self._finish(verdict.ending, reason=verdict.rule_id)
            return ActionOutcome(
                command=command,
                title=verdict.ending.name,
                text=verdict.ending.body,
                ending=verdict.ending,
            )

        # Stage every derived field on a copy, then commit once
        staged_stats = session.stats.model_copy()
        staged = ResourceLedger(staged_stats, max_stamina=self.config["max_stamina"])
        decay = self.config["weekly_decay"]
        staged.adjust(Meter.SATIETY, -decay)
        staged.adjust(Meter.HYDRATION, -decay)
        staged_stats.stamina = min(self.config["week_start_stamina"], self.config["max_stamina"])

        next_week = session.week + 1
        unlocked = self.unlock_gate.evaluate(session.unlocked, next_week, staged_stats.combat)
        opened = self.unlock_gate.newly_opened(session.unlocked, unlocked)

        session.stats = staged_stats
        session.unlocked = unlocked
        session.week = next_week
        session.phase = GamePhase.STORY
        self._start_week()

        for tier in opened:
            logger.info("Map unlocked: %s", tier.value)
            self._emit(EventType.MAP_UNLOCKED, tier=tier.value)

        story = session.current_story
        return ActionOutcome(
            command=command,
            title=story.title if story else "",
            text=story.body if story else "",
            unlocked_maps=opened,
        )

    # ─── Run lifecycle ───────────────────────────────────────────

    def restart(self, achievements: AchievementSink | None = None) -> GameSession:
        """
        Discard the current run and start a fresh one at week 1.

        An injected achievement sink outlives the run, like a player profile;
        pass `achievements` to replace it. Without one, achievements live on
        the session and start empty.
        """
        old_id = self.session.id
        self.session = GameSession()
        if achievements is not None:
            self._achievement_sink = achievements
        if self._inventory_factory is not None:
            self.inventory = self._inventory_factory()
        logger.info("Run %s restarted as %s", old_id, self.session.id)
        self._emit(EventType.RUN_RESTARTED, previous=old_id)
        self._start_week()
        return self.session

    def save(self, store: SnapshotStore) -> SessionSnapshot:
        snapshot = store.save(self.session)
        self._emit(EventType.RUN_SAVED)
        return snapshot

    def load(self, store: SnapshotStore, session_id: str) -> bool:
        """
        Replace the current run with a saved one.

        The run resumes in its saved phase with its week's working state, so
        nothing already counted this week is counted again.
        """
        snapshot = store.load(session_id)
        if snapshot is None:
            return False

        session = snapshot.to_session()
        if session.phase == GamePhase.ENDED:
            if snapshot.ending_id:
                session.ending = self.classifier.catalog.find(snapshot.ending_id)
        elif session.current_story is None:
            session.current_story = self._story_for(session.week)

        self.session = session
        self._emit(EventType.RUN_LOADED)
        return True

    # ─── Queries ─────────────────────────────────────────────────

    def available_commands(self) -> list[str]:
        """Commands that would be accepted right now (for UI gating)."""
        session = self.session
        if session.phase == GamePhase.ENDED:
            return ["restart"]
        if session.phase == GamePhase.STORY:
            return ["select_option", "use_item", "restart"]
        if session.pending_npc is not None:
            return ["resolve_npc", "use_item", "restart"]
        if session.week_closed:
            return ["advance_week", "use_item", "restart"]
        return [
            "daily_action", "explore", "debt_work", "buy", "sell",
            "use_item", "end_week", "restart",
        ]

    def snapshot(self) -> dict:
        """
        State view for presentation layers.

        Contains what a UI renders, not the full session.
        """
        session = self.session
        data: dict = {
            "id": session.id,
            "week": session.week,
            "phase": session.phase.value,
            "stats": session.stats.model_dump(),
            "align_counts": {a.value: n for a, n in session.align_counts.items()},
            "counters": session.counters.model_dump(),
            "unlocked_maps": session.unlocked.model_dump(),
            "map_requirements": {
                tier.value: self.unlock_gate.requirement_text(tier)
                for tier in MapTier
                if not session.unlocked.is_open(tier)
            },
            "visited": session.visited.model_dump(),
            "never_rest": session.never_rest,
            "rest_clicks_this_week": session.rest_clicks_this_week,
            "week_closed": session.week_closed,
            "achievements": list(session.unlocked_achievements),
            "commands": self.available_commands(),
        }
        if session.current_story and session.phase == GamePhase.STORY:
            data["story"] = session.current_story.model_dump(mode="json")
        if session.pending_npc:
            data["npc"] = session.pending_npc.model_dump()
        if session.settlement:
            data["settlement"] = {
                "week": session.settlement.week,
                "deltas": session.settlement.deltas,
                "action_counts": session.settlement.action_counts,
                "idle": session.settlement.idle,
            }
        if session.ending:
            data["ending"] = session.ending.model_dump(mode="json")
        if isinstance(self.inventory, Inventory):
            data["inventory"] = self.inventory.to_dict()
        return data
