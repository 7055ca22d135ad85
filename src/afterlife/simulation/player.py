"""Scripted player that drives a run according to a persona."""

import random

from ..state.schema import Alignment, FlavorRecord, MapTier, WeeklyOption, WeeklyStory
from .personas import get_persona

# Item used when a meter drops below the threshold
FOOD_ITEMS = ["sealed-can", "compressed-biscuit", "military-ration"]
WATER_ITEMS = ["bottled-water"]
LOW_METER = 50


class ScriptedPlayer:
    """
    Deterministic stand-in for a human player.

    Decisions follow the persona table. Personas that act "on a whim" use
    their own random stream, so the engine's draws stay reproducible.
    """

    def __init__(self, persona_name: str = "thinker", seed: int | str | None = None):
        self.persona_name = persona_name
        self.persona = get_persona(persona_name)
        self._rng = random.Random(None if seed is None else f"{seed}:player")

        self.decisions = 0
        self.doors_answered = 0
        self.doors_refused = 0

    def choose_option(self, story: WeeklyStory) -> WeeklyOption:
        """Pick the story option matching the persona's alignment."""
        self.decisions += 1
        preference = self.persona["alignment"]
        if preference == "random":
            return self._rng.choice(story.options)

        wanted = Alignment(preference)
        for option in story.options:
            if option.alignment == wanted:
                return option
        return story.options[0]

    def plan_week(self, state: dict) -> list[tuple[str, str | None]]:
        """
        Commands for one actions phase, in order.

        Args:
            state: PhaseController.snapshot() at the start of the phase
        """
        plan: list[tuple[str, str | None]] = []
        stats = state["stats"]
        inventory = state.get("inventory", {})

        if stats["satiety"] < LOW_METER:
            item = next((i for i in FOOD_ITEMS if inventory.get(i)), None)
            if item:
                plan.append(("use_item", item))
        if stats["hydration"] < LOW_METER:
            if inventory.get("bottled-water"):
                plan.append(("use_item", "bottled-water"))
            elif stats["money"] >= 160:
                plan.append(("buy", "bottled-water"))
                plan.append(("use_item", "bottled-water"))

        for tier in self._expeditions(state["unlocked_maps"]):
            plan.append(("explore", tier.value))

        for action in self.persona["daily"]:
            plan.append(("daily_action", action))

        for _ in range(self.persona["rest_clicks"]):
            plan.append(("daily_action", "rest"))

        return plan

    def _expeditions(self, unlocked: dict) -> list[MapTier]:
        open_tiers = [tier for tier in MapTier if unlocked.get(tier.value)]
        mode = self.persona["explore"]
        if not open_tiers or mode == "never":
            return []
        if mode == "deepest":
            return [open_tiers[-1]]
        if mode == "safest":
            return [open_tiers[0]]
        return open_tiers

    def answer_door(self, npc: FlavorRecord) -> bool:
        """Decide whether to help the NPC at the door."""
        stance = self.persona["helps"]
        if stance == "coin":
            helped = self._rng.random() < 0.5
        else:
            helped = stance == "always"

        if helped:
            self.doors_answered += 1
        else:
            self.doors_refused += 1
        return helped

    def get_stats(self) -> dict:
        return {
            "total_decisions": self.decisions,
            "doors_answered": self.doors_answered,
            "doors_refused": self.doors_refused,
        }
