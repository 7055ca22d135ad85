"""
Achievement unlocking.

Achievements are side rewards keyed off drawn flavor records and counters.
The engine reports candidates to an AchievementSink; the sink decides whether
the unlock is new.
"""

from typing import Protocol, runtime_checkable

from ..state.schema import GameSession, StatCounters

# Drawn flavor record id -> achievement id. Follow-up variants count too.
EVENT_ACHIEVEMENTS: dict[str, str] = {
    "exercise-5": "funny-shout",
    "exercise-5-follow": "funny-shout",
    "exercise-8": "self-love",
    "exercise-8-follow": "self-love",
    "drink-7": "science-survivor",
    "drink-7-follow": "science-survivor",
    "cook-9": "sweet-memory",
    "cook-9-follow": "sweet-memory",
    "rest-7": "doom-birthday",
    "rest-7-follow": "doom-birthday",
}

# NPC id -> achievement for choosing to help
NPC_HELP_ACHIEVEMENTS: dict[str, str] = {
    "npc-18-teacher": "future-hope",
}

CAT_SERVANT_PLAYS = 30


@runtime_checkable
class AchievementSink(Protocol):
    """Receives unlocks. Must be idempotent."""

    def unlock(self, achievement_id: str) -> bool:
        """Record an unlock. Returns True only the first time."""
        ...


class SessionAchievements:
    """Sink that records unlocks on the session itself."""

    def __init__(self, session: GameSession):
        self.session = session

    def unlock(self, achievement_id: str) -> bool:
        if achievement_id in self.session.unlocked_achievements:
            return False
        self.session.unlocked_achievements.append(achievement_id)
        return True


def achievements_for_record(record_id: str) -> list[str]:
    achievement = EVENT_ACHIEVEMENTS.get(record_id)
    return [achievement] if achievement else []


def achievements_for_npc(npc_id: str, helped: bool) -> list[str]:
    if not helped:
        return []
    achievement = NPC_HELP_ACHIEVEMENTS.get(npc_id)
    return [achievement] if achievement else []


def achievements_for_counters(counters: StatCounters) -> list[str]:
    earned = []
    if counters.cat_play_count >= CAT_SERVANT_PLAYS:
        earned.append("cat-servant")
    return earned
