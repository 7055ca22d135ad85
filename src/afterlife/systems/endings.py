"""
Ending classifier.

Maps the accumulated state of a finished run to exactly one ending. Rules are
evaluated as a strict priority cascade:

    death -> easter -> extreme -> special -> normal

The first matching rule wins and nothing below it is evaluated. The
classifier reads the session; it never mutates it.
"""

from dataclasses import dataclass
from typing import Callable, Iterable

from ..state.schema import Ending, EndingType, GameSession

# Ending the rest ratchet selects directly, bypassing the cascade
REST_EASTER_ENDING_ID = "easter-sleep"

Predicate = Callable[[GameSession], bool]


@dataclass(frozen=True)
class EndingRule:
    """One row of the cascade."""
    ending_id: str
    tier: EndingType
    predicate: Predicate
    # Fall through to later rules when the catalog lacks this ending
    optional: bool = False


DEATH_RULES: list[EndingRule] = [
    EndingRule("death-blood", EndingType.DEATH, lambda s: s.stats.health <= 0),
    EndingRule("death-madness", EndingType.DEATH, lambda s: s.stats.sanity <= 0),
    EndingRule("death-debt", EndingType.DEATH, lambda s: s.counters.debt_work_count >= 3),
]

EXTREME_RULES: list[EndingRule] = [
    EndingRule("extreme-war-god", EndingType.EXTREME, lambda s: s.stats.combat >= 160),
    EndingRule("extreme-social-king", EndingType.EXTREME, lambda s: s.stats.social >= 160),
    EndingRule("extreme-steel-will", EndingType.EXTREME, lambda s: s.counters.weeks_high_sanity > 36),
    EndingRule("extreme-active-survivor", EndingType.EXTREME, lambda s: s.counters.positive_choice_count > 36),
    EndingRule("extreme-rational-survivor", EndingType.EXTREME, lambda s: s.counters.rational_choice_count > 36),
    EndingRule("extreme-lie-flat-master", EndingType.EXTREME, lambda s: s.counters.slack_choice_count > 36),
    EndingRule("extreme-explorer", EndingType.EXTREME, lambda s: s.counters.total_explore_events > 80),
    EndingRule("extreme-daily-master", EndingType.EXTREME, lambda s: s.counters.total_daily_events > 50),
    EndingRule("extreme-helper", EndingType.EXTREME, lambda s: s.counters.total_npc_events > 30),
    EndingRule("extreme-hoarder", EndingType.EXTREME, lambda s: s.counters.total_items_bought > 50),
    EndingRule("extreme-merchant", EndingType.EXTREME, lambda s: s.counters.total_items_sold > 80),
    EndingRule("extreme-healthy-life", EndingType.EXTREME, lambda s: s.counters.weeks_healthy > 36),
    EndingRule("extreme-pain-bearer", EndingType.EXTREME, lambda s: s.counters.weeks_hunger_or_thirst > 20),
    EndingRule("extreme-hermit", EndingType.EXTREME, lambda s: not s.visited.any),
    EndingRule("extreme-never-rest", EndingType.EXTREME, lambda s: s.never_rest),
    EndingRule("extreme-zero-stamina", EndingType.EXTREME, lambda s: s.counters.stamina_zero_weeks >= 44),
]


def _rebuilder(s: GameSession) -> bool:
    return (
        s.stats.social >= 100
        and s.counters.total_npc_events >= 20
        and s.counters.total_items_bought >= 30
        and s.stats.satiety >= 60
        and s.stats.hydration >= 60
    )


def _lonely_king(s: GameSession) -> bool:
    return (
        s.stats.social <= 20
        and s.counters.total_npc_events == 0
        and s.stats.combat >= 120
        and not s.visited.city
        and not s.visited.mall
    )


def _truth_seeker(s: GameSession) -> bool:
    return (
        s.counters.total_explore_events >= 70
        and s.counters.total_daily_events >= 50
        and 40 <= s.stats.sanity <= 70
    )


def _cat_servant(s: GameSession) -> bool:
    return s.counters.cat_play_count >= 30 and s.stats.sanity >= 60


SPECIAL_RULES: list[EndingRule] = [
    EndingRule("special-rebuilder", EndingType.SPECIAL, _rebuilder),
    EndingRule("special-lonely-king", EndingType.SPECIAL, _lonely_king),
    EndingRule("special-truth-seeker", EndingType.SPECIAL, _truth_seeker),
    EndingRule("special-cat-servant", EndingType.SPECIAL, _cat_servant),
]


class EndingCatalog:
    """Immutable, ordered ending lookup."""

    def __init__(self, endings: Iterable[Ending]):
        self._endings: list[Ending] = list(endings)
        if not self._endings:
            raise ValueError("Ending catalog cannot be empty")
        self._by_id = {e.id: e for e in self._endings}

    def __len__(self) -> int:
        return len(self._endings)

    def __iter__(self):
        return iter(self._endings)

    def __contains__(self, ending_id: str) -> bool:
        return ending_id in self._by_id

    def find(self, ending_id: str) -> Ending | None:
        return self._by_id.get(ending_id)

    def get(self, ending_id: str) -> Ending:
        """Lookup by id; unknown ids resolve to the first catalog entry."""
        return self._by_id.get(ending_id, self._endings[0])

    def first_of(self, ending_type: EndingType) -> Ending | None:
        for ending in self._endings:
            if ending.type == ending_type:
                return ending
        return None

    def normal(self) -> Ending:
        """Designated catch-all: first normal-type entry, else the last entry."""
        return self.first_of(EndingType.NORMAL) or self._endings[-1]

    def rest_easter(self) -> Ending:
        """The ending forced by the weekly rest ratchet."""
        return (
            self.find(REST_EASTER_ENDING_ID)
            or self.first_of(EndingType.EASTER)
            or self.normal()
        )


@dataclass(frozen=True)
class EndingVerdict:
    """Classifier result with the rule that produced it."""
    ending: Ending
    tier: EndingType
    rule_id: str


class EndingClassifier:
    """
    Strict-priority classifier over a finished run.

    Usage:
        classifier = EndingClassifier(EndingCatalog(endings))
        ending = classifier.classify(session)
    """

    def __init__(self, catalog: EndingCatalog, easter_clicks: int = 10):
        self.catalog = catalog
        self.easter_clicks = easter_clicks

    def _cascade(self) -> list[EndingRule]:
        easter = EndingRule(
            "easter",
            EndingType.EASTER,
            lambda s: s.counters.never_give_up_clicks >= self.easter_clicks,
            optional=True,
        )
        return DEATH_RULES + [easter] + EXTREME_RULES + SPECIAL_RULES

    def explain(self, session: GameSession) -> EndingVerdict:
        """Classify and report which rule matched."""
        for rule in self._cascade():
            if not rule.predicate(session):
                continue
            if rule.tier == EndingType.EASTER:
                ending = self.catalog.first_of(EndingType.EASTER)
            else:
                ending = self.catalog.find(rule.ending_id)
            if ending is None:
                if rule.optional:
                    continue
                ending = self.catalog.get(rule.ending_id)
            return EndingVerdict(ending=ending, tier=rule.tier, rule_id=rule.ending_id)

        return EndingVerdict(
            ending=self.catalog.normal(),
            tier=EndingType.NORMAL,
            rule_id="normal",
        )

    def classify(self, session: GameSession) -> Ending:
        return self.explain(session).ending
