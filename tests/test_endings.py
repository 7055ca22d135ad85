"""Tests for the ending classifier cascade."""

import pytest

from afterlife.state.schema import Ending, EndingType, GameSession, VisitFlags
from afterlife.systems.endings import (
    DEATH_RULES,
    EXTREME_RULES,
    SPECIAL_RULES,
    EndingCatalog,
    EndingClassifier,
)


def settled_session(**counters) -> GameSession:
    """A run that explored and rested, so hermit/never-rest do not fire."""
    session = GameSession(visited=VisitFlags(suburb=True), never_rest=False)
    for name, value in counters.items():
        setattr(session.counters, name, value)
    return session


class TestCatalog:

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError):
            EndingCatalog([])

    def test_bundled_catalog_covers_every_rule(self, catalog):
        for rule in DEATH_RULES + EXTREME_RULES + SPECIAL_RULES:
            assert rule.ending_id in catalog

    def test_unknown_id_resolves_to_first_entry(self, catalog):
        assert catalog.get("no-such-ending").id == "death-blood"

    def test_normal_falls_back_to_last_entry(self):
        catalog = EndingCatalog([
            Ending(id="a", name="A", type=EndingType.SPECIAL),
            Ending(id="z", name="Z", type=EndingType.EXTREME),
        ])
        assert catalog.normal().id == "z"

    def test_rest_easter(self, catalog):
        assert catalog.rest_easter().id == "easter-sleep"


class TestCascade:

    def test_death_dominates_extreme(self, classifier):
        session = settled_session()
        session.stats.health = 0
        session.stats.combat = 200
        assert classifier.classify(session).id == "death-blood"

    def test_death_by_madness(self, classifier):
        session = settled_session()
        session.stats.sanity = 0
        assert classifier.classify(session).id == "death-madness"

    def test_death_by_debt(self, classifier):
        assert classifier.classify(settled_session(debt_work_count=3)).id == "death-debt"

    def test_easter_beats_extreme(self, classifier):
        session = settled_session(never_give_up_clicks=10, positive_choice_count=40)
        verdict = classifier.explain(session)
        assert verdict.ending.id == "easter-sleep"
        assert verdict.tier == EndingType.EASTER

    def test_easter_falls_through_when_absent(self):
        catalog = EndingCatalog([
            Ending(id="extreme-active-survivor", name="Active", type=EndingType.EXTREME),
            Ending(id="normal-survivor", name="Survivor", type=EndingType.NORMAL),
        ])
        session = settled_session(never_give_up_clicks=12, positive_choice_count=37)
        assert EndingClassifier(catalog).classify(session).id == "extreme-active-survivor"

    def test_thirty_seven_positive_choices(self, classifier):
        session = settled_session(positive_choice_count=37)
        assert classifier.classify(session).id == "extreme-active-survivor"

    def test_thirty_six_is_not_enough(self, classifier):
        session = settled_session(positive_choice_count=36)
        assert classifier.classify(session).id == "normal-survivor"

    def test_extreme_order(self, classifier):
        """War god is checked before the choice counters."""
        session = settled_session(positive_choice_count=40)
        session.stats.combat = 160
        assert classifier.classify(session).id == "extreme-war-god"

    def test_fresh_run_is_hermit(self, classifier):
        assert classifier.classify(GameSession()).id == "extreme-hermit"

    def test_never_rest(self, classifier):
        session = settled_session()
        session.never_rest = True
        assert classifier.classify(session).id == "extreme-never-rest"

    def test_special_cat_servant(self, classifier):
        session = settled_session(cat_play_count=30)
        session.stats.sanity = 60
        verdict = classifier.explain(session)
        assert verdict.ending.id == "special-cat-servant"
        assert verdict.tier == EndingType.SPECIAL

    def test_special_lonely_king(self, classifier):
        session = settled_session()
        session.stats.combat = 120
        session.stats.social = 10
        assert classifier.classify(session).id == "special-lonely-king"

    def test_normal_fallback(self, classifier):
        verdict = classifier.explain(settled_session())
        assert verdict.ending.id == "normal-survivor"
        assert verdict.rule_id == "normal"

    def test_missing_ending_resolves_to_first_entry(self):
        catalog = EndingCatalog([
            Ending(id="first", name="First", type=EndingType.NORMAL),
            Ending(id="other", name="Other", type=EndingType.SPECIAL),
        ])
        session = settled_session()
        session.stats.health = 0
        assert EndingClassifier(catalog).classify(session).id == "first"

    def test_classifier_does_not_mutate(self, classifier):
        session = settled_session(positive_choice_count=37)
        before = session.model_dump()
        classifier.classify(session)
        assert session.model_dump() == before
