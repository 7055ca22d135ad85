"""
Pytest fixtures for Shadow Afterlife engine tests.

Provides small in-memory content, a scripted resolver and a private event
bus for isolated testing.
"""

import pytest
from pathlib import Path

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from afterlife.content import MemoryContentProvider, YamlContentProvider
from afterlife.state import EventBus, reset_event_bus
from afterlife.state.schema import FlavorRecord
from afterlife.systems.endings import EndingCatalog, EndingClassifier
from afterlife.systems.events import EmptyPoolError, RandomEventResolver
from afterlife.systems.phases import PhaseController
from afterlife.systems.trade import Inventory


class ScriptedResolver(RandomEventResolver):
    """
    Resolver with scripted rolls. Draws always pick the first record.

    Rolls are consumed in order from `rolls`; once exhausted every roll
    returns `default`. Requested probabilities are recorded.
    """

    def __init__(self, rolls: list[bool] | None = None, default: bool = False):
        super().__init__(seed=0)
        self.rolls = list(rolls or [])
        self.default = default
        self.probabilities: list[float] = []

    def draw(self, pool):
        if not pool:
            raise EmptyPoolError("Cannot draw from an empty pool")
        return pool[0]

    def chance(self, probability: float) -> bool:
        self.probabilities.append(probability)
        if self.rolls:
            return self.rolls.pop(0)
        return self.default


def _record(record_id: str, category: str, **kwargs) -> FlavorRecord:
    return FlavorRecord(id=record_id, category=category, title=record_id.title(), **kwargs)


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Keep the process-wide bus clean between tests."""
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture(scope="session")
def bundled_content():
    """Content shipped with the package."""
    return YamlContentProvider()


@pytest.fixture
def catalog(bundled_content):
    """Full ending catalog from the bundled content."""
    return EndingCatalog(bundled_content.endings())


@pytest.fixture
def classifier(catalog):
    return EndingClassifier(catalog)


@pytest.fixture
def content(bundled_content):
    """One record per pool so draws are predictable."""
    return MemoryContentProvider(
        pools={
            "daily.exercise": [_record("exercise-5", "daily.exercise")],
            "daily.cook": [_record("cook-1", "daily.cook")],
            "daily.drink": [_record("drink-7", "daily.drink")],
            "daily.playWithCat": [_record("cat-1", "daily.playWithCat")],
            "daily.read": [_record("read-1", "daily.read")],
            "daily.rest": [_record("rest-1", "daily.rest")],
            "explore.suburb": [_record("suburb-1", "explore.suburb")],
            "explore.city": [_record("city-1", "explore.city")],
            "explore.mall": [_record("mall-1", "explore.mall")],
            "npc": [
                _record(
                    "npc-18-teacher",
                    "npc",
                    help_outcome="Thank you.",
                    refuse_outcome="I understand.",
                ),
            ],
        },
        endings=bundled_content.endings(),
        achievements=bundled_content.achievements(),
    )


@pytest.fixture
def bus():
    """Private event bus."""
    return EventBus()


@pytest.fixture
def resolver():
    """No knocks, no bonus items unless a test scripts them."""
    return ScriptedResolver()


@pytest.fixture
def inventory():
    return Inventory()


@pytest.fixture
def controller(content, resolver, inventory, bus):
    """Phase controller at week 1, story phase."""
    return PhaseController(
        content=content,
        resolver=resolver,
        inventory=inventory,
        bus=bus,
    )


def play_week(controller: PhaseController, option: str = "B") -> None:
    """Select, close and advance one quiet week."""
    controller.select_option(option)
    controller.end_week()
    if controller.session.awaiting_npc:
        controller.resolve_npc(help=False)
    controller.advance_week()
