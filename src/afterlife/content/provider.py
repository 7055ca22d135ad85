"""
Narrative content providers.

Content is opaque data: category-keyed pools of flavor records, weekly
stories, the ending catalog and achievement definitions. The engine asks a
provider for it instead of reading global tables, so tests can hand in
small fixed pools.

Bundled content lives in YAML files under content/data/.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import yaml

from ..state.schema import (
    Achievement,
    Alignment,
    DailyAction,
    Ending,
    FlavorRecord,
    MapTier,
    WeeklyOption,
    WeeklyStory,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"

NPC_CATEGORY = "npc"


def daily_category(action: DailyAction) -> str:
    """Pool key for a daily action's flavor records."""
    return f"daily.{action.value}"


def explore_category(tier: MapTier) -> str:
    """Pool key for an expedition tier's flavor records."""
    return f"explore.{tier.value}"


@runtime_checkable
class ContentProvider(Protocol):
    """Source of all narrative data the engine draws on."""

    def pool(self, category: str) -> list[FlavorRecord]:
        """Records for a category key. Unknown categories yield []."""
        ...

    def story_for_week(self, week: int) -> WeeklyStory | None:
        ...

    def endings(self) -> list[Ending]:
        ...

    def achievements(self) -> list[Achievement]:
        ...


def generic_story(week: int) -> WeeklyStory:
    """Stand-in story for weeks without authored content."""
    return WeeklyStory(
        week=week,
        title=f"Week {week}: Another week in the shadow",
        body=(
            "The radio hisses. The cat watches the door. "
            "Another seven days stretch ahead of you."
        ),
        options=[
            WeeklyOption(id="A", label="Push yourself", alignment=Alignment.POSITIVE,
                         description="Train, patrol, do the hard things first."),
            WeeklyOption(id="B", label="Make a plan", alignment=Alignment.RATIONAL,
                         description="Take stock and ration carefully."),
            WeeklyOption(id="C", label="Lie flat", alignment=Alignment.SLACK,
                         description="The world ended. The couch did not."),
        ],
    )


class MemoryContentProvider:
    """Content held in plain Python collections. Used by tests and tools."""

    def __init__(
        self,
        pools: dict[str, list[FlavorRecord]] | None = None,
        stories: list[WeeklyStory] | None = None,
        endings: list[Ending] | None = None,
        achievements: list[Achievement] | None = None,
    ):
        self._pools = {k: list(v) for k, v in (pools or {}).items()}
        self._stories = {s.week: s for s in (stories or [])}
        self._endings = list(endings or [])
        self._achievements = list(achievements or [])

    def pool(self, category: str) -> list[FlavorRecord]:
        return list(self._pools.get(category, []))

    def story_for_week(self, week: int) -> WeeklyStory | None:
        return self._stories.get(week)

    def endings(self) -> list[Ending]:
        return list(self._endings)

    def achievements(self) -> list[Achievement]:
        return list(self._achievements)

    @property
    def categories(self) -> list[str]:
        return sorted(self._pools)


def _load_yaml(path: Path):
    if not path.exists():
        logger.warning("Content file missing: %s", path)
        return None
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _pools_from_yaml(data: dict | None) -> dict[str, list[FlavorRecord]]:
    """
    Flatten the events file into category pools.

    Layout:
        daily:   {action: [records]}
        explore: {tier: [records]}
        npc:     [records]
    """
    pools: dict[str, list[FlavorRecord]] = {}
    if not data:
        return pools

    for group in ("daily", "explore"):
        for key, records in (data.get(group) or {}).items():
            category = f"{group}.{key}"
            pools[category] = [
                FlavorRecord(category=category, **record) for record in records or []
            ]

    pools[NPC_CATEGORY] = [
        FlavorRecord(category=NPC_CATEGORY, **record)
        for record in data.get("npc") or []
    ]
    return pools


class YamlContentProvider(MemoryContentProvider):
    """Loads content from a directory of YAML files."""

    def __init__(self, data_dir: Path | str | None = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR

        pools = _pools_from_yaml(_load_yaml(self.data_dir / "events.yaml"))
        stories = [
            WeeklyStory.model_validate(s)
            for s in _load_yaml(self.data_dir / "stories.yaml") or []
        ]
        endings = [
            Ending.model_validate(e)
            for e in _load_yaml(self.data_dir / "endings.yaml") or []
        ]
        achievements = [
            Achievement.model_validate(a)
            for a in _load_yaml(self.data_dir / "achievements.yaml") or []
        ]

        super().__init__(
            pools=pools,
            stories=stories,
            endings=endings,
            achievements=achievements,
        )
        logger.debug(
            "Loaded content: %d pools, %d stories, %d endings",
            len(pools), len(stories), len(endings),
        )
