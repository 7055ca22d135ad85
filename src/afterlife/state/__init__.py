"""State management for Shadow Afterlife runs."""

from .schema import (
    Achievement,
    Alignment,
    DailyAction,
    Ending,
    EndingType,
    FlavorRecord,
    GamePhase,
    GameSession,
    MapTier,
    Meter,
    ResourceState,
    SessionSnapshot,
    StatCounters,
    UnlockState,
    VisitFlags,
    WeeklyOption,
    WeeklyStory,
    WeekSummary,
)
from .store import SnapshotStore, JsonSnapshotStore, MemorySnapshotStore
from .event_bus import (
    EventBus,
    EventType,
    GameEvent,
    get_event_bus,
    reset_event_bus,
)

__all__ = [
    # Schema
    "Achievement",
    "Alignment",
    "DailyAction",
    "Ending",
    "EndingType",
    "FlavorRecord",
    "GamePhase",
    "GameSession",
    "MapTier",
    "Meter",
    "ResourceState",
    "SessionSnapshot",
    "StatCounters",
    "UnlockState",
    "VisitFlags",
    "WeeklyOption",
    "WeeklyStory",
    "WeekSummary",
    # Store
    "SnapshotStore",
    "JsonSnapshotStore",
    "MemorySnapshotStore",
    # Event Bus
    "EventBus",
    "EventType",
    "GameEvent",
    "get_event_bus",
    "reset_event_bus",
]
