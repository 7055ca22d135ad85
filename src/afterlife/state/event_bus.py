"""
Event bus for run state changes.

Provides decoupled communication between the engine and whatever presents it
(headless driver, simulation transcripts, a UI). Components subscribe to
events and react without tight coupling.

Usage:
    from .event_bus import get_event_bus, EventType

    bus = get_event_bus()
    bus.on(EventType.RUN_ENDED, my_handler)

    # Emitted by the PhaseController
    bus.emit(EventType.RUN_ENDED, session_id="a1b2c3d4", week=45, ending="normal-survivor")

    def my_handler(event: GameEvent):
        print(f"Run ended with {event.data['ending']}")
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Engine events that can be published."""

    # Week flow
    WEEK_STARTED = "week.started"
    OPTION_SELECTED = "option.selected"
    WEEK_CLOSED = "week.closed"
    WEEK_SETTLED = "week.settled"

    # Actions
    DAILY_ACTION = "action.daily"
    EXPLORE = "action.explore"
    ACTION_REJECTED = "action.rejected"
    DEBT_WORKED = "debt.worked"

    # NPC door knocks
    NPC_ENCOUNTER = "npc.encounter"
    NPC_RESOLVED = "npc.resolved"

    # Trade
    ITEM_BOUGHT = "item.bought"
    ITEM_SOLD = "item.sold"
    ITEM_USED = "item.used"

    # Progress
    MAP_UNLOCKED = "map.unlocked"
    ACHIEVEMENT_UNLOCKED = "achievement.unlocked"

    # Run lifecycle
    RUN_ENDED = "run.ended"
    RUN_RESTARTED = "run.restarted"
    RUN_SAVED = "run.saved"
    RUN_LOADED = "run.loaded"


@dataclass
class GameEvent:
    """
    Event payload for the event bus.

    Attributes:
        type: The event type (from EventType enum)
        data: Event-specific payload as dict
        session_id: ID of the run this event belongs to
        week: Week number when the event occurred
        timestamp: When the event was emitted
    """

    type: EventType
    data: dict = field(default_factory=dict)
    session_id: str = ""
    week: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous event bus.

    Listeners are called immediately on emit(), in subscription order.
    A failing listener is logged and skipped; it never breaks the emitter.
    """

    def __init__(self, history_limit: int = 100):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._history: list[GameEvent] = []
        self._history_limit = history_limit

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to an event type. Subscribing twice is a no-op."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        if handler not in self._listeners[event_type]:
            self._listeners[event_type].append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from an event type."""
        if event_type in self._listeners and handler in self._listeners[event_type]:
            self._listeners[event_type].remove(handler)

    def on_all(self, handler: EventHandler) -> None:
        """Subscribe one handler to every event type."""
        for event_type in EventType:
            self.on(event_type, handler)

    def emit(
        self,
        event_type: EventType,
        session_id: str = "",
        week: int = 0,
        **data,
    ) -> GameEvent:
        """
        Emit an event to all subscribers.

        Returns:
            The emitted GameEvent (for chaining/testing)
        """
        event = GameEvent(
            type=event_type,
            data=data,
            session_id=session_id,
            week=week,
        )

        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        for handler in list(self._listeners.get(event_type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Error in handler for %s", event_type.value)

        return event

    def clear(self) -> None:
        """Clear all listeners and history. Useful for testing."""
        self._listeners.clear()
        self._history.clear()

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        """Recent events, optionally filtered by type."""
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, []))


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Process-wide default bus, used when no bus is injected."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Reset the default event bus. Useful for testing."""
    global _event_bus
    _event_bus = None
