"""Tests for the event bus."""

from afterlife.state import EventBus, EventType, get_event_bus, reset_event_bus


class TestEventBus:

    def test_emit_reaches_subscriber(self):
        bus = EventBus()
        received = []
        bus.on(EventType.RUN_ENDED, received.append)

        event = bus.emit(EventType.RUN_ENDED, session_id="abc", week=45, ending="x")

        assert received == [event]
        assert event.data == {"ending": "x"}
        assert event.session_id == "abc"
        assert event.week == 45

    def test_other_types_not_delivered(self):
        bus = EventBus()
        received = []
        bus.on(EventType.RUN_ENDED, received.append)
        bus.emit(EventType.WEEK_STARTED)
        assert received == []

    def test_off(self):
        bus = EventBus()
        received = []
        bus.on(EventType.ITEM_BOUGHT, received.append)
        bus.off(EventType.ITEM_BOUGHT, received.append)
        bus.emit(EventType.ITEM_BOUGHT)
        assert received == []

    def test_double_subscribe_is_noop(self):
        bus = EventBus()
        handler = lambda event: None
        bus.on(EventType.ITEM_SOLD, handler)
        bus.on(EventType.ITEM_SOLD, handler)
        assert bus.listener_count(EventType.ITEM_SOLD) == 1

    def test_on_all(self):
        bus = EventBus()
        received = []
        bus.on_all(received.append)
        bus.emit(EventType.WEEK_STARTED)
        bus.emit(EventType.MAP_UNLOCKED, tier="city")
        assert [e.type for e in received] == [EventType.WEEK_STARTED, EventType.MAP_UNLOCKED]

    def test_failing_handler_does_not_break_emit(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.on(EventType.RUN_SAVED, broken)
        bus.on(EventType.RUN_SAVED, received.append)
        bus.emit(EventType.RUN_SAVED)
        assert len(received) == 1

    def test_history_limit_and_filter(self):
        bus = EventBus(history_limit=3)
        for _ in range(5):
            bus.emit(EventType.DAILY_ACTION)
        bus.emit(EventType.EXPLORE)

        assert len(bus.get_history()) == 3
        assert len(bus.get_history(EventType.EXPLORE)) == 1

    def test_clear(self):
        bus = EventBus()
        bus.on(EventType.RUN_ENDED, lambda e: None)
        bus.emit(EventType.RUN_ENDED)
        bus.clear()
        assert bus.get_history() == []
        assert bus.listener_count(EventType.RUN_ENDED) == 0

    def test_default_bus_singleton(self):
        assert get_event_bus() is get_event_bus()
        first = get_event_bus()
        reset_event_bus()
        assert get_event_bus() is not first
