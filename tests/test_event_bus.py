"""Tests for the ledger event bus."""

from __future__ import annotations

from rewardledger.events import (
    ALL_EVENT_TYPES,
    EVENT_FUNDS_ACKNOWLEDGED,
    EVENT_REWARD_CLAIMED,
    Event,
    InMemoryEventBus,
)


class TestEvent:
    def test_event_creation(self) -> None:
        event = Event(event_type=EVENT_REWARD_CLAIMED, source="rewards")
        assert event.payload == {}
        assert event.timestamp is not None
        assert event.event_id.startswith("evt-")


class TestInMemoryEventBus:
    def test_emit_and_subscribe(self) -> None:
        bus = InMemoryEventBus()
        received: list[Event] = []
        bus.subscribe("reward.*", received.append)

        event = Event(event_type=EVENT_REWARD_CLAIMED, source="rewards")
        bus.emit(event)

        assert received == [event]

    def test_pattern_filters(self) -> None:
        bus = InMemoryEventBus()
        funds: list[Event] = []
        everything: list[Event] = []
        bus.subscribe("funds.*", funds.append)
        bus.subscribe("*", everything.append)

        for event_type in ALL_EVENT_TYPES:
            bus.emit(Event(event_type=event_type, source="rewards"))

        assert [e.event_type for e in funds] == [EVENT_FUNDS_ACKNOWLEDGED]
        assert len(everything) == len(ALL_EVENT_TYPES)

    def test_unsubscribe(self) -> None:
        bus = InMemoryEventBus()
        received: list[Event] = []
        bus.subscribe("*", received.append)
        bus.unsubscribe(received.append)
        bus.emit(Event(event_type=EVENT_REWARD_CLAIMED, source="rewards"))
        assert received == []

    def test_history_is_bounded(self) -> None:
        bus = InMemoryEventBus(history_size=3)
        for i in range(5):
            bus.emit(Event(event_type=EVENT_REWARD_CLAIMED, source="rewards", payload={"i": i}))
        assert [e.payload["i"] for e in bus.history()] == [2, 3, 4]
        assert bus.history("funds.*") == []
