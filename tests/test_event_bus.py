"""Tests for the EventBus and encounter domain events."""

import dataclasses

import pytest

from core.events import EventBus, FishCaughtEvent, FishEscapedEvent, PhaseChangedEvent
from core.state_machine import EncounterPhase


class TestEventBus:
    """Test suite for EventBus functionality."""

    def test_emit_reaches_subscriber(self, common_fish) -> None:
        """Verify events are delivered to subscribed handlers."""
        bus = EventBus()
        received = []
        bus.subscribe(FishCaughtEvent, received.append)

        event = FishCaughtEvent(fish=common_fish, at=100.0)
        assert bus.emit(event) == 1

        assert received == [event]

    def test_no_subscribers_no_crash(self, common_fish) -> None:
        bus = EventBus()
        assert bus.emit(FishCaughtEvent(fish=common_fish, at=0.0)) == 0
        assert bus.subscriber_count(FishCaughtEvent) == 0

    def test_handlers_run_in_registration_order(self) -> None:
        bus = EventBus()
        order = []
        bus.subscribe(PhaseChangedEvent, lambda e: order.append("first"))
        bus.subscribe(PhaseChangedEvent, lambda e: order.append("second"))

        bus.emit(PhaseChangedEvent(EncounterPhase.IDLE, EncounterPhase.THROWING, "cast", 0.0))

        assert order == ["first", "second"]

    def test_handler_receives_correct_type_only(self, common_fish) -> None:
        bus = EventBus()
        caught, escaped = [], []
        bus.subscribe(FishCaughtEvent, caught.append)
        bus.subscribe(FishEscapedEvent, escaped.append)

        bus.emit(FishEscapedEvent(fish=common_fish, at=5.0))

        assert caught == []
        assert len(escaped) == 1

    def test_handler_may_unsubscribe_itself(self, common_fish) -> None:
        bus = EventBus()
        calls = []

        def once(event) -> None:
            calls.append(event)
            bus.unsubscribe(FishCaughtEvent, once)

        bus.subscribe(FishCaughtEvent, once)
        bus.subscribe(FishCaughtEvent, calls.append)

        assert bus.emit(FishCaughtEvent(fish=common_fish, at=0.0)) == 2
        assert bus.emit(FishCaughtEvent(fish=common_fish, at=1.0)) == 1
        assert len(calls) == 3

    def test_unsubscribe_unknown_handler(self) -> None:
        bus = EventBus()
        assert bus.unsubscribe(FishCaughtEvent, print) is False

    def test_clear_subscribers(self) -> None:
        bus = EventBus()
        bus.subscribe(FishCaughtEvent, print)
        assert bus.has_subscribers(FishCaughtEvent)
        bus.clear_subscribers()
        assert not bus.has_subscribers(FishCaughtEvent)


def test_events_are_immutable(common_fish) -> None:
    event = FishCaughtEvent(fish=common_fish, at=1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.at = 2.0  # type: ignore[misc]
