"""Synchronous event bus for encounter events.

The bus lets the encounter machine announce what happened (cast, hook,
catch, escape) without knowing who is listening: the session's economy,
catch notifiers, the headless report.

Handlers run synchronously, in registration order, on the caller's thread,
so the order of side effects inside one tick is deterministic.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


class EventBus:
    """Synchronous event bus keyed by event type.

    Example:
        bus = EventBus()
        bus.subscribe(FishCaughtEvent, economy.record_catch)
        bus.emit(FishCaughtEvent(fish=fish, at=1234.0))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def emit(self, event: object) -> int:
        """Deliver an event to every handler of its exact type.

        Returns:
            Number of handlers invoked
        """
        handlers = self._handlers.get(type(event))
        if not handlers:
            return 0
        # Copy so a handler may unsubscribe itself
        snapshot = list(handlers)
        for handler in snapshot:
            handler(event)
        return len(snapshot)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler. Returns True if it was registered."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def clear_subscribers(self) -> None:
        self._handlers.clear()

    def has_subscribers(self, event_type: type) -> bool:
        return bool(self._handlers.get(event_type))

    def subscriber_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))
