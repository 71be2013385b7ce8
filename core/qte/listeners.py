"""Input listener registry for quick-time events.

A QTE subscribes for the modality it needs when it starts and releases the
subscription when it ends, whichever way it ends. At most one subscription
per modality may be live; a second subscribe is a wiring bug and raises.
Releasing is exactly-once: the first ``unsubscribe()`` detaches, later calls
are no-ops.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Union

from core.exceptions import ListenerError
from core.qte.challenges import InputModality

logger = logging.getLogger(__name__)

KeyHandler = Callable[[str], bool]
TapHandler = Callable[[float, float], bool]


class Subscription:
    """A live listener registration."""

    def __init__(self, router: "InputRouter", modality: InputModality, handler: Union[KeyHandler, TapHandler]):
        self.router = router
        self.modality = modality
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> bool:
        """Detach the handler. Returns False if already detached."""
        if not self._active:
            return False
        self._active = False
        self.router._release(self)
        return True


class InputRouter:
    """Routes raw key and tap input to the single live handler per modality.

    Attributes:
        subscribe_count: Total subscriptions ever made
        unsubscribe_count: Total subscriptions ever released
    """

    def __init__(self) -> None:
        self._live: Dict[InputModality, Subscription] = {}
        self.subscribe_count = 0
        self.unsubscribe_count = 0

    def subscribe(self, modality: InputModality, handler: Union[KeyHandler, TapHandler]) -> Subscription:
        if modality in self._live:
            raise ListenerError(f"A {modality.value} listener is already registered")
        subscription = Subscription(self, modality, handler)
        self._live[modality] = subscription
        self.subscribe_count += 1
        logger.debug("Subscribed %s listener", modality.value)
        return subscription

    def _release(self, subscription: Subscription) -> None:
        if self._live.get(subscription.modality) is not subscription:
            raise ListenerError(f"Released a {subscription.modality.value} listener that was not live")
        del self._live[subscription.modality]
        self.unsubscribe_count += 1
        logger.debug("Released %s listener", subscription.modality.value)

    def is_subscribed(self, modality: InputModality) -> bool:
        return modality in self._live

    @property
    def live_count(self) -> int:
        return len(self._live)

    def dispatch_key(self, key: str) -> bool:
        """Forward a key press. Returns True if a live handler accepted it."""
        subscription: Optional[Subscription] = self._live.get(InputModality.KEYBOARD)
        if subscription is None:
            return False
        return bool(subscription.handler(key))

    def dispatch_tap(self, x: float, y: float) -> bool:
        """Forward a tap. Returns True if a live handler accepted it."""
        subscription: Optional[Subscription] = self._live.get(InputModality.TOUCH)
        if subscription is None:
            return False
        return bool(subscription.handler(x, y))
