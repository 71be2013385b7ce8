"""Catch notifiers: who hears about a landed fish.

A notifier is told about every catch exactly once and never about an escape.
Notification is fire-and-forget; the session logs a failing notifier and
moves on.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Protocol, runtime_checkable

from core.config.server import RECENT_CATCH_LIMIT
from core.fish.descriptor import FishDescriptor

logger = logging.getLogger(__name__)


@runtime_checkable
class CatchNotifier(Protocol):
    def on_fish_caught(self, fish: FishDescriptor) -> None:
        ...


class LoggingCatchNotifier:
    """Writes every catch to the log."""

    def __init__(self, name: str = "player") -> None:
        self.name = name

    def on_fish_caught(self, fish: FishDescriptor) -> None:
        logger.info("%s landed a %s %s %s (%dG)", self.name, fish.size, fish.rarity, fish.type, fish.value)


@dataclass(frozen=True)
class CatchRecord:
    player: str
    fish: FishDescriptor

    def to_dict(self) -> Dict[str, Any]:
        return {"player": self.player, **self.fish.to_dict()}


class RecentCatchFeed:
    """Bounded, most-recent-first feed of catches.

    Shared by every session on a server, so players can see what others are
    landing. Not a ranking.
    """

    def __init__(self, limit: int = RECENT_CATCH_LIMIT) -> None:
        self._records: Deque[CatchRecord] = deque(maxlen=limit)

    def notifier_for(self, player: str) -> "FeedNotifier":
        return FeedNotifier(self, player)

    def record(self, player: str, fish: FishDescriptor) -> None:
        self._records.appendleft(CatchRecord(player, fish))

    def recent(self, limit: int = RECENT_CATCH_LIMIT, player: Optional[str] = None) -> List[CatchRecord]:
        records = [r for r in self._records if player is None or r.player == player]
        return records[: max(limit, 0)]

    def __len__(self) -> int:
        return len(self._records)


class FeedNotifier:
    def __init__(self, feed: RecentCatchFeed, player: str) -> None:
        self._feed = feed
        self.player = player

    def on_fish_caught(self, fish: FishDescriptor) -> None:
        self._feed.record(self.player, fish)
