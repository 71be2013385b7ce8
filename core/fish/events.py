"""Time-of-day synchronous events.

Every player sees the same event at the same local hour. An event favours a
few special fish and multiplies the value of everything caught while it runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

from core.config.fish import SYNCHRONOUS_EVENT_TABLE


@dataclass(frozen=True)
class FishingEvent:
    name: str
    description: str
    special_fish: Tuple[str, ...]
    multiplier: float

    def features(self, fish_name: str) -> bool:
        return fish_name in self.special_fish


SYNCHRONOUS_EVENTS: Dict[str, FishingEvent] = {
    phase: FishingEvent(name, description, tuple(special), multiplier)
    for phase, (name, description, special, multiplier) in SYNCHRONOUS_EVENT_TABLE.items()
}


def time_of_day(hour: int) -> str:
    """Map a local hour (0-23) to morning, noon, afternoon or night."""
    if 5 <= hour < 9:
        return "morning"
    if 9 <= hour < 13:
        return "noon"
    if 13 <= hour < 18:
        return "afternoon"
    return "night"


def current_event(moment: Optional[datetime] = None) -> Optional[FishingEvent]:
    """Event running at ``moment`` (default: now, local time)."""
    moment = moment or datetime.now()
    return SYNCHRONOUS_EVENTS.get(time_of_day(moment.hour))
