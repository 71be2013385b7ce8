"""Encounter events: the EventBus plus typed domain event definitions."""

from core.events.domain_events import (
    CastStartedEvent,
    EncounterAbortedEvent,
    FishCaughtEvent,
    FishEscapedEvent,
    FishHookedEvent,
    PhaseChangedEvent,
    QteResolvedEvent,
)
from core.events.event_bus import EventBus

__all__ = [
    "CastStartedEvent",
    "EncounterAbortedEvent",
    "EventBus",
    "FishCaughtEvent",
    "FishEscapedEvent",
    "FishHookedEvent",
    "PhaseChangedEvent",
    "QteResolvedEvent",
]
