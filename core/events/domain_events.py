"""Encounter domain events.

Events are immutable facts. The encounter machine commits its own state
before emitting, so handlers observe the post-transition state and cannot
undo it. ``at`` is the session's virtual time in milliseconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.fish.descriptor import FishDescriptor
    from core.state_machine import EncounterPhase


@dataclass(frozen=True)
class PhaseChangedEvent:
    """The encounter moved from one phase to another."""

    from_phase: "EncounterPhase"
    to_phase: "EncounterPhase"
    reason: str
    at: float


@dataclass(frozen=True)
class CastStartedEvent:
    at: float


@dataclass(frozen=True)
class FishHookedEvent:
    """A fish bit and its quick-time event started."""

    fish: "FishDescriptor"
    at: float


@dataclass(frozen=True)
class QteResolvedEvent:
    """A quick-time event ended.

    Attributes:
        success: True if every challenge was cleared in time
        successes: Challenges cleared
        required: Challenges that had to be cleared
        at: Session time of resolution
    """

    success: bool
    successes: int
    required: int
    at: float


@dataclass(frozen=True)
class FishCaughtEvent:
    """The line was reeled all the way in with a fish on it."""

    fish: "FishDescriptor"
    at: float


@dataclass(frozen=True)
class FishEscapedEvent:
    """The quick-time event failed and the fish got away."""

    fish: "FishDescriptor"
    at: float


@dataclass(frozen=True)
class EncounterAbortedEvent:
    """The encounter was reset externally before it resolved."""

    from_phase: "EncounterPhase"
    reason: str
    at: float
