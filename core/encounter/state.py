"""Mutable encounter state and the read-only snapshot handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.config.encounter import MAX_DEPTH
from core.fish.descriptor import FishDescriptor
from core.qte.subsystem import QteSnapshot
from core.state_machine import EncounterPhase


@dataclass
class EncounterState:
    """The single encounter owned by a session.

    Created once and reused: every catch, escape or abort returns it to IDLE.

    Attributes:
        phase: Current phase, mirrored from the phase state machine
        cast_started_at: Phase-local clock, stamped on THROWING and re-stamped on SINKING
        bobber_throw_progress: 0..1 along the throw, monotonic while THROWING
        line_depth: 0..max_depth
        current_fish: Hooked fish, present from the bite until catch or escape
        reel_started_at: Set when the QTE succeeds; None while the reel is gated
        reel_initial_depth: Depth captured when reeling started
        struggle_phase: Cosmetic wobble of the hooked fish
    """

    phase: EncounterPhase = EncounterPhase.IDLE
    cast_started_at: Optional[float] = None
    bobber_throw_progress: float = 0.0
    line_depth: float = 0.0
    max_depth: float = MAX_DEPTH
    current_fish: Optional[FishDescriptor] = None
    reel_started_at: Optional[float] = None
    reel_initial_depth: float = 0.0
    struggle_phase: float = 0.0
    casts: int = 0
    catches: int = 0
    escapes: int = 0
    aborts: int = 0

    @property
    def reel_active(self) -> bool:
        return self.phase is EncounterPhase.REELING and self.reel_started_at is not None

    @property
    def line_slack(self) -> bool:
        return self.phase is EncounterPhase.COMPLETE

    def set_depth(self, depth: float) -> None:
        self.line_depth = min(max(depth, 0.0), self.max_depth)

    def clear_encounter(self) -> None:
        """Drop everything that belongs to one cast."""
        self.cast_started_at = None
        self.bobber_throw_progress = 0.0
        self.line_depth = 0.0
        self.current_fish = None
        self.reel_started_at = None
        self.reel_initial_depth = 0.0
        self.struggle_phase = 0.0


@dataclass(frozen=True)
class EncounterSnapshot:
    """What a renderer needs to draw one frame."""

    phase: EncounterPhase
    now: float
    line_depth: float
    max_depth: float
    bobber_throw_progress: float
    bobber_height: float
    current_fish: Optional[FishDescriptor]
    reel_active: bool
    struggle_phase: float
    line_slack: bool
    qte: Optional[QteSnapshot] = None

    @property
    def qte_active(self) -> bool:
        return self.qte is not None

    @property
    def depth_fraction(self) -> float:
        if self.max_depth <= 0:
            return 0.0
        return self.line_depth / self.max_depth

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "now": self.now,
            "line_depth": self.line_depth,
            "max_depth": self.max_depth,
            "bobber_throw_progress": self.bobber_throw_progress,
            "bobber_height": self.bobber_height,
            "current_fish": self.current_fish.to_dict() if self.current_fish is not None else None,
            "reel_active": self.reel_active,
            "struggle_phase": self.struggle_phase,
            "line_slack": self.line_slack,
            "qte_active": self.qte_active,
            "qte": self.qte.to_dict() if self.qte is not None else None,
        }
