"""Lightweight session configuration helpers."""

import math
from dataclasses import dataclass, field
from typing import Tuple

from core.config.display import SCREEN_HEIGHT, SCREEN_WIDTH
from core.config.encounter import (
    BITE_DELAY_MS,
    FRAME_MS,
    MAX_DEPTH,
    MAX_FRAME_GAP_FRAMES,
    PHASE_HISTORY_LIMIT,
    REEL_SPEED,
    SINK_SPEED,
    SLACK_STEP,
    STRUGGLE_STEP,
    THROW_DURATION_MS,
)
from core.config.qte import (
    QTE_COUNTDOWN_INTERVAL_MS,
    QTE_COUNTDOWN_STEP_S,
    QTE_KEYS,
    QTE_REPROMPT_DELAY_MS,
    TAP_LOCATIONS,
    TAP_TARGET_SIZE,
)
from core.exceptions import ConfigurationError


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")


@dataclass
class EncounterConfig:
    """Timing and depth parameters for one encounter."""

    frame_ms: float = FRAME_MS
    throw_duration_ms: float = THROW_DURATION_MS
    sink_speed: float = SINK_SPEED
    reel_speed: float = REEL_SPEED
    slack_step: float = SLACK_STEP
    max_depth: float = MAX_DEPTH
    bite_delay_ms: float = BITE_DELAY_MS
    struggle_step: float = STRUGGLE_STEP
    max_frame_gap_frames: int = MAX_FRAME_GAP_FRAMES
    history_limit: int = PHASE_HISTORY_LIMIT

    @property
    def max_frame_gap_ms(self) -> float:
        return self.frame_ms * self.max_frame_gap_frames

    def validate(self) -> None:
        for name in (
            "frame_ms",
            "throw_duration_ms",
            "sink_speed",
            "reel_speed",
            "slack_step",
            "max_depth",
            "max_frame_gap_frames",
        ):
            _require_positive(name, getattr(self, name))
        if self.bite_delay_ms < 0:
            raise ConfigurationError(f"bite_delay_ms must not be negative, got {self.bite_delay_ms!r}")


@dataclass
class QteConfig:
    """Quick-time-event cadence, input pools and hit-test geometry."""

    countdown_interval_ms: float = QTE_COUNTDOWN_INTERVAL_MS
    countdown_step_s: float = QTE_COUNTDOWN_STEP_S
    reprompt_delay_ms: float = QTE_REPROMPT_DELAY_MS
    keys: Tuple[str, ...] = QTE_KEYS
    tap_locations: Tuple[Tuple[float, float], ...] = TAP_LOCATIONS
    tap_target_size: int = TAP_TARGET_SIZE
    viewport_width: int = SCREEN_WIDTH
    viewport_height: int = SCREEN_HEIGHT

    def validate(self) -> None:
        _require_positive("countdown_interval_ms", self.countdown_interval_ms)
        _require_positive("countdown_step_s", self.countdown_step_s)
        _require_positive("tap_target_size", self.tap_target_size)
        _require_positive("viewport_width", self.viewport_width)
        _require_positive("viewport_height", self.viewport_height)
        if self.reprompt_delay_ms < 0:
            raise ConfigurationError("reprompt_delay_ms must not be negative")
        if not self.keys:
            raise ConfigurationError("QTE key pool is empty")
        if not self.tap_locations:
            raise ConfigurationError("QTE tap location pool is empty")
        for x_pct, y_pct in self.tap_locations:
            if not (0 <= x_pct <= 100 and 0 <= y_pct <= 100):
                raise ConfigurationError(f"Tap location ({x_pct}, {y_pct}) is outside 0-100%")


@dataclass
class SessionConfig:
    """Configuration for a play session.

    Attributes:
        encounter: Encounter timing parameters.
        qte: Quick-time-event parameters.
        starting_gold: Gold the player starts with.
    """

    encounter: EncounterConfig = field(default_factory=EncounterConfig)
    qte: QteConfig = field(default_factory=QteConfig)
    starting_gold: int = 0

    def validate(self) -> "SessionConfig":
        """Validate every section, raising ConfigurationError on the first problem."""
        self.encounter.validate()
        self.qte.validate()
        if self.starting_gold < 0:
            raise ConfigurationError("starting_gold must not be negative")
        return self


def validate_weight_table(name: str, weights) -> None:
    """Ensure a spawn-chance table is non-negative and sums to 1.0."""
    if any(w < 0 for w in weights):
        raise ConfigurationError(f"{name} table has a negative chance")
    total = math.fsum(weights)
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ConfigurationError(f"{name} chances sum to {total}, expected 1.0")
