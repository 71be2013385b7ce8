"""QTE challenges and the strategies that generate them.

The input modality is decided once per session. Keyboard sessions get
key-press challenges drawn from a fixed key pool; touch sessions get tap
targets drawn from a fixed pool of screen-relative positions. Consecutive
duplicates are allowed.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple, Union

from core.config.qte import QTE_KEYS, RESERVED_KEYS, TAP_LOCATIONS
from core.util.rng import require_rng_param

MOBILE_USER_AGENT = re.compile(r"Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini", re.IGNORECASE)


class InputModality(Enum):
    KEYBOARD = "keyboard"
    TOUCH = "touch"


def detect_modality(user_agent: Optional[str]) -> InputModality:
    """Touch for mobile browsers, keyboard for everything else."""
    if user_agent and MOBILE_USER_AGENT.search(user_agent):
        return InputModality.TOUCH
    return InputModality.KEYBOARD


def normalize_key(key: Optional[str]) -> str:
    """Upper-case a key name; the space bar becomes "SPACE"."""
    if not key:
        return ""
    if key == " ":
        return "SPACE"
    return key.strip().upper()


def is_reserved_key(key: Optional[str]) -> bool:
    return normalize_key(key) in RESERVED_KEYS


@dataclass(frozen=True)
class KeyPressChallenge:
    """Press one specific key."""

    key: str

    kind = "key_press"

    def matches(self, pressed: Optional[str]) -> bool:
        return normalize_key(pressed) == self.key

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "key": self.key}


@dataclass(frozen=True)
class TapTargetChallenge:
    """Tap a square target centred at a percentage position of the viewport."""

    x_pct: float
    y_pct: float

    kind = "tap_target"

    def center(self, viewport_width: float, viewport_height: float) -> Tuple[float, float]:
        return viewport_width * self.x_pct / 100.0, viewport_height * self.y_pct / 100.0

    def bounds(
        self, viewport_width: float, viewport_height: float, size: float
    ) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the rendered target in pixels."""
        cx, cy = self.center(viewport_width, viewport_height)
        half = size / 2.0
        return cx - half, cy - half, cx + half, cy + half

    def contains(self, x: float, y: float, viewport_width: float, viewport_height: float, size: float) -> bool:
        left, top, right, bottom = self.bounds(viewport_width, viewport_height, size)
        return left <= x <= right and top <= y <= bottom

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "x_pct": self.x_pct, "y_pct": self.y_pct}


Challenge = Union[KeyPressChallenge, TapTargetChallenge]


class ChallengeStrategy(Protocol):
    """Produces the next challenge for one input modality."""

    modality: InputModality

    def next_challenge(self) -> Challenge:
        ...


class KeyPressStrategy:
    modality = InputModality.KEYBOARD

    def __init__(self, rng: Optional[random.Random] = None, keys: Sequence[str] = QTE_KEYS) -> None:
        self._rng = require_rng_param(rng, "KeyPressStrategy.__init__")
        self._keys = tuple(normalize_key(k) for k in keys)

    def next_challenge(self) -> KeyPressChallenge:
        return KeyPressChallenge(self._rng.choice(self._keys))


class TapTargetStrategy:
    modality = InputModality.TOUCH

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        locations: Sequence[Tuple[float, float]] = TAP_LOCATIONS,
    ) -> None:
        self._rng = require_rng_param(rng, "TapTargetStrategy.__init__")
        self._locations = tuple(locations)

    def next_challenge(self) -> TapTargetChallenge:
        x_pct, y_pct = self._rng.choice(self._locations)
        return TapTargetChallenge(x_pct, y_pct)


def strategy_for(
    modality: InputModality,
    rng: random.Random,
    keys: Sequence[str] = QTE_KEYS,
    locations: Sequence[Tuple[float, float]] = TAP_LOCATIONS,
) -> ChallengeStrategy:
    if modality is InputModality.TOUCH:
        return TapTargetStrategy(rng, locations)
    return KeyPressStrategy(rng, keys)
