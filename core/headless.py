"""Headless autoplay: a scripted angler fishing against the real encounter.

Useful for soak-testing the encounter loop and for eyeballing how rarity
difficulty plays out without a window. The session is stepped at nominal
60 fps frames on a synthetic clock, so a run is reproducible from its seed.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from core.config.qte import QTE_KEYS
from core.config.session_config import SessionConfig
from core.events import EncounterAbortedEvent, FishCaughtEvent, FishEscapedEvent
from core.fish.events import FishingEvent
from core.qte.challenges import InputModality, KeyPressChallenge, TapTargetChallenge
from core.session import GameSession
from core.state_machine import EncounterPhase
from core.util.rng import require_rng_param

logger = logging.getLogger(__name__)


@dataclass
class HeadlessReport:
    """Outcome of an autoplay run."""

    duration_s: float
    frames: int = 0
    casts: int = 0
    catches: int = 0
    escapes: int = 0
    aborts: int = 0
    gold_value: int = 0
    rarity_counts: Counter = field(default_factory=Counter)
    clock_clamps: int = 0

    @property
    def catch_rate(self) -> float:
        resolved = self.catches + self.escapes
        return self.catches / resolved if resolved else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration_s": self.duration_s,
            "frames": self.frames,
            "casts": self.casts,
            "catches": self.catches,
            "escapes": self.escapes,
            "aborts": self.aborts,
            "catch_rate": round(self.catch_rate, 4),
            "gold_value": self.gold_value,
            "rarity_counts": dict(self.rarity_counts),
            "clock_clamps": self.clock_clamps,
        }


class AutoPlayer:
    """Casts whenever idle and answers QTE challenges after a reaction delay.

    With probability ``1 - accuracy`` an answer is a miss: a wrong key or a
    tap in an empty corner, both of which the QTE ignores.
    """

    def __init__(
        self,
        session: GameSession,
        reaction_ms: float = 250.0,
        accuracy: float = 0.9,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.session = session
        self.reaction_ms = reaction_ms
        self.accuracy = accuracy
        self._rng = require_rng_param(rng, "AutoPlayer.__init__")
        # (success_count, challenge) currently being answered and when it appeared
        self._seen: Optional[Tuple[int, Any]] = None
        self._seen_at = 0.0
        self._answered = False

    def step(self, now: float) -> None:
        session = self.session
        session.tick(now)
        snapshot = session.get_snapshot()

        if snapshot.phase is EncounterPhase.IDLE:
            session.cast()
            return

        qte = snapshot.qte
        if qte is None or qte.challenge is None:
            return

        key = (qte.success_count, qte.challenge)
        if key != self._seen:
            self._seen = key
            self._seen_at = snapshot.now
            self._answered = False
        if self._answered or snapshot.now - self._seen_at < self.reaction_ms:
            return

        self._answered = True
        hit = self._rng.random() < self.accuracy
        challenge = qte.challenge
        if isinstance(challenge, KeyPressChallenge):
            session.on_key_press(challenge.key if hit else self._wrong_key(challenge.key))
        elif isinstance(challenge, TapTargetChallenge):
            cfg = session.config.qte
            if hit:
                x, y = challenge.center(cfg.viewport_width, cfg.viewport_height)
            else:
                x, y = 0.0, 0.0
            session.on_tap(x, y)

    def _wrong_key(self, key: str) -> str:
        others = [k for k in QTE_KEYS if k != key]
        return self._rng.choice(others) if others else "Z"


def run_headless(
    duration_s: float = 60.0,
    seed: Optional[int] = None,
    reaction_ms: float = 250.0,
    accuracy: float = 0.9,
    modality: InputModality = InputModality.KEYBOARD,
    event: Optional[FishingEvent] = None,
    config: Optional[SessionConfig] = None,
) -> HeadlessReport:
    """Autoplay for ``duration_s`` simulated seconds and report what happened.

    Args:
        duration_s: Simulated play time
        seed: Seed for fish rolls, challenges and the player's misses
        reaction_ms: Delay before the player answers a challenge
        accuracy: Probability an answer is correct
        modality: Key-press or tap-target challenges
        event: Fishing event held active for the whole run
        config: Session configuration override
    """
    rng = random.Random(seed)
    session = GameSession(config=config, modality=modality, rng=rng, event_provider=lambda: event)
    player = AutoPlayer(session, reaction_ms=reaction_ms, accuracy=accuracy, rng=random.Random(rng.random()))
    report = HeadlessReport(duration_s=duration_s)

    def on_caught(caught: FishCaughtEvent) -> None:
        report.catches += 1
        report.gold_value += caught.fish.value
        report.rarity_counts[caught.fish.rarity] += 1

    def on_escaped(_: FishEscapedEvent) -> None:
        report.escapes += 1

    def on_aborted(_: EncounterAbortedEvent) -> None:
        report.aborts += 1

    session.event_bus.subscribe(FishCaughtEvent, on_caught)
    session.event_bus.subscribe(FishEscapedEvent, on_escaped)
    session.event_bus.subscribe(EncounterAbortedEvent, on_aborted)

    frame_ms = session.config.encounter.frame_ms
    total_frames = int(duration_s * 1000.0 / frame_ms)
    for frame in range(total_frames + 1):
        player.step(frame * frame_ms)

    report.frames = total_frames
    report.casts = session.encounter.state.casts
    report.clock_clamps = session.encounter.clock.clamp_count
    logger.info(
        "Headless run: %d casts, %d caught, %d escaped over %.0fs",
        report.casts,
        report.catches,
        report.escapes,
        duration_s,
    )
    return report


__all__ = ["AutoPlayer", "HeadlessReport", "run_headless"]
