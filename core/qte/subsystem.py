"""Quick-time-event subsystem.

A QTE is a nested state machine activated when a fish bites. The player
must clear ``required_successes`` challenges, each within ``max_time``
seconds. The countdown advances in fixed steps on the session clock; on
every step both exits are checked, success first, so an activation ends
exactly once.

Lifecycle of one activation:
    start(fish)      -> fresh QteState, first challenge, input listener attached
    handle_key/tap   -> matching input counts a success, re-prompts after a pause
    tick(now)        -> countdown; resolves success or failure
    cancel()         -> external reset; returns CANCELLED without a callback

Cleanup (deactivate, release the listener, drop the state) always happens
before the resolution callback runs, so a stale listener can never fire into
the next encounter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from core.config.session_config import QteConfig
from core.fish.descriptor import FishDescriptor
from core.qte.challenges import (
    Challenge,
    ChallengeStrategy,
    InputModality,
    KeyPressChallenge,
    TapTargetChallenge,
    is_reserved_key,
)
from core.qte.listeners import InputRouter, Subscription
from core.timing import FrameClock

logger = logging.getLogger(__name__)


class QteOutcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


@dataclass
class QteState:
    """State of one QTE activation. Never reused across bites.

    Attributes:
        fish: The hooked fish whose rarity set the difficulty
        required_successes: Challenges to clear
        success_count: Challenges cleared so far (never exceeds required)
        max_time: Seconds allowed per challenge
        time_remaining: Seconds left on the current challenge
        current_challenge: Live challenge, None during the re-prompt pause
        prompt_due_at: Session time the next challenge appears, if pending
        next_countdown_at: Session time of the next countdown step
    """

    fish: FishDescriptor
    required_successes: int
    max_time: float
    time_remaining: float
    started_at: float
    next_countdown_at: float
    success_count: int = 0
    current_challenge: Optional[Challenge] = None
    prompt_due_at: Optional[float] = None
    active: bool = True

    @property
    def time_fraction(self) -> float:
        if self.max_time <= 0:
            return 0.0
        return max(0.0, min(1.0, self.time_remaining / self.max_time))

    @property
    def complete(self) -> bool:
        return self.success_count >= self.required_successes


@dataclass(frozen=True)
class QteSnapshot:
    """Read-only view of a live QTE for rendering."""

    challenge: Optional[Challenge]
    time_remaining: float
    max_time: float
    time_fraction: float
    success_count: int
    required_successes: int
    awaiting_prompt: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "challenge": self.challenge.to_dict() if self.challenge is not None else None,
            "time_remaining": self.time_remaining,
            "max_time": self.max_time,
            "time_fraction": self.time_fraction,
            "success_count": self.success_count,
            "required_successes": self.required_successes,
            "awaiting_prompt": self.awaiting_prompt,
        }


class QteSubsystem:
    """Runs quick-time events against the session clock."""

    def __init__(
        self,
        clock: FrameClock,
        router: InputRouter,
        strategy: ChallengeStrategy,
        config: Optional[QteConfig] = None,
        on_success: Optional[Callable[[QteState], None]] = None,
        on_failure: Optional[Callable[[QteState], None]] = None,
    ) -> None:
        self._clock = clock
        self._router = router
        self._strategy = strategy
        self.config = config or QteConfig()
        self._on_success = on_success
        self._on_failure = on_failure
        self._state: Optional[QteState] = None
        self._subscription: Optional[Subscription] = None
        self.activations = 0
        self.resolutions = 0

    @property
    def modality(self) -> InputModality:
        return self._strategy.modality

    @property
    def active(self) -> bool:
        return self._state is not None and self._state.active

    @property
    def state(self) -> Optional[QteState]:
        return self._state

    def bind(
        self,
        on_success: Callable[[QteState], None],
        on_failure: Callable[[QteState], None],
    ) -> None:
        """Attach resolution callbacks (the encounter machine's handlers)."""
        self._on_success = on_success
        self._on_failure = on_failure

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def start(self, fish: FishDescriptor) -> bool:
        """Begin a QTE for ``fish``. A no-op returning False if one is running."""
        if self.active:
            logger.debug("QTE already active, ignoring duplicate start")
            return False

        now = self._clock.now
        state = QteState(
            fish=fish,
            required_successes=max(1, int(fish.qte_required)),
            max_time=float(fish.qte_time),
            time_remaining=float(fish.qte_time),
            started_at=now,
            next_countdown_at=now + self.config.countdown_interval_ms,
        )
        state.current_challenge = self._strategy.next_challenge()
        self._state = state

        if self.modality is InputModality.TOUCH:
            self._subscription = self._router.subscribe(InputModality.TOUCH, self.handle_tap)
        else:
            self._subscription = self._router.subscribe(InputModality.KEYBOARD, self.handle_key)

        self.activations += 1
        logger.info(
            "QTE started for %s %s: %d challenge(s), %.2fs each",
            fish.rarity,
            fish.type,
            state.required_successes,
            state.max_time,
        )
        return True

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------

    def tick(self, now: float) -> Optional[QteOutcome]:
        """Advance prompts and the countdown to ``now``.

        Returns:
            The outcome if the QTE resolved during this call, else None
        """
        state = self._state
        if state is None:
            return None

        if state.prompt_due_at is not None and now >= state.prompt_due_at:
            state.prompt_due_at = None
            state.current_challenge = self._strategy.next_challenge()

        interval = self.config.countdown_interval_ms
        step = self.config.countdown_step_s
        while now >= state.next_countdown_at:
            state.next_countdown_at += interval
            state.time_remaining = max(0.0, round(state.time_remaining - step, 6))
            if state.complete:
                return self._resolve(QteOutcome.SUCCESS)
            if state.time_remaining <= 0:
                return self._resolve(QteOutcome.FAILURE)
        return None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Key listener. Reserved keys and mismatches are ignored without penalty."""
        state = self._state
        if state is None or not state.active or is_reserved_key(key):
            return False
        challenge = state.current_challenge
        if not isinstance(challenge, KeyPressChallenge) or not challenge.matches(key):
            return False
        self._register_success(state)
        return True

    def handle_tap(self, x: float, y: float) -> bool:
        """Tap listener. Taps outside the target are ignored without penalty."""
        state = self._state
        if state is None or not state.active:
            return False
        challenge = state.current_challenge
        if not isinstance(challenge, TapTargetChallenge):
            return False
        cfg = self.config
        if not challenge.contains(x, y, cfg.viewport_width, cfg.viewport_height, cfg.tap_target_size):
            return False
        self._register_success(state)
        return True

    def set_viewport(self, width: int, height: int) -> None:
        self.config.viewport_width = width
        self.config.viewport_height = height

    def _register_success(self, state: QteState) -> None:
        state.success_count += 1
        state.current_challenge = None
        if state.success_count < state.required_successes:
            state.time_remaining = state.max_time
            state.prompt_due_at = self._clock.now + self.config.reprompt_delay_ms
        else:
            # Nothing left to answer; the countdown reports success on its next step
            self._release_listener()
        logger.debug("QTE challenge cleared (%d/%d)", state.success_count, state.required_successes)

    # ------------------------------------------------------------------
    # Exit paths
    # ------------------------------------------------------------------

    def cancel(self) -> Optional[QteOutcome]:
        """Tear down a live QTE without running a callback.

        Returns CANCELLED, or None if no QTE was running.
        """
        if self._state is None:
            return None
        self._teardown()
        logger.info("QTE cancelled")
        return QteOutcome.CANCELLED

    def _resolve(self, outcome: QteOutcome) -> QteOutcome:
        state = self._teardown()
        self.resolutions += 1
        logger.info(
            "QTE %s (%d/%d)",
            outcome.value,
            state.success_count,
            state.required_successes,
        )
        callback = self._on_success if outcome is QteOutcome.SUCCESS else self._on_failure
        if callback is not None:
            callback(state)
        return outcome

    def _teardown(self) -> QteState:
        state = self._state
        assert state is not None
        state.active = False
        state.current_challenge = None
        state.prompt_due_at = None
        self._release_listener()
        self._state = None
        return state

    def _release_listener(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def snapshot(self) -> Optional[QteSnapshot]:
        state = self._state
        if state is None:
            return None
        return QteSnapshot(
            challenge=state.current_challenge,
            time_remaining=state.time_remaining,
            max_time=state.max_time,
            time_fraction=state.time_fraction,
            success_count=state.success_count,
            required_successes=state.required_successes,
            awaiting_prompt=state.prompt_due_at is not None,
        )
