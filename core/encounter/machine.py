"""The fishing encounter state machine.

One encounter runs cast -> throw -> sink -> bite -> QTE -> reel, ending in a
catch, an escape or an external abort. Everything advances inside ``tick``:

    IDLE --cast()--> THROWING --800 ms--> SINKING --depth == max--> AWAITING_BITE
    AWAITING_BITE --500 ms bite--> REELING (gated, QTE running)
    REELING --QTE success--> REELING (active) --depth == 0--> IDLE   (catch)
    REELING --QTE failure--> COMPLETE --slack decays to 0--> IDLE    (escape)

Only ``cast()``, ``abort()`` and the QTE resolution callbacks are triggered
from outside a tick, and the QTE callbacks only record the outcome for the
reel step to apply. At most one phase transition happens per tick.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional, Tuple

from core.config.encounter import DEPTH_EPSILON
from core.config.session_config import EncounterConfig, QteConfig
from core.encounter.state import EncounterSnapshot, EncounterState
from core.events import (
    CastStartedEvent,
    EncounterAbortedEvent,
    EventBus,
    FishCaughtEvent,
    FishEscapedEvent,
    FishHookedEvent,
    PhaseChangedEvent,
    QteResolvedEvent,
)
from core.exceptions import CollaboratorError
from core.fish.descriptor import FishDescriptor
from core.fish.events import FishingEvent
from core.fish.generator import FishSource
from core.qte.challenges import InputModality, strategy_for
from core.qte.listeners import InputRouter
from core.qte.subsystem import QteState, QteSubsystem
from core.state_machine import EncounterPhase, create_encounter_state_machine
from core.timing import DeferredHandle, DeferredScheduler, FrameClock, throw_arc_height
from core.util.rng import require_rng_param

logger = logging.getLogger(__name__)


class EncounterMachine:
    """Owns the EncounterState and its nested QTE.

    Args:
        fish_source: Produces the fish when a bite happens
        config: Timing and depth parameters
        event_bus: Receives domain events; a private bus is created if omitted
        is_blocked: Returns True while a UI overlay forbids casting
        modality: Input modality for QTE challenges, fixed for the session
        rng: Session RNG used to pick challenges
        event_provider: Returns the fishing event active at bite time
        qte_config: QTE cadence and hit-test geometry
    """

    def __init__(
        self,
        fish_source: FishSource,
        config: Optional[EncounterConfig] = None,
        event_bus: Optional[EventBus] = None,
        is_blocked: Optional[Callable[[], bool]] = None,
        modality: InputModality = InputModality.KEYBOARD,
        rng: Optional[random.Random] = None,
        event_provider: Optional[Callable[[], Optional[FishingEvent]]] = None,
        qte_config: Optional[QteConfig] = None,
    ) -> None:
        self.config = config or EncounterConfig()
        self._fish_source = fish_source
        self._bus = event_bus or EventBus()
        self._is_blocked = is_blocked
        self._event_provider = event_provider
        rng = require_rng_param(rng, "EncounterMachine.__init__")

        self._clock = FrameClock(self.config.frame_ms, self.config.max_frame_gap_ms)
        self._scheduler = DeferredScheduler()
        self._fsm = create_encounter_state_machine(max_history=self.config.history_limit)
        self._state = EncounterState(max_depth=self.config.max_depth)

        qte_config = qte_config or QteConfig()
        self._router = InputRouter()
        self._qte = QteSubsystem(
            self._clock,
            self._router,
            strategy_for(modality, rng, qte_config.keys, qte_config.tap_locations),
            qte_config,
        )
        self._qte.bind(self.on_qte_success, self.on_qte_failure)

        self._bite_handle: Optional[DeferredHandle] = None
        # (success, successes, required) recorded by a QTE callback for the reel step
        self._pending_resolution: Optional[Tuple[bool, int, int]] = None
        self.reset_count = 0

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> EncounterState:
        return self._state

    @property
    def phase(self) -> EncounterPhase:
        return self._state.phase

    @property
    def now(self) -> float:
        return self._clock.now

    @property
    def clock(self) -> FrameClock:
        return self._clock

    @property
    def scheduler(self) -> DeferredScheduler:
        return self._scheduler

    @property
    def router(self) -> InputRouter:
        return self._router

    @property
    def qte(self) -> QteSubsystem:
        return self._qte

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def history(self):
        return self._fsm.history

    # ------------------------------------------------------------------
    # External triggers
    # ------------------------------------------------------------------

    def cast(self, now: Optional[float] = None) -> bool:
        """Start a new encounter.

        A no-op returning False unless the encounter is IDLE and no overlay
        blocks the scene. When ``now`` is given the clock is advanced to it
        first, so the throw starts at that sample.
        """
        if self._state.phase is not EncounterPhase.IDLE:
            logger.debug("Cast ignored: encounter is %s", self._state.phase.value)
            return False
        if self._is_blocked is not None and self._is_blocked():
            logger.debug("Cast ignored: an overlay is open")
            return False

        if now is not None:
            self._clock.advance(now)
        at = self._clock.now

        state = self._state
        state.clear_encounter()
        state.cast_started_at = at
        state.casts += 1
        self._enter(EncounterPhase.THROWING, at, "cast")
        logger.info("Cast #%d at %.1f ms", state.casts, at)
        self._bus.emit(CastStartedEvent(at=at))
        return True

    def abort(self, reason: str = "aborted") -> bool:
        """Reset to IDLE, cancelling the pending bite and any live QTE."""
        state = self._state
        if state.phase is EncounterPhase.IDLE:
            return False

        at = self._clock.now
        from_phase = state.phase
        self._cancel_pending()
        state.aborts += 1
        self._reset_to_idle(at, reason)
        logger.info("Encounter aborted from %s: %s", from_phase.value, reason)
        self._bus.emit(EncounterAbortedEvent(from_phase=from_phase, reason=reason, at=at))
        return True

    def on_key_press(self, key: str) -> bool:
        """Route a key to the live QTE. Returns True if it cleared a challenge."""
        return self._router.dispatch_key(key)

    def on_tap(self, x: float, y: float) -> bool:
        """Route a tap to the live QTE. Returns True if it cleared a challenge."""
        return self._router.dispatch_tap(x, y)

    def set_viewport(self, width: int, height: int) -> None:
        self._qte.set_viewport(width, height)

    def on_qte_success(self, qte_state: Optional[QteState] = None) -> None:
        self._record_resolution(True, qte_state)

    def on_qte_failure(self, qte_state: Optional[QteState] = None) -> None:
        self._record_resolution(False, qte_state)

    def _record_resolution(self, success: bool, qte_state: Optional[QteState]) -> None:
        state = self._state
        if (
            state.phase is not EncounterPhase.REELING
            or state.reel_started_at is not None
            or self._pending_resolution is not None
        ):
            logger.debug("Stale QTE resolution ignored in %s", state.phase.value)
            return
        successes = qte_state.success_count if qte_state is not None else 0
        required = qte_state.required_successes if qte_state is not None else 0
        self._pending_resolution = (success, successes, required)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, now: float) -> EncounterPhase:
        """Advance the encounter to the raw timestamp ``now`` (ms)."""
        at = self._clock.advance(now)
        phase_before = self._state.phase

        self._scheduler.run_due(at)

        if self._state.phase is phase_before:
            if phase_before is EncounterPhase.THROWING:
                self._step_throwing(at)
            elif phase_before is EncounterPhase.SINKING:
                self._step_sinking(at)
            elif phase_before is EncounterPhase.REELING:
                self._step_reeling(at)
            elif phase_before is EncounterPhase.COMPLETE:
                self._step_slack(at)

        self._advance_struggle()
        return self._state.phase

    def _step_throwing(self, at: float) -> None:
        state = self._state
        elapsed = at - state.cast_started_at
        progress = min(elapsed / self.config.throw_duration_ms, 1.0)
        state.bobber_throw_progress = max(state.bobber_throw_progress, progress)
        if state.bobber_throw_progress >= 1.0:
            state.cast_started_at = at
            state.line_depth = 0.0
            self._enter(EncounterPhase.SINKING, at, "splashdown")

    def _step_sinking(self, at: float) -> None:
        state = self._state
        cfg = self.config
        elapsed = at - state.cast_started_at
        state.set_depth(elapsed * cfg.sink_speed / cfg.frame_ms)
        if state.line_depth >= state.max_depth - DEPTH_EPSILON:
            state.line_depth = state.max_depth
            self._enter(EncounterPhase.AWAITING_BITE, at, "line at depth")
            self._bite_handle = self._scheduler.schedule(at + cfg.bite_delay_ms, self._bite, "bite")

    def _step_reeling(self, at: float) -> None:
        state = self._state
        self._qte.tick(at)

        resolution = self._pending_resolution
        if resolution is not None:
            self._pending_resolution = None
            success, successes, required = resolution
            self._bus.emit(QteResolvedEvent(success=success, successes=successes, required=required, at=at))
            if not success:
                self._escape(at)
                return
            state.reel_started_at = at
            state.reel_initial_depth = state.line_depth
            state.struggle_phase = 0.0
            logger.debug("Reeling in from depth %.1f", state.reel_initial_depth)

        if state.reel_started_at is None:
            return

        cfg = self.config
        elapsed = at - state.reel_started_at
        state.set_depth(state.reel_initial_depth - elapsed * cfg.reel_speed / cfg.frame_ms)
        if state.line_depth <= DEPTH_EPSILON:
            self._land(at)

    def _step_slack(self, at: float) -> None:
        state = self._state
        state.set_depth(state.line_depth - self.config.slack_step)
        if state.line_depth <= DEPTH_EPSILON:
            self._reset_to_idle(at, "line settled")

    def _advance_struggle(self) -> None:
        state = self._state
        if state.phase is EncounterPhase.REELING and state.current_fish is not None:
            state.struggle_phase += self.config.struggle_step * self._clock.frames()

    # ------------------------------------------------------------------
    # Deferred bite
    # ------------------------------------------------------------------

    def _bite(self) -> None:
        self._bite_handle = None
        state = self._state
        at = self._clock.now
        if state.phase is not EncounterPhase.AWAITING_BITE:
            logger.debug("Bite fired outside AWAITING_BITE, ignoring")
            return

        active_event = self._event_provider() if self._event_provider is not None else None
        try:
            fish = self._next_fish(active_event)
        except CollaboratorError:
            logger.exception("Fish generator failed; abandoning the cast")
            state.aborts += 1
            self._reset_to_idle(at, "fish generator failed")
            self._bus.emit(
                EncounterAbortedEvent(from_phase=EncounterPhase.AWAITING_BITE, reason="fish generator failed", at=at)
            )
            return

        state.current_fish = fish
        state.struggle_phase = 0.0
        self._enter(EncounterPhase.REELING, at, "bite")
        self._qte.start(fish)
        logger.info("Hooked a %s %s %s", fish.size, fish.rarity, fish.type)
        self._bus.emit(FishHookedEvent(fish=fish, at=at))

    def _next_fish(self, active_event: Optional[FishingEvent]) -> FishDescriptor:
        try:
            fish = self._fish_source.generate(active_event)
        except Exception as e:
            raise CollaboratorError(f"Fish source {type(self._fish_source).__name__} failed: {e}") from e
        if not isinstance(fish, FishDescriptor):
            raise CollaboratorError(f"Fish source returned {type(fish).__name__}, expected FishDescriptor")
        return fish

    # ------------------------------------------------------------------
    # Endings
    # ------------------------------------------------------------------

    def _land(self, at: float) -> None:
        state = self._state
        fish = state.current_fish
        state.catches += 1
        self._reset_to_idle(at, "caught")
        if fish is None:
            return
        logger.info("Caught %s %s worth %d", fish.rarity, fish.type, fish.value)
        self._bus.emit(FishCaughtEvent(fish=fish, at=at))

    def _escape(self, at: float) -> None:
        state = self._state
        fish = state.current_fish
        state.current_fish = None
        state.reel_started_at = None
        state.struggle_phase = 0.0
        state.escapes += 1
        self._enter(EncounterPhase.COMPLETE, at, "escaped")
        if fish is not None:
            logger.info("The %s %s got away", fish.rarity, fish.type)
            self._bus.emit(FishEscapedEvent(fish=fish, at=at))

    def _cancel_pending(self) -> None:
        self._scheduler.cancel_all()
        self._bite_handle = None
        self._qte.cancel()
        self._pending_resolution = None

    def _reset_to_idle(self, at: float, reason: str) -> None:
        self._cancel_pending()
        self._state.clear_encounter()
        self.reset_count += 1
        self._enter(EncounterPhase.IDLE, at, reason)

    def _enter(self, target: EncounterPhase, at: float, reason: str) -> None:
        from_phase = self._state.phase
        self._fsm.transition(target, at=at, reason=reason)
        self._state.phase = target
        logger.debug("Phase %s -> %s (%s) at %.1f ms", from_phase.value, target.value, reason, at)
        self._bus.emit(PhaseChangedEvent(from_phase=from_phase, to_phase=target, reason=reason, at=at))

    # ------------------------------------------------------------------
    # Rendering view
    # ------------------------------------------------------------------

    def get_snapshot(self) -> EncounterSnapshot:
        state = self._state
        throwing = state.phase is EncounterPhase.THROWING
        return EncounterSnapshot(
            phase=state.phase,
            now=self._clock.now,
            line_depth=state.line_depth,
            max_depth=state.max_depth,
            bobber_throw_progress=state.bobber_throw_progress,
            bobber_height=throw_arc_height(state.bobber_throw_progress) if throwing else 0.0,
            current_fish=state.current_fish,
            reel_active=state.reel_active,
            struggle_phase=state.struggle_phase,
            line_slack=state.line_slack,
            qte=self._qte.snapshot(),
        )
