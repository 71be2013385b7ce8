"""Frame clock and deferred actions for the tick-driven encounter.

Everything time-based in the encounter runs on a *virtual* session clock.
The render loop feeds raw wall-clock samples to ``FrameClock.advance``; the
clock accepts ordinary frame-to-frame deltas and replaces anomalies (time
going backwards, a tab suspended for minutes, NaN) with one nominal frame.
Phase timestamps are stamped in virtual time, so an anomaly can never push
progress or depth past a phase boundary in a single step.

Deferred work (the bite delay, for instance) is stored as a due timestamp and
fired from inside the tick that reaches it, never from an independent timer.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from core.config.encounter import FRAME_MS, MAX_FRAME_GAP_FRAMES

logger = logging.getLogger(__name__)


class FrameClock:
    """Converts raw timestamps into a clamped, monotonic virtual time.

    Attributes:
        now: Current virtual time in milliseconds.
        last_delta: Delta (ms) accepted by the most recent advance().
        clamp_count: How many samples have been replaced by a nominal frame.
    """

    def __init__(self, frame_ms: float = FRAME_MS, max_gap_ms: Optional[float] = None) -> None:
        self.frame_ms = frame_ms
        self.max_gap_ms = max_gap_ms if max_gap_ms is not None else frame_ms * MAX_FRAME_GAP_FRAMES
        self.now: float = 0.0
        self.last_delta: float = 0.0
        self.clamp_count: int = 0
        self._last_sample: Optional[float] = None

    @property
    def started(self) -> bool:
        return self._last_sample is not None

    @property
    def last_sample(self) -> Optional[float]:
        """The most recent raw timestamp accepted, or None before the first."""
        return self._last_sample

    def advance(self, sample: float) -> float:
        """Feed a raw timestamp (ms) and return the new virtual time.

        The first sample only establishes the baseline. A repeated sample
        advances nothing.
        """
        if self._last_sample is None:
            if not math.isnan(sample):
                self._last_sample = sample
            self.last_delta = 0.0
            return self.now

        delta = sample - self._last_sample
        if not math.isnan(sample):
            self._last_sample = sample

        if math.isnan(delta) or delta < 0 or delta > self.max_gap_ms:
            logger.debug("Clock anomaly (delta=%s ms), substituting one frame", delta)
            self.clamp_count += 1
            delta = self.frame_ms

        self.last_delta = delta
        self.now += delta
        return self.now

    def frames(self, delta_ms: Optional[float] = None) -> float:
        """Express a delta (default: the last one) in nominal frames."""
        if delta_ms is None:
            delta_ms = self.last_delta
        return frames_between(delta_ms, self.frame_ms)


def frames_between(delta_ms: float, frame_ms: float = FRAME_MS) -> float:
    """Number of nominal frames in ``delta_ms``."""
    return delta_ms / frame_ms


def throw_arc_height(progress: float) -> float:
    """Normalised height of the bobber along its throw arc (0 at both ends)."""
    progress = min(max(progress, 0.0), 1.0)
    return math.sin(math.pi * progress)


@dataclass
class DeferredHandle:
    """A scheduled action. Cancelling it guarantees it never fires."""

    due_at: float
    callback: Callable[[], None]
    label: str = ""
    cancelled: bool = False
    fired: bool = False
    sequence: int = field(default=0, compare=False)

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Cancel if still pending. Returns True if this call cancelled it."""
        if not self.pending:
            return False
        self.cancelled = True
        return True


class DeferredScheduler:
    """Timestamp-ordered deferred actions fired from inside a tick."""

    def __init__(self) -> None:
        self._handles: List[DeferredHandle] = []
        self._sequence = 0

    def schedule(self, due_at: float, callback: Callable[[], None], label: str = "") -> DeferredHandle:
        self._sequence += 1
        handle = DeferredHandle(due_at=due_at, callback=callback, label=label, sequence=self._sequence)
        self._handles.append(handle)
        logger.debug("Scheduled %s at %.1f ms", label or "action", due_at)
        return handle

    def cancel(self, handle: Optional[DeferredHandle]) -> bool:
        if handle is None:
            return False
        cancelled = handle.cancel()
        self._prune()
        return cancelled

    def cancel_all(self) -> int:
        """Cancel every pending action. Returns how many were cancelled."""
        count = sum(1 for handle in self._handles if handle.cancel())
        self._handles.clear()
        if count:
            logger.debug("Cancelled %d deferred action(s)", count)
        return count

    def run_due(self, now: float) -> int:
        """Fire every pending action with ``due_at <= now`` in due order.

        Actions scheduled by a firing callback are not run in the same pass.
        """
        due = sorted(
            (h for h in self._handles if h.pending and h.due_at <= now),
            key=lambda h: (h.due_at, h.sequence),
        )
        fired = 0
        for handle in due:
            # An earlier callback in this pass may have cancelled it
            if not handle.pending:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        self._prune()
        return fired

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self._handles if h.pending)

    def _prune(self) -> None:
        self._handles = [h for h in self._handles if h.pending]
