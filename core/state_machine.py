"""Explicit phase tables for the encounter.

The encounter's phases and the edges between them are enumerated up front.
Asking for an edge that is not in the table is a wiring bug and fails
immediately; the encounter never "repairs" its way into a phase.

Usage:
------
    fsm = create_encounter_state_machine()
    fsm.transition(EncounterPhase.THROWING, at=0.0, reason="cast")
    fsm.try_transition(EncounterPhase.REELING)  # Err: THROWING -> REELING is not an edge
    fsm.history[-1].reason  # "cast"
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, Generic, List, Mapping, Sequence, TypeVar

from core.exceptions import TransitionError
from core.result import Err, Ok, Result

S = TypeVar("S", bound=Enum)


@dataclass(frozen=True)
class StateTransition(Generic[S]):
    """One recorded phase change.

    Attributes:
        from_state: Phase left
        to_state: Phase entered
        at: Session time (ms) of the change
        reason: What caused it ("cast", "bite", "caught", ...)
    """

    from_state: S
    to_state: S
    at: float
    reason: str = ""


class StateMachine(Generic[S]):
    """Current phase plus the table of legal edges out of each phase.

    Args:
        initial_state: Starting phase; must appear in ``valid_transitions``
        valid_transitions: Phase -> phases reachable from it
        track_history: Keep a bounded log of transitions
        max_history: Oldest entries are dropped past this many
    """

    def __init__(
        self,
        initial_state: S,
        valid_transitions: Mapping[S, Sequence[S]],
        track_history: bool = False,
        max_history: int = 100,
    ) -> None:
        if initial_state not in valid_transitions:
            raise TransitionError(f"Initial state {initial_state.name} has no entry in the transition table")
        self._state = initial_state
        self._transitions = {source: tuple(targets) for source, targets in valid_transitions.items()}
        self._track_history = track_history
        self._history: Deque[StateTransition[S]] = deque(maxlen=max_history)

    @property
    def state(self) -> S:
        return self._state

    @property
    def history(self) -> List[StateTransition[S]]:
        """Recorded transitions, oldest first (empty if tracking is off)."""
        return list(self._history)

    def can_transition(self, target: S) -> bool:
        return target in self._transitions.get(self._state, ())

    def get_valid_transitions(self) -> List[S]:
        return list(self._transitions.get(self._state, ()))

    def try_transition(self, target: S, at: float = 0.0, reason: str = "") -> Result[S, str]:
        """Move to ``target`` if the edge exists.

        Returns:
            Ok(target), or Err(message) naming the legal targets
        """
        if not self.can_transition(target):
            legal = ", ".join(t.name for t in self.get_valid_transitions()) or "none"
            return Err(f"Invalid transition: {self._state.name} -> {target.name} (legal: {legal})")
        self._move(target, at, reason)
        return Ok(target)

    def transition(self, target: S, at: float = 0.0, reason: str = "") -> S:
        """Like try_transition(), but a missing edge raises TransitionError."""
        result = self.try_transition(target, at, reason)
        if result.is_err():
            raise TransitionError(result.error)
        return result.unwrap()

    def force_state(self, state: S, at: float = 0.0, reason: str = "forced") -> None:
        """Jump to ``state`` without checking the table (tests and restores only)."""
        self._move(state, at, f"[FORCED] {reason}")

    def _move(self, target: S, at: float, reason: str) -> None:
        previous = self._state
        self._state = target
        if self._track_history:
            self._history.append(StateTransition(previous, target, at, reason))

    def __repr__(self) -> str:
        return f"StateMachine(state={self._state.name})"


class EncounterPhase(Enum):
    """Phases of one cast-to-resolution encounter.

    Exactly one phase is active at a time. COMPLETE is the settling phase
    after a lost fish, while the slack line drifts back to the surface.
    """

    IDLE = "idle"
    THROWING = "throwing"
    SINKING = "sinking"
    AWAITING_BITE = "awaiting_bite"
    REELING = "reeling"
    COMPLETE = "complete"


# Every phase may drop back to IDLE (catch, or an explicit abort)
ENCOUNTER_TRANSITIONS: Dict[EncounterPhase, List[EncounterPhase]] = {
    EncounterPhase.IDLE: [EncounterPhase.THROWING],
    EncounterPhase.THROWING: [EncounterPhase.SINKING, EncounterPhase.IDLE],
    EncounterPhase.SINKING: [EncounterPhase.AWAITING_BITE, EncounterPhase.IDLE],
    EncounterPhase.AWAITING_BITE: [EncounterPhase.REELING, EncounterPhase.IDLE],
    EncounterPhase.REELING: [EncounterPhase.COMPLETE, EncounterPhase.IDLE],
    EncounterPhase.COMPLETE: [EncounterPhase.IDLE],
}


def create_encounter_state_machine(
    track_history: bool = True, max_history: int = 50
) -> StateMachine[EncounterPhase]:
    """Create a state machine for encounter phases, starting IDLE."""
    return StateMachine(
        initial_state=EncounterPhase.IDLE,
        valid_transitions=ENCOUNTER_TRANSITIONS,
        track_history=track_history,
        max_history=max_history,
    )
