"""Tests for the generic state machine and the encounter phase table."""

from enum import Enum

import pytest

from core.exceptions import TransitionError
from core.state_machine import (
    ENCOUNTER_TRANSITIONS,
    EncounterPhase,
    StateMachine,
    create_encounter_state_machine,
)


class DoorState(Enum):
    OPEN = "open"
    CLOSED = "closed"


def test_unknown_initial_state_is_rejected() -> None:
    with pytest.raises(TransitionError):
        StateMachine(DoorState.OPEN, {DoorState.CLOSED: [DoorState.OPEN]})


def test_try_transition_returns_err_for_missing_edge() -> None:
    door = StateMachine(DoorState.CLOSED, {DoorState.CLOSED: [DoorState.OPEN], DoorState.OPEN: [DoorState.CLOSED]})

    result = door.try_transition(DoorState.CLOSED)

    assert result.is_err()
    assert "CLOSED -> CLOSED" in result.error
    assert door.state is DoorState.CLOSED


def test_transition_raises_for_missing_edge() -> None:
    machine = create_encounter_state_machine()
    with pytest.raises(TransitionError):
        machine.transition(EncounterPhase.REELING)


def test_history_records_time_and_reason() -> None:
    machine = create_encounter_state_machine()
    machine.transition(EncounterPhase.THROWING, at=12.5, reason="cast")

    (record,) = machine.history
    assert record.from_state is EncounterPhase.IDLE
    assert record.to_state is EncounterPhase.THROWING
    assert record.at == 12.5
    assert record.reason == "cast"


def test_history_is_bounded() -> None:
    machine = create_encounter_state_machine(max_history=4)
    for i in range(10):
        machine.transition(EncounterPhase.THROWING, at=float(i))
        machine.transition(EncounterPhase.IDLE, at=float(i))
    assert len(machine.history) == 4


def test_force_state_bypasses_validation() -> None:
    machine = create_encounter_state_machine()
    machine.force_state(EncounterPhase.REELING, reason="restore")
    assert machine.state is EncounterPhase.REELING
    assert machine.history[-1].reason == "[FORCED] restore"


class TestEncounterTable:
    def test_every_phase_has_an_entry(self) -> None:
        assert set(ENCOUNTER_TRANSITIONS) == set(EncounterPhase)

    def test_every_active_phase_can_reset_to_idle(self) -> None:
        for phase in EncounterPhase:
            if phase is not EncounterPhase.IDLE:
                assert EncounterPhase.IDLE in ENCOUNTER_TRANSITIONS[phase]

    def test_idle_only_leads_to_throwing(self) -> None:
        assert ENCOUNTER_TRANSITIONS[EncounterPhase.IDLE] == [EncounterPhase.THROWING]

    def test_forward_path(self) -> None:
        machine = create_encounter_state_machine()
        for phase in (
            EncounterPhase.THROWING,
            EncounterPhase.SINKING,
            EncounterPhase.AWAITING_BITE,
            EncounterPhase.REELING,
            EncounterPhase.COMPLETE,
            EncounterPhase.IDLE,
        ):
            assert machine.try_transition(phase).is_ok()

    def test_phases_cannot_be_skipped(self) -> None:
        machine = create_encounter_state_machine()
        machine.transition(EncounterPhase.THROWING)
        assert not machine.can_transition(EncounterPhase.AWAITING_BITE)
        assert not machine.can_transition(EncounterPhase.REELING)
