"""Fishing encounter: phase state, snapshot and the tick-driven machine."""

from core.encounter.machine import EncounterMachine
from core.encounter.state import EncounterSnapshot, EncounterState

__all__ = ["EncounterMachine", "EncounterSnapshot", "EncounterState"]
