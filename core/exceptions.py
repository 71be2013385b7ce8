"""Tidecaster exception hierarchy.

Centralised base classes so callers can catch narrowly. Gameplay input that
arrives in the wrong phase is never an exception; these are reserved for
programming errors, bad configuration and collaborator failures.
"""


class FishingError(Exception):
    """Root of all Tidecaster domain exceptions."""


class EncounterError(FishingError):
    """Errors raised by the encounter state machine."""


class QteError(FishingError):
    """Errors in the quick-time-event subsystem."""


class ListenerError(QteError):
    """An input listener was registered or released out of order."""


class ConfigurationError(FishingError):
    """Invalid or missing configuration."""


class CollaboratorError(FishingError):
    """A consumed collaborator (fish generator, notifier) misbehaved."""


class EconomyError(FishingError):
    """Errors in inventory and gold bookkeeping."""


class TransitionError(EncounterError, ValueError):
    """A phase change that is not an edge of the phase table."""
