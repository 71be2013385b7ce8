"""Quick-time events: challenges, input listeners and the countdown subsystem."""

from core.qte.challenges import (
    Challenge,
    ChallengeStrategy,
    InputModality,
    KeyPressChallenge,
    KeyPressStrategy,
    TapTargetChallenge,
    TapTargetStrategy,
    detect_modality,
    normalize_key,
    strategy_for,
)
from core.qte.listeners import InputRouter, Subscription
from core.qte.subsystem import QteOutcome, QteSnapshot, QteState, QteSubsystem

__all__ = [
    "Challenge",
    "ChallengeStrategy",
    "InputModality",
    "InputRouter",
    "KeyPressChallenge",
    "KeyPressStrategy",
    "QteOutcome",
    "QteSnapshot",
    "QteState",
    "QteSubsystem",
    "Subscription",
    "TapTargetChallenge",
    "TapTargetStrategy",
    "detect_modality",
    "normalize_key",
    "strategy_for",
]
