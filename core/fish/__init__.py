"""Fish generation collaborator.

The encounter core only relies on the FishDescriptor contract, in particular
``qte_time`` and ``qte_required``, which set the difficulty of the bite.
"""

from core.fish.descriptor import FishDescriptor, FishType, RarityTier, SizeTier
from core.fish.events import FishingEvent, current_event, time_of_day
from core.fish.generator import FishGenerator, FishSource

__all__ = [
    "FishDescriptor",
    "FishGenerator",
    "FishSource",
    "FishType",
    "FishingEvent",
    "RarityTier",
    "SizeTier",
    "current_event",
    "time_of_day",
]
