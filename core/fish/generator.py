"""Weighted random fish generation."""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Protocol, Sequence, runtime_checkable

from core.config.fish import EVENT_SPECIAL_FISH_CHANCE
from core.config.session_config import validate_weight_table
from core.fish.descriptor import (
    ALL_FISH_TYPES,
    FISH_TYPES,
    RARITY_TIERS,
    SIZE_TIERS,
    FishDescriptor,
    FishType,
    RarityTier,
    SizeTier,
)
from core.fish.events import FishingEvent
from core.util.rng import require_rng_param, weighted_pick

logger = logging.getLogger(__name__)


@runtime_checkable
class FishSource(Protocol):
    """Anything that can produce the fish for a bite."""

    def generate(self, active_event: Optional[FishingEvent] = None) -> FishDescriptor:
        ...


class FishGenerator:
    """Rolls rarity, type and size for each bite.

    Rarity and size are chosen by a cumulative weighted roll over fixed
    tables. During an event there is a fixed chance the fish is swapped for
    one of the event's special fish.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        rarities: Sequence[RarityTier] = RARITY_TIERS,
        sizes: Sequence[SizeTier] = SIZE_TIERS,
        event_chance: float = EVENT_SPECIAL_FISH_CHANCE,
    ) -> None:
        self._rng = require_rng_param(rng, "FishGenerator.__init__")
        self._rarities = tuple(rarities)
        self._sizes = tuple(sizes)
        validate_weight_table("rarity", [tier.chance for tier in self._rarities])
        validate_weight_table("size", [tier.chance for tier in self._sizes])
        self._event_chance = event_chance

    def roll_rarity(self) -> RarityTier:
        return weighted_pick(self._rng, self._rarities, lambda tier: tier.chance)

    def roll_size(self) -> SizeTier:
        return weighted_pick(self._rng, self._sizes, lambda tier: tier.chance)

    def pick_type(self, rarity: RarityTier, active_event: Optional[FishingEvent]) -> FishType:
        roster = FISH_TYPES.get(rarity.name) or FISH_TYPES["Common"]
        if active_event is not None and self._rng.random() < self._event_chance:
            special = [t for t in roster if active_event.features(t.name)]
            if not special:
                special = [t for t in ALL_FISH_TYPES if active_event.features(t.name)]
            if special:
                return special[0]
        return self._rng.choice(roster)

    def generate(self, active_event: Optional[FishingEvent] = None) -> FishDescriptor:
        rarity = self.roll_rarity()
        fish_type = self.pick_type(rarity, active_event)
        size = self.roll_size()

        event_multiplier = active_event.multiplier if active_event is not None else 1.0
        value = math.floor(fish_type.base_value * rarity.multiplier * size.multiplier * event_multiplier)

        fish = FishDescriptor(
            type=fish_type.name,
            rarity=rarity.name,
            size=size.name,
            value=value,
            qte_time=rarity.qte_time,
            qte_required=rarity.qte_required,
            color=fish_type.color,
            rarity_color=rarity.color,
            design_style=fish_type.design_style,
            is_event_fish=active_event is not None and active_event.features(fish_type.name),
        )
        logger.debug("Generated %s %s %s worth %d", fish.size, fish.rarity, fish.type, fish.value)
        return fish
