"""Value types describing fish, rarity tiers and size tiers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

from core.config.fish import FISH_ROSTER, RARITY_TABLE, SIZE_TABLE


@dataclass(frozen=True)
class RarityTier:
    """A rarity class with its spawn chance, value multiplier and QTE difficulty.

    Attributes:
        name: Display name ("Common" ... "Universal")
        multiplier: Value multiplier applied to the fish's base value
        chance: Spawn probability
        qte_time: Seconds allowed per QTE challenge
        qte_required: Number of challenges that must be cleared
        color: Display color
    """

    name: str
    multiplier: float
    chance: float
    qte_time: float
    qte_required: int
    color: str


@dataclass(frozen=True)
class SizeTier:
    name: str
    multiplier: float
    chance: float


@dataclass(frozen=True)
class FishType:
    name: str
    base_value: int
    color: str
    design_style: str = "default"


@dataclass(frozen=True)
class FishDescriptor:
    """A generated fish, as hooked, caught and sold.

    ``qte_time`` and ``qte_required`` drive the quick-time event that decides
    whether the fish is landed.
    """

    type: str
    rarity: str
    size: str
    value: int
    qte_time: float
    qte_required: int
    color: str = "#ffffff"
    rarity_color: str = "#95a5a6"
    design_style: str = "default"
    is_event_fish: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FishDescriptor":
        """Rebuild a fish from saved data.

        Saves that predate the QTE fields take them from the fish's rarity
        tier (Common if the rarity is unknown). Missing identity fields raise
        TypeError.
        """
        fields = {key: data[key] for key in cls.__dataclass_fields__ if key in data}
        if "qte_time" not in fields or "qte_required" not in fields:
            tier = next((t for t in RARITY_TIERS if t.name == fields.get("rarity")), RARITY_TIERS[0])
            fields.setdefault("qte_time", tier.qte_time)
            fields.setdefault("qte_required", tier.qte_required)
        return cls(**fields)


RARITY_TIERS: Tuple[RarityTier, ...] = tuple(RarityTier(*row) for row in RARITY_TABLE)
SIZE_TIERS: Tuple[SizeTier, ...] = tuple(SizeTier(*row) for row in SIZE_TABLE)
FISH_TYPES: Dict[str, Tuple[FishType, ...]] = {
    rarity: tuple(FishType(*row) for row in rows) for rarity, rows in FISH_ROSTER.items()
}
ALL_FISH_TYPES: Tuple[FishType, ...] = tuple(t for types in FISH_TYPES.values() for t in types)


def rarity_by_name(name: str) -> RarityTier:
    for tier in RARITY_TIERS:
        if tier.name == name:
            return tier
    raise KeyError(f"Unknown rarity: {name}")
