"""A play session: one encounter plus the player's gold and backpack.

The session wires the encounter machine to its surroundings. Overlays block
casting, caught fish land in the inventory, and catch notifiers hear about
every catch. Selling and buying back are the only economy operations;
both return a Result because a refused sale is an ordinary outcome.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from core.config.session_config import SessionConfig
from core.encounter import EncounterMachine, EncounterSnapshot
from core.events import EventBus, FishCaughtEvent
from core.exceptions import EconomyError
from core.fish.descriptor import FishDescriptor
from core.fish.events import FishingEvent, current_event
from core.fish.generator import FishGenerator, FishSource
from core.notifiers import CatchNotifier
from core.qte.challenges import InputModality
from core.result import Err, Ok, Result
from core.state_machine import EncounterPhase
from core.util.rng import require_rng_param

logger = logging.getLogger(__name__)


class Overlay(Enum):
    INVENTORY = "inventory"
    SHOP = "shop"


class GameSession:
    """Everything one player needs to fish.

    Attributes:
        gold: Gold on hand
        fish_count: Fish caught over the session's lifetime
        inventory: Caught fish not yet sold
        buyback: The last fish sold, which can be bought back at its value
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        modality: InputModality = InputModality.KEYBOARD,
        rng: Optional[random.Random] = None,
        fish_source: Optional[FishSource] = None,
        notifiers: Optional[Iterable[CatchNotifier]] = None,
        event_provider: Optional[Callable[[], Optional[FishingEvent]]] = current_event,
    ) -> None:
        self.config = (config or SessionConfig()).validate()
        self.rng = require_rng_param(rng, "GameSession.__init__")
        self.modality = modality
        self.fish_source = fish_source if fish_source is not None else FishGenerator(self.rng)
        self.notifiers: List[CatchNotifier] = list(notifiers or [])

        self.gold = self.config.starting_gold
        self.fish_count = 0
        self.inventory: List[FishDescriptor] = []
        self.buyback: Optional[FishDescriptor] = None
        self._overlays: Set[Overlay] = set()

        self.event_bus = EventBus()
        self.event_bus.subscribe(FishCaughtEvent, self._on_fish_caught)
        self.encounter = EncounterMachine(
            self.fish_source,
            config=self.config.encounter,
            event_bus=self.event_bus,
            is_blocked=self.is_blocked,
            modality=modality,
            rng=self.rng,
            event_provider=event_provider,
            qte_config=self.config.qte,
        )

    # ------------------------------------------------------------------
    # Encounter passthrough
    # ------------------------------------------------------------------

    @property
    def phase(self) -> EncounterPhase:
        return self.encounter.phase

    def cast(self, now: Optional[float] = None) -> bool:
        return self.encounter.cast(now)

    def tick(self, now: float) -> EncounterPhase:
        return self.encounter.tick(now)

    def on_key_press(self, key: str) -> bool:
        return self.encounter.on_key_press(key)

    def on_tap(self, x: float, y: float) -> bool:
        return self.encounter.on_tap(x, y)

    def abort(self, reason: str = "aborted") -> bool:
        return self.encounter.abort(reason)

    def get_snapshot(self) -> EncounterSnapshot:
        return self.encounter.get_snapshot()

    def set_viewport(self, width: int, height: int) -> None:
        self.encounter.set_viewport(width, height)

    def add_notifier(self, notifier: CatchNotifier) -> None:
        self.notifiers.append(notifier)

    # ------------------------------------------------------------------
    # Overlays
    # ------------------------------------------------------------------

    def is_blocked(self) -> bool:
        return bool(self._overlays)

    def is_open(self, overlay: Overlay) -> bool:
        return overlay in self._overlays

    def open_overlay(self, overlay: Overlay) -> None:
        self._overlays.add(overlay)

    def close_overlay(self, overlay: Overlay) -> None:
        self._overlays.discard(overlay)

    def toggle_overlay(self, overlay: Overlay) -> bool:
        """Flip an overlay. Returns True if it is now open."""
        if overlay in self._overlays:
            self._overlays.discard(overlay)
            return False
        self._overlays.add(overlay)
        return True

    @property
    def open_overlays(self) -> List[Overlay]:
        return sorted(self._overlays, key=lambda o: o.value)

    # ------------------------------------------------------------------
    # Catches
    # ------------------------------------------------------------------

    def _on_fish_caught(self, event: FishCaughtEvent) -> None:
        self.fish_count += 1
        self.inventory.append(event.fish)
        for notifier in list(self.notifiers):
            try:
                notifier.on_fish_caught(event.fish)
            except Exception:
                logger.exception("Catch notifier %r failed", notifier)

    # ------------------------------------------------------------------
    # Economy
    # ------------------------------------------------------------------

    def sell_fish(self, index: int) -> Result[int, str]:
        """Sell the fish at ``index``. Ok carries the gold earned."""
        if not 0 <= index < len(self.inventory):
            return Err(f"No fish at backpack slot {index}")
        fish = self.inventory.pop(index)
        self.gold += fish.value
        self.buyback = fish
        logger.info("Sold %s %s for %dG", fish.rarity, fish.type, fish.value)
        return Ok(fish.value)

    def buyback_fish(self) -> Result[FishDescriptor, str]:
        """Buy the last sold fish back at the price it fetched."""
        fish = self.buyback
        if fish is None:
            return Err("No fish in buyback")
        if self.gold < fish.value:
            return Err(f"Not enough gold: need {fish.value}G, have {self.gold}G")
        self.gold -= fish.value
        self.inventory.append(fish)
        self.buyback = None
        logger.info("Bought back %s %s for %dG", fish.rarity, fish.type, fish.value)
        return Ok(fish)

    def inventory_value(self) -> int:
        return sum(fish.value for fish in self.inventory)

    # ------------------------------------------------------------------
    # Persistence payload
    # ------------------------------------------------------------------

    def to_save_data(self) -> Dict[str, Any]:
        return {
            "gold": self.gold,
            "fishCount": self.fish_count,
            "inventory": [fish.to_dict() for fish in self.inventory],
            "buyback": self.buyback.to_dict() if self.buyback is not None else None,
        }

    def load_save_data(self, data: Dict[str, Any]) -> None:
        """Restore gold and backpack.

        Missing top-level keys fall back to empty values and fish saved
        without QTE fields take them from their rarity. Anything else that
        cannot be read raises EconomyError and leaves the session unchanged.
        """
        try:
            gold = int(data.get("gold") or 0)
            fish_count = int(data.get("fishCount") or 0)
            inventory = [FishDescriptor.from_dict(item) for item in data.get("inventory") or []]
            buyback = data.get("buyback")
            buyback_fish = FishDescriptor.from_dict(buyback) if buyback else None
        except (TypeError, ValueError) as e:
            raise EconomyError(f"Unreadable save data: {e}") from e
        if gold < 0 or fish_count < 0:
            raise EconomyError(f"Save data has negative totals (gold={gold}, fishCount={fish_count})")

        self.gold = gold
        self.fish_count = fish_count
        self.inventory = inventory
        self.buyback = buyback_fish
