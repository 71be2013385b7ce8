"""Tests for GameSession: overlays, catches, notifiers and the economy."""

import pytest

from core.config.session_config import SessionConfig
from core.exceptions import ConfigurationError, EconomyError
from core.fish import FishGenerator
from core.notifiers import CatchNotifier, LoggingCatchNotifier, RecentCatchFeed
from core.session import GameSession, Overlay
from core.state_machine import EncounterPhase
from core.util.rng import MissingRNGError


class RecordingNotifier:
    def __init__(self) -> None:
        self.caught = []

    def on_fish_caught(self, fish) -> None:
        self.caught.append(fish)


class ExplodingNotifier:
    def on_fish_caught(self, fish) -> None:
        raise RuntimeError("webhook down")


def land_fish(session, driver) -> None:
    """Cast and clear the QTE, stepping until the line is back in."""
    assert session.cast()
    qte = session.encounter.qte
    driver.until(lambda: qte.active, max_frames=200)
    while qte.active:
        challenge = qte.state.current_challenge
        if challenge is not None:
            session.on_key_press(challenge.key)
        driver.step()
    driver.until(lambda: session.phase is EncounterPhase.IDLE, max_frames=100)


def lose_fish(session, driver) -> None:
    assert session.cast()
    driver.until(lambda: session.phase is EncounterPhase.COMPLETE, max_frames=400)
    driver.until(lambda: session.phase is EncounterPhase.IDLE, max_frames=100)


@pytest.fixture
def session_driver(session, frame_driver):
    return frame_driver(session)


class TestConstruction:
    def test_requires_rng(self) -> None:
        with pytest.raises(MissingRNGError):
            GameSession()

    def test_defaults_to_fish_generator(self, seeded_rng) -> None:
        session = GameSession(rng=seeded_rng)
        assert isinstance(session.fish_source, FishGenerator)

    def test_invalid_config_rejected(self, seeded_rng) -> None:
        with pytest.raises(ConfigurationError):
            GameSession(config=SessionConfig(starting_gold=-1), rng=seeded_rng)

    def test_starting_gold(self, seeded_rng) -> None:
        assert GameSession(config=SessionConfig(starting_gold=25), rng=seeded_rng).gold == 25


class TestOverlays:
    def test_open_overlay_blocks_cast(self, session) -> None:
        session.open_overlay(Overlay.INVENTORY)
        assert session.is_blocked()
        assert session.cast() is False
        assert session.phase is EncounterPhase.IDLE

        session.close_overlay(Overlay.INVENTORY)
        assert session.cast()

    def test_toggle_and_list(self, session) -> None:
        assert session.toggle_overlay(Overlay.SHOP) is True
        session.open_overlay(Overlay.INVENTORY)
        assert session.open_overlays == [Overlay.INVENTORY, Overlay.SHOP]
        assert session.toggle_overlay(Overlay.SHOP) is False
        assert session.is_open(Overlay.INVENTORY)
        assert not session.is_open(Overlay.SHOP)

    def test_overlay_does_not_stop_running_encounter(self, session, session_driver) -> None:
        session.cast()
        session.open_overlay(Overlay.SHOP)
        assert session_driver.advance_ms(800) is EncounterPhase.SINKING


class TestCatches:
    def test_catch_lands_in_inventory_and_notifies_once(self, session, session_driver, common_fish) -> None:
        notifier = RecordingNotifier()
        session.add_notifier(notifier)

        land_fish(session, session_driver)

        assert session.fish_count == 1
        assert session.inventory == [common_fish]
        assert notifier.caught == [common_fish]

    def test_escape_does_not_notify(self, session, session_driver) -> None:
        notifier = RecordingNotifier()
        session.add_notifier(notifier)

        lose_fish(session, session_driver)

        assert notifier.caught == []
        assert session.inventory == []
        assert session.fish_count == 0

    def test_failing_notifier_does_not_break_the_catch(self, session, session_driver, caplog) -> None:
        after = RecordingNotifier()
        session.add_notifier(ExplodingNotifier())
        session.add_notifier(after)

        land_fish(session, session_driver)

        assert session.fish_count == 1
        assert len(after.caught) == 1
        assert session.phase is EncounterPhase.IDLE
        assert "Catch notifier" in caplog.text

    def test_feed_and_logging_notifiers(self, session, session_driver) -> None:
        feed = RecentCatchFeed(limit=5)
        session.add_notifier(feed.notifier_for("ana"))
        session.add_notifier(LoggingCatchNotifier("ana"))

        land_fish(session, session_driver)

        assert [record.player for record in feed.recent()] == ["ana"]
        assert feed.recent(player="someone else") == []
        assert feed.recent(limit=-1) == []
        assert isinstance(LoggingCatchNotifier(), CatchNotifier)


class TestEconomy:
    def test_sell_moves_value_to_gold(self, session, fish_factory) -> None:
        session.inventory = [fish_factory(value=10), fish_factory(value=40, fish_type="Eel")]

        result = session.sell_fish(1)

        assert result.is_ok()
        assert result.unwrap() == 40
        assert session.gold == 40
        assert session.buyback.type == "Eel"
        assert session.inventory_value() == 10

    def test_sell_bad_index_is_err(self, session) -> None:
        result = session.sell_fish(0)
        assert result.is_err()
        assert "slot 0" in result.error
        assert session.gold == 0

    def test_buyback_restores_fish(self, session, fish_factory) -> None:
        fish = fish_factory(value=15)
        session.inventory = [fish]
        session.sell_fish(0)

        result = session.buyback_fish()

        assert result.unwrap() == fish
        assert session.gold == 0
        assert session.inventory == [fish]
        assert session.buyback is None

    def test_buyback_errors(self, session, fish_factory) -> None:
        assert session.buyback_fish().error == "No fish in buyback"

        session.inventory = [fish_factory(value=15)]
        session.sell_fish(0)
        session.gold = 5
        result = session.buyback_fish()
        assert result.is_err()
        assert "Not enough gold" in result.error
        assert session.buyback is not None

    def test_save_data_round_trip(self, session, seeded_rng, fish_factory) -> None:
        session.gold = 33
        session.fish_count = 4
        session.inventory = [fish_factory(value=12)]
        session.buyback = fish_factory(value=7, fish_type="Perch")

        data = session.to_save_data()
        assert set(data) == {"gold", "fishCount", "inventory", "buyback"}

        restored = GameSession(rng=seeded_rng)
        restored.load_save_data(data)
        assert restored.to_save_data() == data

    def test_load_tolerates_missing_keys(self, session) -> None:
        session.load_save_data({})
        assert session.gold == 0
        assert session.inventory == []
        assert session.buyback is None

    def test_load_fills_qte_fields_from_rarity(self, session) -> None:
        session.load_save_data(
            {
                "gold": 5,
                "inventory": [{"type": "Ice Fin", "rarity": "Rare", "size": "Small", "value": 41}],
                "buyback": {"type": "Glowfin", "rarity": "Common", "size": "Tiny", "value": 5},
            }
        )

        assert (session.inventory[0].qte_time, session.inventory[0].qte_required) == (1.0, 5)
        assert session.buyback.qte_required == 3

    @pytest.mark.parametrize(
        "data",
        [
            {"gold": "plenty"},
            {"gold": -10},
            {"inventory": [{"rarity": "Rare", "value": 41}]},
            {"inventory": ["Ice Fin"]},
        ],
    )
    def test_unreadable_save_raises_economy_error(self, session, fish_factory, data) -> None:
        session.gold = 12
        session.inventory = [fish_factory()]

        with pytest.raises(EconomyError):
            session.load_save_data(data)

        assert session.gold == 12
        assert len(session.inventory) == 1
