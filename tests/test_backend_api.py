"""Tests for the session API, driven by a fake monotonic clock."""

import importlib
from typing import Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.app_factory import AppContext, create_app
from backend.session_registry import SessionRegistry

IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15"


class FakeClock:
    """Monotonic seconds that only move when a test says so."""

    def __init__(self) -> None:
        self.seconds = 0.0

    def __call__(self) -> float:
        return self.seconds

    def advance(self, seconds: float) -> None:
        self.seconds += seconds


def build_sessions_client(registry: SessionRegistry) -> TestClient:
    sessions_module = importlib.reload(importlib.import_module("backend.routers.sessions"))
    app = FastAPI()
    app.include_router(sessions_module.setup_router(registry))
    return TestClient(app)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return SessionRegistry(time_source=clock, limit=4, event_provider=lambda: None)


@pytest.fixture
def client(registry):
    return build_sessions_client(registry)


def open_session(client, **body) -> str:
    body.setdefault("seed", 42)
    response = client.post("/api/sessions", json=body)
    assert response.status_code == 201
    return response.json()["session_id"]


def reach_bite(client, clock, session_id: str) -> dict:
    """Cast, then poll four times a second until the fish bites."""
    assert client.post(f"/api/sessions/{session_id}/cast").json()["accepted"]
    for _ in range(40):
        clock.advance(0.25)
        snapshot = client.get(f"/api/sessions/{session_id}").json()
        if snapshot["phase"] == "reeling":
            return snapshot
    raise AssertionError("Fish never bit")


def land_fish(client, clock, session_id: str, max_steps: int = 400) -> None:
    for _ in range(max_steps):
        snapshot = client.get(f"/api/sessions/{session_id}").json()
        if snapshot["phase"] == "idle":
            return
        qte = snapshot["qte"]
        if qte is not None and qte["challenge"] is not None:
            client.post(f"/api/sessions/{session_id}/keys", json={"key": qte["challenge"]["key"].lower()})
        clock.advance(0.25)
    raise AssertionError("Fish was never landed")


class TestSessionLifecycle:
    def test_create_and_list(self, client) -> None:
        response = client.post("/api/sessions", json={"player": "ana", "seed": 1})

        assert response.status_code == 201
        info = response.json()
        assert info["player"] == "ana"
        assert info["modality"] == "keyboard"
        assert info["phase"] == "idle"

        listing = client.get("/api/sessions").json()
        assert listing["count"] == 1
        assert listing["sessions"][0]["session_id"] == info["session_id"]

    def test_modality_from_user_agent(self, client) -> None:
        response = client.post("/api/sessions", json={}, headers={"User-Agent": IPHONE_UA})
        assert response.json()["modality"] == "touch"

    def test_explicit_modality_wins(self, client) -> None:
        response = client.post("/api/sessions", json={"modality": "KEYBOARD"}, headers={"User-Agent": IPHONE_UA})
        assert response.json()["modality"] == "keyboard"

    def test_unknown_modality_rejected(self, client) -> None:
        response = client.post("/api/sessions", json={"modality": "gamepad"})
        assert response.status_code == 400
        assert "Unknown modality" in response.json()["error"]

    def test_session_limit(self, clock) -> None:
        client = build_sessions_client(SessionRegistry(time_source=clock, limit=1))
        open_session(client)
        response = client.post("/api/sessions", json={})
        assert response.status_code == 409
        assert "limit" in response.json()["error"]

    def test_unknown_session_is_404(self, client) -> None:
        for response in (
            client.get("/api/sessions/nope"),
            client.post("/api/sessions/nope/cast"),
            client.get("/api/sessions/nope/wallet"),
            client.delete("/api/sessions/nope"),
        ):
            assert response.status_code == 404
            assert response.json()["error"] == "Session not found: nope"

    def test_close_session(self, client, registry) -> None:
        session_id = open_session(client)
        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert registry.session_count == 0
        assert client.get(f"/api/sessions/{session_id}").status_code == 404


class TestGameplay:
    def test_requests_advance_the_encounter(self, client, clock) -> None:
        session_id = open_session(client)
        response = client.post(f"/api/sessions/{session_id}/cast")
        assert response.json() == {"accepted": True, "phase": "throwing"}

        clock.advance(0.4)
        snapshot = client.get(f"/api/sessions/{session_id}").json()
        assert snapshot["phase"] == "throwing"
        assert snapshot["bobber_throw_progress"] == pytest.approx(0.5)

        clock.advance(0.5)
        assert client.get(f"/api/sessions/{session_id}").json()["phase"] == "sinking"

    def test_second_cast_not_accepted(self, client) -> None:
        session_id = open_session(client)
        client.post(f"/api/sessions/{session_id}/cast")
        response = client.post(f"/api/sessions/{session_id}/cast")
        assert response.json()["accepted"] is False

    def test_bite_starts_qte(self, client, clock) -> None:
        session_id = open_session(client)
        snapshot = reach_bite(client, clock, session_id)

        assert snapshot["current_fish"] is not None
        assert snapshot["qte"]["challenge"]["kind"] == "key_press"
        assert snapshot["line_depth"] == 200.0

    def test_wrong_key_is_not_accepted(self, client, clock) -> None:
        session_id = open_session(client)
        snapshot = reach_bite(client, clock, session_id)
        wanted = snapshot["qte"]["challenge"]["key"]
        wrong = "Z" if wanted != "Z" else "Y"

        response = client.post(f"/api/sessions/{session_id}/keys", json={"key": wrong})
        assert response.json()["accepted"] is False

        response = client.post(f"/api/sessions/{session_id}/keys", json={"key": wanted})
        body = response.json()
        assert body["accepted"] is True
        assert body["snapshot"]["qte"]["success_count"] == 1

    def test_abort_resets(self, client, clock) -> None:
        session_id = open_session(client)
        reach_bite(client, clock, session_id)

        response = client.post(f"/api/sessions/{session_id}/abort", json={"reason": "player left"})
        assert response.json() == {"aborted": True, "phase": "idle"}
        assert client.get(f"/api/sessions/{session_id}").json()["qte"] is None

    def test_catch_reaches_wallet_and_feed(self, client, clock) -> None:
        session_id = open_session(client, player="ana")
        reach_bite(client, clock, session_id)
        land_fish(client, clock, session_id)

        wallet = client.get(f"/api/sessions/{session_id}/wallet").json()
        assert wallet["fish_count"] == 1
        assert len(wallet["inventory"]) == 1
        assert wallet["inventory_value"] == wallet["inventory"][0]["value"]

        catches = client.get(f"/api/sessions/{session_id}/catches").json()
        assert catches["count"] == 1
        assert catches["catches"][0]["player"] == "ana"

        sold = client.post(f"/api/sessions/{session_id}/sell", json={"index": 0}).json()
        assert sold["earned"] == wallet["inventory_value"]
        assert sold["wallet"]["gold"] == sold["earned"]
        assert sold["wallet"]["inventory"] == []

        bought = client.post(f"/api/sessions/{session_id}/buyback")
        assert bought.status_code == 200
        assert bought.json()["wallet"]["gold"] == 0


class TestServerClock:
    def test_slow_polling_keeps_wall_clock_pace(self, client, clock) -> None:
        session_id = open_session(client)
        client.post(f"/api/sessions/{session_id}/cast")

        clock.advance(2.0)
        snapshot = client.get(f"/api/sessions/{session_id}").json()
        assert snapshot["phase"] == "sinking"
        assert snapshot["now"] == pytest.approx(2000.0, abs=0.01)

        clock.advance(1.5)
        snapshot = client.get(f"/api/sessions/{session_id}").json()
        assert snapshot["phase"] == "reeling"
        assert snapshot["now"] == pytest.approx(3500.0, abs=0.01)

    def test_waiting_between_requests_does_not_pause_the_qte(self, client, clock) -> None:
        session_id = open_session(client)
        reach_bite(client, clock, session_id)

        clock.advance(5.0)
        snapshot = client.get(f"/api/sessions/{session_id}").json()

        assert snapshot["phase"] == "idle"
        assert snapshot["current_fish"] is None
        assert client.get(f"/api/sessions/{session_id}/wallet").json()["fish_count"] == 0

    def test_long_absence_replays_a_bounded_window(self, clock) -> None:
        registry = SessionRegistry(time_source=clock, event_provider=lambda: None, max_catch_up_ms=10_000.0)
        client = build_sessions_client(registry)
        session_id = open_session(client)
        client.post(f"/api/sessions/{session_id}/cast")

        clock.advance(300.0)
        snapshot = client.get(f"/api/sessions/{session_id}").json()

        assert snapshot["phase"] == "idle"
        assert snapshot["now"] == pytest.approx(10_000.0 + 16.67, abs=0.01)


class TestIdleExpiry:
    def test_idle_session_is_closed_when_a_new_one_opens(self, clock) -> None:
        client = build_sessions_client(SessionRegistry(time_source=clock, limit=1, idle_timeout_s=60.0))
        stale_id = open_session(client)

        clock.advance(61.0)
        fresh_id = open_session(client)

        assert client.get(f"/api/sessions/{stale_id}").status_code == 404
        assert client.get(f"/api/sessions/{fresh_id}").status_code == 200

    def test_requests_keep_a_session_alive(self, clock) -> None:
        client = build_sessions_client(SessionRegistry(time_source=clock, limit=1, idle_timeout_s=60.0))
        session_id = open_session(client)

        clock.advance(40.0)
        client.get(f"/api/sessions/{session_id}/wallet")
        clock.advance(40.0)

        assert client.post("/api/sessions", json={}).status_code == 409
        assert client.get(f"/api/sessions/{session_id}").status_code == 200


class TestOverlaysAndEconomy:
    def test_open_inventory_blocks_cast(self, client) -> None:
        session_id = open_session(client)
        response = client.post(f"/api/sessions/{session_id}/overlays/inventory", json={"open": True})
        assert response.json() == {"overlay": "inventory", "open": True, "blocked": True}

        assert client.post(f"/api/sessions/{session_id}/cast").json()["accepted"] is False

        response = client.post(f"/api/sessions/{session_id}/overlays/inventory")
        assert response.json()["open"] is False
        assert client.post(f"/api/sessions/{session_id}/cast").json()["accepted"] is True

    def test_unknown_overlay_rejected(self, client) -> None:
        session_id = open_session(client)
        response = client.post(f"/api/sessions/{session_id}/overlays/map")
        assert response.status_code == 400

    def test_sell_and_buyback_refusals(self, client) -> None:
        session_id = open_session(client)

        response = client.post(f"/api/sessions/{session_id}/sell", json={"index": 0})
        assert response.status_code == 409
        assert response.json()["error"] == "No fish at backpack slot 0"

        response = client.post(f"/api/sessions/{session_id}/buyback")
        assert response.status_code == 409
        assert response.json()["error"] == "No fish in buyback"

    @pytest.mark.parametrize("limit", [-1, 0, 500])
    def test_catches_limit_out_of_range_rejected(self, client, limit) -> None:
        session_id = open_session(client)
        response = client.get(f"/api/sessions/{session_id}/catches", params={"limit": limit})
        assert response.status_code == 422


def build_app_client(registry: Optional[SessionRegistry] = None) -> TestClient:
    context = AppContext(session_registry=registry or SessionRegistry(event_provider=lambda: None))
    return TestClient(create_app(context=context))


def test_health_reports_sessions(registry) -> None:
    client = build_app_client(registry)
    open_session(client)

    health = client.get("/health").json()

    assert health["status"] == "ok"
    assert health["sessions"] == 1


def test_bad_session_limit_env_rejected(monkeypatch) -> None:
    from core.exceptions import ConfigurationError

    monkeypatch.setenv("FISHING_SESSION_LIMIT", "lots")
    with pytest.raises(ConfigurationError):
        AppContext()
