"""Play-session API endpoints.

Every endpoint that touches a session first catches it up to the server's
current monotonic time, under the session's lock, and then acts. Gameplay
input that does not apply in the current phase is not an error: the
response simply reports that nothing happened.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse

from backend.models import (
    AbortRequest,
    CreateSessionRequest,
    KeyPressRequest,
    OverlayRequest,
    SellRequest,
    SessionInfo,
    TapRequest,
    WalletInfo,
)
from backend.session_registry import SessionHandle, SessionRegistry
from core.config.server import RECENT_CATCH_LIMIT
from core.qte.challenges import InputModality, detect_modality
from core.session import GameSession, Overlay

logger = logging.getLogger(__name__)


def _not_found(session_id: str) -> JSONResponse:
    return JSONResponse({"error": f"Session not found: {session_id}"}, status_code=404)


def _wallet(session: GameSession) -> WalletInfo:
    data = session.to_save_data()
    return WalletInfo(
        gold=data["gold"],
        fish_count=data["fishCount"],
        inventory=data["inventory"],
        buyback=data["buyback"],
        inventory_value=session.inventory_value(),
    )


def setup_router(registry: SessionRegistry) -> APIRouter:
    """Create the sessions router.

    Endpoints:
        POST /api/sessions - Open a session
        GET /api/sessions - List open sessions
        GET /api/sessions/{session_id} - Tick and return the encounter snapshot
        POST /api/sessions/{session_id}/cast - Cast the line
        POST /api/sessions/{session_id}/keys - Forward a key press
        POST /api/sessions/{session_id}/taps - Forward a tap
        POST /api/sessions/{session_id}/abort - Reset the encounter
        POST /api/sessions/{session_id}/overlays/{name} - Open, close or toggle an overlay
        GET /api/sessions/{session_id}/wallet - Gold and backpack
        POST /api/sessions/{session_id}/sell - Sell a fish
        POST /api/sessions/{session_id}/buyback - Buy the last sold fish back
        GET /api/sessions/{session_id}/catches - This player's recent catches
        DELETE /api/sessions/{session_id} - Close a session

    Args:
        registry: Session registry holding every open session

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/sessions", tags=["sessions"])

    def ticked(session_id: str) -> Optional[SessionHandle]:
        handle = registry.get(session_id)
        if handle is not None:
            with handle.lock:
                registry.catch_up(handle)
        return handle

    @router.post("")
    async def create_session(request: CreateSessionRequest, user_agent: Optional[str] = Header(default=None)):
        """Open a new session. Modality comes from the body, else the User-Agent."""
        if request.modality is not None:
            try:
                modality = InputModality(request.modality.lower())
            except ValueError:
                return JSONResponse({"error": f"Unknown modality: {request.modality}"}, status_code=400)
        else:
            modality = detect_modality(user_agent)

        result = registry.create(player=request.player, modality=modality, seed=request.seed)
        if result.is_err():
            return JSONResponse({"error": result.error}, status_code=409)

        handle = result.unwrap()
        if request.viewport_width and request.viewport_height:
            handle.session.set_viewport(request.viewport_width, request.viewport_height)
        info = SessionInfo(**handle.info())
        return JSONResponse(info.model_dump(), status_code=201)

    @router.get("")
    async def list_sessions():
        sessions = registry.list_sessions()
        return JSONResponse({"sessions": sessions, "count": len(sessions)})

    @router.get("/{session_id}")
    async def get_snapshot(session_id: str):
        """Advance the session to now and return what a renderer would draw."""
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        with handle.lock:
            snapshot = handle.session.get_snapshot()
        return JSONResponse(snapshot.to_dict())

    @router.post("/{session_id}/cast")
    async def cast(session_id: str):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        with handle.lock:
            accepted = handle.session.cast()
            phase = handle.session.phase
        return JSONResponse({"accepted": accepted, "phase": phase.value})

    @router.post("/{session_id}/keys")
    async def press_key(session_id: str, request: KeyPressRequest):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        with handle.lock:
            accepted = handle.session.on_key_press(request.key)
            snapshot = handle.session.get_snapshot()
        return JSONResponse({"accepted": accepted, "snapshot": snapshot.to_dict()})

    @router.post("/{session_id}/taps")
    async def tap(session_id: str, request: TapRequest):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        with handle.lock:
            accepted = handle.session.on_tap(request.x, request.y)
            snapshot = handle.session.get_snapshot()
        return JSONResponse({"accepted": accepted, "snapshot": snapshot.to_dict()})

    @router.post("/{session_id}/abort")
    async def abort(session_id: str, request: Optional[AbortRequest] = None):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        reason = request.reason if request is not None else "aborted"
        with handle.lock:
            aborted = handle.session.abort(reason)
            phase = handle.session.phase
        return JSONResponse({"aborted": aborted, "phase": phase.value})

    @router.post("/{session_id}/overlays/{name}")
    async def set_overlay(session_id: str, name: str, request: Optional[OverlayRequest] = None):
        """Open, close or toggle the inventory or shop overlay."""
        try:
            overlay = Overlay(name.lower())
        except ValueError:
            return JSONResponse({"error": f"Unknown overlay: {name}"}, status_code=400)

        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        wanted = request.open if request is not None else None
        with handle.lock:
            session = handle.session
            if wanted is None:
                session.toggle_overlay(overlay)
            elif wanted:
                session.open_overlay(overlay)
            else:
                session.close_overlay(overlay)
            is_open = session.is_open(overlay)
            blocked = session.is_blocked()
        return JSONResponse({"overlay": overlay.value, "open": is_open, "blocked": blocked})

    @router.get("/{session_id}/wallet", response_model=WalletInfo)
    async def get_wallet(session_id: str):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        with handle.lock:
            wallet = _wallet(handle.session)
        return JSONResponse(wallet.model_dump())

    @router.post("/{session_id}/sell")
    async def sell(session_id: str, request: SellRequest):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        with handle.lock:
            result = handle.session.sell_fish(request.index)
            wallet = _wallet(handle.session)
        if result.is_err():
            return JSONResponse({"error": result.error}, status_code=409)
        return JSONResponse({"earned": result.unwrap(), "wallet": wallet.model_dump()})

    @router.post("/{session_id}/buyback")
    async def buyback(session_id: str):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        with handle.lock:
            result = handle.session.buyback_fish()
            wallet = _wallet(handle.session)
        if result.is_err():
            return JSONResponse({"error": result.error}, status_code=409)
        return JSONResponse({"fish": result.unwrap().to_dict(), "wallet": wallet.model_dump()})

    @router.get("/{session_id}/catches")
    async def recent_catches(
        session_id: str,
        limit: Annotated[int, Query(ge=1, le=RECENT_CATCH_LIMIT)] = RECENT_CATCH_LIMIT,
    ):
        handle = ticked(session_id)
        if handle is None:
            return _not_found(session_id)
        records = registry.feed.recent(limit=limit, player=handle.player)
        return JSONResponse({"catches": [r.to_dict() for r in records], "count": len(records)})

    @router.delete("/{session_id}")
    async def close_session(session_id: str):
        if not registry.remove(session_id):
            return _not_found(session_id)
        return JSONResponse({"message": f"Session {session_id} closed"})

    return router
