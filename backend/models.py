"""Request and response models for the session API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class CreateSessionRequest(BaseModel):
    """Request body for opening a play session.

    ``modality`` is "keyboard" or "touch"; when omitted it is inferred from
    the User-Agent header.
    """

    player: str = "player"
    modality: Optional[str] = None
    seed: Optional[int] = None
    viewport_width: Optional[int] = None
    viewport_height: Optional[int] = None


class KeyPressRequest(BaseModel):
    key: str


class TapRequest(BaseModel):
    x: float
    y: float


class AbortRequest(BaseModel):
    reason: str = "aborted"


class OverlayRequest(BaseModel):
    """Open (True), close (False) or toggle (None) an overlay."""

    open: Optional[bool] = None


class SellRequest(BaseModel):
    index: int


class SessionInfo(BaseModel):
    session_id: str
    player: str
    modality: str
    phase: str


class WalletInfo(BaseModel):
    gold: int
    fish_count: int
    inventory: List[Dict[str, Any]]
    buyback: Optional[Dict[str, Any]] = None
    inventory_value: int = 0
