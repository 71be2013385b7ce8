"""Registry of live play sessions for the API server.

Each session is driven by the server's monotonic clock: every request
catches its session up to "now" before acting, so gameplay advances even
though there is no render loop on the server. The time since the previous
request is replayed in nominal frames, since the session clock treats one
long gap as a suspended tab. One lock per session serialises requests for
the same player, and sessions nobody has touched for a while are closed
when a new one opens.
"""

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from core.config.server import DEFAULT_SESSION_LIMIT, MAX_CATCH_UP_MS, SESSION_IDLE_TIMEOUT_S
from core.fish.events import FishingEvent, current_event
from core.notifiers import LoggingCatchNotifier, RecentCatchFeed
from core.qte.challenges import InputModality
from core.result import Err, Ok, Result
from core.session import GameSession

logger = logging.getLogger(__name__)


@dataclass
class SessionHandle:
    """A session plus the lock that guards it."""

    session_id: str
    player: str
    session: GameSession
    lock: threading.Lock = field(default_factory=threading.Lock)
    created_at: float = field(default_factory=time.time)
    # Registry time (seconds) of the last request that touched the session
    last_active: float = 0.0

    def info(self) -> Dict[str, str]:
        return {
            "session_id": self.session_id,
            "player": self.player,
            "modality": self.session.modality.value,
            "phase": self.session.phase.value,
        }


class SessionRegistry:
    """Creates, finds and closes sessions.

    Args:
        time_source: Returns seconds from a monotonic clock (injectable for tests)
        limit: Maximum number of open sessions
        feed: Shared recent-catch feed every session reports to
        event_provider: Fishing event lookup handed to new sessions
        idle_timeout_s: Sessions idle longer than this are closed on the next create
        max_catch_up_ms: Longest gap one request replays frame by frame
    """

    def __init__(
        self,
        time_source: Callable[[], float] = time.monotonic,
        limit: int = DEFAULT_SESSION_LIMIT,
        feed: Optional[RecentCatchFeed] = None,
        event_provider: Callable[[], Optional[FishingEvent]] = current_event,
        idle_timeout_s: float = SESSION_IDLE_TIMEOUT_S,
        max_catch_up_ms: float = MAX_CATCH_UP_MS,
    ) -> None:
        self._time_source = time_source
        self._limit = limit
        self._sessions: Dict[str, SessionHandle] = {}
        self._lock = threading.Lock()
        self._event_provider = event_provider
        self._idle_timeout_s = idle_timeout_s
        self._max_catch_up_ms = max_catch_up_ms
        self.feed = feed if feed is not None else RecentCatchFeed()

    def now_ms(self) -> float:
        return self._time_source() * 1000.0

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def create(
        self,
        player: str = "player",
        modality: InputModality = InputModality.KEYBOARD,
        seed: Optional[int] = None,
    ) -> Result[SessionHandle, str]:
        self.expire_idle()
        with self._lock:
            if len(self._sessions) >= self._limit:
                return Err(f"Session limit reached ({self._limit})")
            session = GameSession(
                modality=modality,
                rng=random.Random(seed),
                notifiers=[LoggingCatchNotifier(player), self.feed.notifier_for(player)],
                event_provider=self._event_provider,
            )
            handle = SessionHandle(session_id=str(uuid.uuid4()), player=player, session=session)
            # First sample sets the session clock's baseline
            now_ms = self.now_ms()
            session.tick(now_ms)
            handle.last_active = now_ms / 1000.0
            self._sessions[handle.session_id] = handle
        logger.info("Opened session %s for %s (%s)", handle.session_id[:8], player, modality.value)
        return Ok(handle)

    def get(self, session_id: str) -> Optional[SessionHandle]:
        return self._sessions.get(session_id)

    def catch_up(self, handle: SessionHandle) -> None:
        """Tick ``handle``'s session to now in nominal-frame steps.

        The caller must hold ``handle.lock``. A gap longer than
        ``max_catch_up_ms`` only replays its last ``max_catch_up_ms``.
        """
        target = self.now_ms()
        session = handle.session
        step = session.config.encounter.frame_ms
        last = session.encounter.clock.last_sample

        if last is not None and target > last:
            if target - last > self._max_catch_up_ms:
                last = target - self._max_catch_up_ms
                session.tick(last)
            sample = last + step
            while sample < target:
                session.tick(sample)
                sample += step
        session.tick(target)
        handle.last_active = target / 1000.0

    def expire_idle(self) -> List[str]:
        """Close sessions with no request for ``idle_timeout_s``. Returns their ids."""
        cutoff = self._time_source() - self._idle_timeout_s
        with self._lock:
            stale = [handle for handle in self._sessions.values() if handle.last_active < cutoff]
            for handle in stale:
                del self._sessions[handle.session_id]

        for handle in stale:
            with handle.lock:
                handle.session.abort("session expired")
            logger.info("Expired idle session %s for %s", handle.session_id[:8], handle.player)
        return [handle.session_id for handle in stale]

    def remove(self, session_id: str) -> bool:
        with self._lock:
            handle = self._sessions.pop(session_id, None)
        if handle is None:
            return False
        with handle.lock:
            handle.session.abort("session closed")
        logger.info("Closed session %s", session_id[:8])
        return True

    def close_all(self) -> int:
        closed = 0
        for session_id in list(self._sessions):
            if self.remove(session_id):
                closed += 1
        return closed

    def list_sessions(self) -> List[Dict[str, str]]:
        return [handle.info() for handle in list(self._sessions.values())]
