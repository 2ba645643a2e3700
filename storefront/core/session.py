"""Visitor sessions and their carts"""

import time
import uuid
import logging
from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass

from .cart import CartState
from .storage import CartStorage, CartStore, DEFAULT_STORAGE_KEY

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartSession:
    """One visitor (browser) and the cart it owns"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    cart: CartState

    def touch(self) -> None:
        self.updated_at = _utcnow()


class CartSessionManager:
    """
    Keeps the live carts of current visitors.

    Each visitor's snapshot is stored under `<storage_key>:<session_id>`,
    so a known session id is rehydrated from storage after a restart.

    Eviction runs from get_or_create_session at most once per
    `cleanup_interval_seconds`, or right away once more than `max_sessions`
    are live. Sessions idle longer than `max_age_hours` are dropped together
    with their stored cart, since their cookie has expired by then. Above
    `max_sessions` the least recently used sessions are only dropped from
    memory and are reopened from storage on their next request.
    """

    def __init__(
        self,
        storage: CartStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        max_age_hours: int = 24,
        max_sessions: int = 10000,
        cleanup_interval_seconds: float = 300.0,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.max_age_hours = max_age_hours
        self.max_sessions = max_sessions
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self.sessions: dict[str, CartSession] = {}
        self._last_cleanup = time.monotonic()

    def _store_key(self, session_id: str) -> str:
        return f"{self.storage_key}:{session_id}"

    def _open(self, session_id: str) -> CartSession:
        now = _utcnow()
        session = CartSession(
            session_id=session_id,
            created_at=now,
            updated_at=now,
            cart=CartState(CartStore(self.storage, self._store_key(session_id))),
        )
        self.sessions[session_id] = session
        return session

    def create_session(self) -> CartSession:
        """Create a session with a fresh id"""
        session = self._open(str(uuid.uuid4()))
        logger.debug(f"Created cart session {session.session_id}")
        return session

    def get_session(self, session_id: str) -> Optional[CartSession]:
        return self.sessions.get(session_id)

    def get_or_create_session(self, session_id: Optional[str] = None) -> CartSession:
        """Get a live session, reopen a stored one, or create a new one"""
        if session_id and session_id in self.sessions:
            session = self.sessions[session_id]
            session.touch()
        elif session_id and _is_valid_session_id(session_id):
            session = self._open(session_id)
        else:
            session = self.create_session()

        self._maybe_evict()
        return session

    def delete_session(self, session_id: str) -> bool:
        """Forget a session and its stored cart"""
        session = self.sessions.pop(session_id, None)
        self.storage.remove_item(self._store_key(session_id))
        return session is not None

    def cleanup_old_sessions(self, max_age_hours: Optional[int] = None) -> int:
        """Delete sessions idle longer than max_age_hours, stored carts included"""
        if max_age_hours is None:
            max_age_hours = self.max_age_hours
        now = _utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            self.delete_session(sid)
        return len(old_sessions)

    def _maybe_evict(self) -> None:
        now = time.monotonic()
        if (
            len(self.sessions) <= self.max_sessions
            and now - self._last_cleanup < self.cleanup_interval_seconds
        ):
            return
        self._last_cleanup = now

        expired = self.cleanup_old_sessions()
        overflow = len(self.sessions) - self.max_sessions
        if overflow > 0:
            least_recent = sorted(self.sessions.values(), key=lambda s: s.updated_at)[:overflow]
            for session in least_recent:
                del self.sessions[session.session_id]
        if expired or overflow > 0:
            logger.info(
                f"Evicted {expired} expired and {max(overflow, 0)} idle cart sessions, "
                f"{len(self.sessions)} live"
            )


def _is_valid_session_id(session_id: str) -> bool:
    try:
        return str(uuid.UUID(session_id)) == session_id
    except ValueError:
        return False
