"""Session management for browser visitors."""

import hashlib
import hmac
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from occ_assistant.analytics.logger import logger
from occ_assistant.utils.config import settings


def sign_session_id(session_id: str, secret: Optional[str] = None) -> str:
    """Cookie value for ``session_id``: ``<id>.<hex hmac-sha256>``."""
    key = (secret or settings.session_secret).encode()
    signature = hmac.new(key, session_id.encode(), hashlib.sha256).hexdigest()
    return f"{session_id}.{signature}"


def unsign_session_id(cookie_value: Optional[str], secret: Optional[str] = None) -> Optional[str]:
    """Session id from a signed cookie value; None when missing or tampered with."""
    if not cookie_value or "." not in cookie_value:
        return None
    session_id = cookie_value.rsplit(".", 1)[0]
    if hmac.compare_digest(sign_session_id(session_id, secret), cookie_value):
        return session_id
    return None


@dataclass
class SessionData:
    """Per-visitor state kept for the lifetime of the session cookie."""

    session_id: str
    created_at: float = field(default_factory=time.time)
    user_id: Optional[str] = None
    email: Optional[str] = None
    cart_guid: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def login(self, user_id: str, email: str):
        self.user_id = user_id
        self.email = email


class SessionManager:
    """Manage visitor sessions in process memory.

    Visitors that never come back leave their session behind, so expired
    sessions are swept whenever ``purge_interval`` seconds have passed since
    the last sweep and a new session is created.
    """

    def __init__(self, max_age: Optional[int] = None, purge_interval: Optional[float] = None):
        self.max_age = max_age if max_age is not None else settings.session_max_age
        self.purge_interval = (
            purge_interval if purge_interval is not None else settings.session_purge_interval
        )
        self._sessions: Dict[str, SessionData] = {}
        self._last_purge = time.time()

    def create_session(self) -> SessionData:
        """Create a new session."""
        self._maybe_purge()
        session = SessionData(session_id=str(uuid.uuid4()))
        self._sessions[session.session_id] = session
        logger.debug(f"Created new session: {session.session_id}")
        return session

    def _is_expired(self, session: SessionData) -> bool:
        return time.time() - session.created_at > self.max_age

    def _maybe_purge(self):
        now = time.time()
        if now - self._last_purge >= self.purge_interval:
            purged = self.purge_expired()
            if purged:
                logger.info(f"Purged {purged} expired sessions")

    def get_session(self, session_id: Optional[str]) -> Optional[SessionData]:
        """Get session by ID; expired sessions are dropped."""
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self._is_expired(session):
            self.destroy_session(session_id)
            return None
        return session

    def get_or_create_session(self, session_id: Optional[str] = None) -> SessionData:
        """Get existing session or create new one."""
        return self.get_session(session_id) or self.create_session()

    def destroy_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        self._last_purge = time.time()
        expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


# Global session manager
session_manager = SessionManager()
