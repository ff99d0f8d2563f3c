"""Session tokens for the catalog server.

Identity is owned by whoever issues the tokens; the server only resolves
the ``x-session-id`` header to an explicit SessionContext per request.
"""

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    token: str
    user_id: str
    email: str = ""
    is_admin: bool = False


class SessionStore:
    """In-process token registry."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, SessionContext] = {}

    def open(self, user_id: str, email: str = "", is_admin: bool = False) -> SessionContext:
        session = SessionContext(token=secrets.token_urlsafe(24), user_id=user_id, email=email, is_admin=is_admin)
        with self._lock:
            self._sessions[session.token] = session
        return session

    def resolve(self, token: str | None) -> SessionContext | None:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def close(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None
