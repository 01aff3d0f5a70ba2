"""Session Store - in-memory map from opaque session token to user id.

Invariants:
    - Tokens are 32 bytes of urandom, url-safe encoded
    - A session is valid until its expiry; expired entries are pruned lazily
    - One store per app instance (sessions lost on restart)
"""

import secrets
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class SessionEntry:
    user_id: int
    expires_at: float


class SessionStore:
    """Token -> user id with a fixed time-to-live."""

    def __init__(
        self, ttl_seconds: int = 86_400, clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, SessionEntry] = {}

    def create(self, user_id: int) -> str:
        self.prune()
        token = secrets.token_urlsafe(32)
        self._sessions[token] = SessionEntry(user_id, self._clock() + self._ttl)
        return token

    def resolve(self, token: str | None) -> int | None:
        """User id for a live token, else None."""
        if not token:
            return None
        entry = self._sessions.get(token)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._sessions.pop(token, None)
            return None
        return entry.user_id

    def destroy(self, token: str | None) -> None:
        if token:
            self._sessions.pop(token, None)

    def prune(self) -> int:
        """Drop expired sessions. Returns how many were removed."""
        now = self._clock()
        expired = [t for t, e in self._sessions.items() if e.expires_at <= now]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
