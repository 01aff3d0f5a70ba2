"""Authentication - registration, login and session resolution.

Invariants:
    - Passwords are hashed (scrypt) before they reach the store
    - Unknown username and wrong password produce the same error
    - authenticate() re-reads the user from the store on every call
"""

import asyncio
import logging

from carbon_exchange.core.enforce_trade import MISSING_FIELDS_MESSAGE
from carbon_exchange.core.errors import AuthenticationError, ValidationError
from carbon_exchange.core.repository_protocols import LedgerStore, UserLike
from carbon_exchange.infrastructure.passwords import hash_password, verify_password
from carbon_exchange.infrastructure.session_store import SessionStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


class AuthService:
    """Credential checks on top of the ledger store and session store."""

    def __init__(self, store: LedgerStore, sessions: SessionStore):
        self._store = store
        self._sessions = sessions

    async def register(self, username: str | None, password: str | None) -> tuple[UserLike, str]:
        """Create the user and open a session. Returns (user, session token)."""
        username, password = _require_credentials(username, password)
        hashed = await asyncio.to_thread(hash_password, password)
        user = await self._store.create_user(username, hashed)
        return user, self._sessions.create(user.id)

    async def login(self, username: str | None, password: str | None) -> tuple[UserLike, str]:
        username, password = _require_credentials(username, password)
        user = await self._store.get_user_by_username(username)
        if user is None or not await asyncio.to_thread(
            verify_password, password, user.password,
        ):
            logger.warning("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
        logger.info(f"User {user.id} logged in", extra={"user_id": user.id})
        return user, self._sessions.create(user.id)

    def logout(self, token: str | None) -> None:
        self._sessions.destroy(token)

    async def authenticate(self, token: str | None) -> UserLike:
        """User behind a session token. Raises AuthenticationError."""
        user_id = self._sessions.resolve(token)
        if user_id is None:
            raise AuthenticationError()
        user = await self._store.get_user(user_id)
        if user is None:
            self._sessions.destroy(token)
            raise AuthenticationError()
        return user


def _require_credentials(
    username: str | None, password: str | None,
) -> tuple[str, str]:
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    return username, password
