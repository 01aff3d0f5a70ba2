"""Authentication - verifies password hashing, sessions and the auth service.

Tests cover:
    - hash_password salts (same password, different hashes) and verifies
    - malformed stored hashes never verify
    - SessionStore create/resolve/destroy and expiry
    - AuthService register/login/authenticate/logout
"""

import pytest

from carbon_exchange.core.errors import AuthenticationError, ConflictError, ValidationError
from carbon_exchange.infrastructure.passwords import hash_password, verify_password
from carbon_exchange.infrastructure.session_store import SessionStore
from carbon_exchange.services.auth import INVALID_CREDENTIALS_MESSAGE, AuthService


# ─── passwords ───────────────────────────────────────────────────

def test_hash_is_salted_and_verifies():
    first = hash_password("hunter22")
    second = hash_password("hunter22")
    assert first != second
    assert verify_password("hunter22", first)
    assert not verify_password("hunter23", first)


def test_malformed_hash_never_verifies():
    assert not verify_password("x", "not-a-hash")
    assert not verify_password("x", "zz.zz")
    assert not verify_password("x", "")


# ─── SessionStore ────────────────────────────────────────────────

class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_session_resolves_until_expiry():
    clock = _Clock()
    sessions = SessionStore(ttl_seconds=60, clock=clock)
    token = sessions.create(7)
    assert sessions.resolve(token) == 7
    clock.now = 59.0
    assert sessions.resolve(token) == 7
    clock.now = 60.0
    assert sessions.resolve(token) is None
    assert len(sessions) == 0


def test_session_destroy_and_unknown_tokens():
    sessions = SessionStore()
    token = sessions.create(1)
    sessions.destroy(token)
    assert sessions.resolve(token) is None
    assert sessions.resolve(None) is None
    assert sessions.resolve("bogus") is None
    sessions.destroy(None)


def test_prune_removes_only_expired():
    clock = _Clock()
    sessions = SessionStore(ttl_seconds=10, clock=clock)
    sessions.create(1)
    clock.now = 5.0
    live = sessions.create(2)
    clock.now = 12.0
    assert sessions.prune() == 1
    assert sessions.resolve(live) == 2


# ─── AuthService ─────────────────────────────────────────────────

@pytest.fixture
def auth(store):
    return AuthService(store, SessionStore())


async def test_register_hashes_password_and_opens_session(auth, store):
    user, token = await auth.register("alice", "s3cret-pass")
    stored = await store.get_user(user.id)
    assert stored.password != "s3cret-pass"
    assert verify_password("s3cret-pass", stored.password)
    assert (await auth.authenticate(token)).id == user.id


async def test_register_requires_both_fields(auth):
    with pytest.raises(ValidationError) as exc:
        await auth.register("alice", "")
    assert exc.value.message == "Missing required fields"
    with pytest.raises(ValidationError):
        await auth.register("   ", "pw")


async def test_register_duplicate_username(auth):
    await auth.register("alice", "pw1")
    with pytest.raises(ConflictError):
        await auth.register("alice", "pw2")


async def test_login_with_valid_credentials(auth):
    user, _ = await auth.register("alice", "pw1")
    logged_in, token = await auth.login("alice", "pw1")
    assert logged_in.id == user.id
    assert (await auth.authenticate(token)).id == user.id


async def test_login_wrong_password_and_unknown_user_look_the_same(auth):
    await auth.register("alice", "pw1")
    with pytest.raises(AuthenticationError) as wrong:
        await auth.login("alice", "nope")
    with pytest.raises(AuthenticationError) as unknown:
        await auth.login("mallory", "pw1")
    assert wrong.value.message == unknown.value.message == INVALID_CREDENTIALS_MESSAGE


async def test_authenticate_without_session(auth):
    with pytest.raises(AuthenticationError) as exc:
        await auth.authenticate(None)
    assert exc.value.http_status == 401


async def test_logout_invalidates_token(auth):
    _, token = await auth.register("alice", "pw1")
    auth.logout(token)
    with pytest.raises(AuthenticationError):
        await auth.authenticate(token)
