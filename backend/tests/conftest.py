"""Root conftest - shared fixtures: in-memory store, app and HTTP client.

Invariants:
    - Every test gets a fresh seeded MemoryLedgerStore and its own app instance
    - DATABASE_URL is cleared so importing carbon_exchange.main never opens a database
"""

import os

os.environ.pop("DATABASE_URL", None)

import pytest
from httpx import ASGITransport, AsyncClient

from carbon_exchange.config import Settings
from carbon_exchange.infrastructure.memory_store import MemoryLedgerStore
from carbon_exchange.main import create_app


@pytest.fixture
def settings():
    return Settings(_env_file=None, database_url=None, log_format="text")


@pytest.fixture
def store():
    return MemoryLedgerStore.seeded()


@pytest.fixture
def app(settings, store):
    return create_app(settings, store)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def logged_in_client(client):
    """Client holding a session cookie for a freshly registered user."""
    res = await client.post(
        "/api/register", json={"username": "alice", "password": "s3cret-pass"},
    )
    assert res.status_code == 201
    return client
