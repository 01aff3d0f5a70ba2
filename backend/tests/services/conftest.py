"""Service test fixtures - SQL ledger store over in-memory SQLite.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the schema created
    - The catalog is seeded through the store itself (seed_projects)

Design Decisions:
    - SQLite in-memory: no external dependency; PostgreSQL-specific features not exercised
"""

import pytest

from carbon_exchange.infrastructure.database import DatabaseSessionManager
from carbon_exchange.infrastructure.sql_store import SqlLedgerStore


@pytest.fixture
async def sql_store():
    db = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    store = SqlLedgerStore(db)
    await store.initialize(seed=True)
    yield store
    await store.close()
