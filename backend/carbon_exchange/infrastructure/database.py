"""Ledger Database - async engine and sessions for the SQL ledger store.

Invariants:
    - A session that raises is rolled back before the error leaves session()
    - SQLAlchemy failures leave as DatabaseError tagged with the ledger operation
      that failed; other exceptions (domain errors) pass through untouched
    - Owned by SqlLedgerStore: created with it, disposed by store.close()

Design Decisions:
    - expire_on_commit=False: ledger rows stay readable after the transaction closes
    - Pool sizing only applied to server databases (SQLite uses its own pool)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from carbon_exchange.core.errors import DatabaseError
from carbon_exchange.db.base import Base

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError subclass DBAPIError
_LEDGER_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "ledger constraint rejected the write", "write"),
    (OperationalError, "ledger database unreachable", "connect"),
    (DBAPIError, "ledger driver rejected the statement", "query"),
    (SQLAlchemyError, "ledger session failed", "session"),
)


def _to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for exc_type, message, operation in _LEDGER_FAILURES:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    return DatabaseError(str(exc), "session")


class DatabaseSessionManager:
    """Engine plus session factory for one ledger database."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One unit of ledger work; rolled back and closed on any failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = _to_database_error(e)
            logger.error(f"{error.message}: {e}", extra={"error_code": error.code})
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create missing ledger tables (development and tests; production uses alembic)."""
        import carbon_exchange.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """True when the ledger database answers a trivial query."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Ledger health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
