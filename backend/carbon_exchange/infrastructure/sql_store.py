"""SQL Ledger Store - LedgerStore over SQLAlchemy async sessions.

Invariants:
    - Every public method uses its own session (no session shared across requests)
    - apply_settlement is ONE transaction: conditional balance UPDATE + credit INSERT
    - The balance UPDATE matches on the expected balance (compare-and-swap); zero rows
      updated means another writer got there first -> ConcurrencyError, nothing committed
    - Rows are converted to frozen schema records before leaving the store
    - Written credits are re-read from the database, so callers see the stored values
    - Username uniqueness is enforced by the unique index; a violation is a ConflictError

Design Decisions:
    - Compare-and-swap on balance rather than SELECT ... FOR UPDATE (also runs on SQLite)
"""

import logging
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from carbon_exchange.core.domain_types import TradeType
from carbon_exchange.core.errors import ConcurrencyError, ConflictError, NotFoundError
from carbon_exchange.core.money import quantize_money
from carbon_exchange.core.seed import SEED_PROJECTS
from carbon_exchange.infrastructure.database import DatabaseSessionManager
from carbon_exchange.infrastructure.memory_store import DEFAULT_INITIAL_BALANCE
from carbon_exchange.models.credit import CreditRow
from carbon_exchange.models.project import ProjectRow
from carbon_exchange.models.user import UserRow
from carbon_exchange.schemas.ledger import Credit, NewCredit, Project, User

logger = logging.getLogger(__name__)


class SqlLedgerStore:
    """LedgerStore backed by a relational database."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        initial_balance: Decimal = DEFAULT_INITIAL_BALANCE,
    ):
        self._db = db
        self._initial_balance = quantize_money(initial_balance)

    async def initialize(self, seed: bool = True) -> None:
        """Create tables if missing and seed the catalog into an empty projects table."""
        await self._db.create_schema()
        if seed:
            await self.seed_projects()

    async def seed_projects(self) -> int:
        """Insert SEED_PROJECTS when no project exists. Returns rows inserted."""
        async with self._db.session() as db:
            count = await db.scalar(select(func.count()).select_from(ProjectRow))
            if count:
                return 0
            for data in SEED_PROJECTS:
                db.add(ProjectRow(**Project(**data).model_dump()))
            await db.commit()
        logger.info(f"Seeded {len(SEED_PROJECTS)} projects")
        return len(SEED_PROJECTS)

    async def close(self) -> None:
        await self._db.dispose()

    # ─── Users ───────────────────────────────────────────────────

    async def get_user(self, user_id: int) -> User | None:
        async with self._db.session() as db:
            row = await db.get(UserRow, user_id)
            return _to_user(row) if row else None

    async def get_user_by_username(self, username: str) -> User | None:
        async with self._db.session() as db:
            row = await db.scalar(
                select(UserRow).where(UserRow.username == username),
            )
            return _to_user(row) if row else None

    async def create_user(self, username: str, password: str) -> User:
        async with self._db.session() as db:
            row = UserRow(
                username=username, password=password,
                balance=self._initial_balance,
            )
            db.add(row)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise ConflictError("Username already exists")
            logger.info(f"User {row.id} created", extra={"user_id": row.id})
            return _to_user(row)

    async def update_user_balance(self, user_id: int, balance: Decimal) -> None:
        """Replace the stored balance. No-op for an unknown user."""
        async with self._db.session() as db:
            await db.execute(
                update(UserRow)
                .where(UserRow.id == user_id)
                .values(balance=quantize_money(balance)),
            )
            await db.commit()

    # ─── Projects ────────────────────────────────────────────────

    async def get_projects(self) -> list[Project]:
        async with self._db.session() as db:
            rows = await db.scalars(select(ProjectRow).order_by(ProjectRow.id))
            return [_to_project(r) for r in rows]

    async def get_project(self, project_id: int) -> Project | None:
        async with self._db.session() as db:
            row = await db.get(ProjectRow, project_id)
            return _to_project(row) if row else None

    async def add_project(self, project: Project) -> Project:
        async with self._db.session() as db:
            db.add(ProjectRow(**project.model_dump()))
            await db.commit()
        return project

    # ─── Credits ─────────────────────────────────────────────────

    async def create_credit(self, credit: NewCredit) -> Credit:
        async with self._db.session() as db:
            row = _to_row(credit)
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return _to_credit(row)

    async def get_user_credits(self, user_id: int) -> list[Credit]:
        async with self._db.session() as db:
            rows = await db.scalars(
                select(CreditRow)
                .where(CreditRow.user_id == user_id)
                .order_by(CreditRow.id),
            )
            return [_to_credit(r) for r in rows]

    async def apply_settlement(
        self,
        user_id: int,
        expected_balance: Decimal,
        new_balance: Decimal,
        credit: NewCredit,
    ) -> Credit:
        """Balance CAS + ledger insert in one transaction."""
        async with self._db.session() as db:
            async with db.begin():
                result = await db.execute(
                    update(UserRow)
                    .where(
                        UserRow.id == user_id,
                        UserRow.balance == expected_balance,
                    )
                    .values(balance=quantize_money(new_balance)),
                )
                if result.rowcount == 0:
                    if await db.get(UserRow, user_id) is None:
                        raise NotFoundError("User")
                    raise ConcurrencyError()
                row = _to_row(credit)
                db.add(row)
                await db.flush()
                await db.refresh(row)
            return _to_credit(row)

    async def ping(self) -> bool:
        return await self._db.health_check()


# ─── Row mapping ─────────────────────────────────────────────────

def _to_user(row: UserRow) -> User:
    return User(
        id=row.id, username=row.username,
        password=row.password, balance=row.balance,
    )


def _to_project(row: ProjectRow) -> Project:
    return Project(
        id=row.id, name=row.name, description=row.description,
        location=row.location, credits=row.credits, price=row.price,
        image_url=row.image_url,
    )


def _to_row(credit: NewCredit) -> CreditRow:
    return CreditRow(
        project_id=credit.project_id, user_id=credit.user_id,
        amount=credit.amount, price=credit.price,
        type=TradeType(credit.type).value, timestamp=credit.timestamp,
    )


def _to_credit(row: CreditRow) -> Credit:
    return Credit(
        id=row.id, project_id=row.project_id, user_id=row.user_id,
        amount=row.amount, price=row.price, type=TradeType(row.type),
        timestamp=row.timestamp,
    )
