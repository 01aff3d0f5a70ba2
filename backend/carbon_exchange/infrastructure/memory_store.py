"""In-Memory Ledger Store - process-local users, projects and credit records.

Invariants:
    - One monotonically increasing counter assigns ids to users and credits
    - Credits are append-only; get_user_credits returns insertion order
    - Records are frozen; balance updates replace the User record
    - apply_settlement writes balance and credit with no await in between,
      so no other coroutine can observe one without the other

Design Decisions:
    - Explicitly constructed object owned by the app (no module-level singleton);
      state is lost on restart
"""

import logging
from decimal import Decimal
from typing import Iterable

from carbon_exchange.core.errors import ConcurrencyError, ConflictError, NotFoundError
from carbon_exchange.core.money import quantize_money
from carbon_exchange.core.seed import SEED_PROJECTS
from carbon_exchange.schemas.ledger import Credit, NewCredit, Project, User

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_BALANCE = Decimal("1000")


class MemoryLedgerStore:
    """LedgerStore backed by dicts."""

    def __init__(
        self,
        projects: Iterable[Project] = (),
        initial_balance: Decimal = DEFAULT_INITIAL_BALANCE,
    ):
        self._users: dict[int, User] = {}
        self._credits: dict[int, Credit] = {}
        self._projects: dict[int, Project] = {p.id: p for p in projects}
        self._initial_balance = quantize_money(initial_balance)
        self.current_id = 1

    @classmethod
    def seeded(
        cls, initial_balance: Decimal = DEFAULT_INITIAL_BALANCE,
    ) -> "MemoryLedgerStore":
        """Store preloaded with the seed catalog."""
        store = cls(initial_balance=initial_balance)
        store._seed()
        return store

    async def initialize(self, seed: bool = True) -> None:
        """Seed the catalog into an empty store."""
        if seed and not self._projects:
            self._seed()

    async def close(self) -> None:
        pass

    def _seed(self) -> None:
        for data in SEED_PROJECTS:
            project = Project(**data)
            self._projects[project.id] = project

    def _next_id(self) -> int:
        allocated = self.current_id
        self.current_id += 1
        return allocated

    # ─── Users ───────────────────────────────────────────────────

    async def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return next(
            (u for u in self._users.values() if u.username == username), None,
        )

    async def create_user(self, username: str, password: str) -> User:
        if await self.get_user_by_username(username) is not None:
            raise ConflictError("Username already exists")
        user = User(
            id=self._next_id(), username=username,
            password=password, balance=self._initial_balance,
        )
        self._users[user.id] = user
        logger.info(f"User {user.id} created", extra={"user_id": user.id})
        return user

    async def update_user_balance(self, user_id: int, balance: Decimal) -> None:
        """Replace the stored balance. No-op for an unknown user."""
        user = self._users.get(user_id)
        if user is None:
            return
        self._users[user_id] = user.model_copy(
            update={"balance": quantize_money(balance)},
        )

    # ─── Projects ────────────────────────────────────────────────

    async def get_projects(self) -> list[Project]:
        return list(self._projects.values())

    async def get_project(self, project_id: int) -> Project | None:
        return self._projects.get(project_id)

    async def add_project(self, project: Project) -> Project:
        self._projects[project.id] = project
        return project

    # ─── Credits ─────────────────────────────────────────────────

    async def create_credit(self, credit: NewCredit) -> Credit:
        record = Credit(id=self._next_id(), **credit.model_dump())
        self._credits[record.id] = record
        return record

    async def get_user_credits(self, user_id: int) -> list[Credit]:
        return [c for c in self._credits.values() if c.user_id == user_id]

    async def apply_settlement(
        self,
        user_id: int,
        expected_balance: Decimal,
        new_balance: Decimal,
        credit: NewCredit,
    ) -> Credit:
        """Balance update + ledger append as one step. Raises before any write."""
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User")
        if user.balance != expected_balance:
            raise ConcurrencyError()
        record = Credit(id=self._next_id(), **credit.model_dump())
        self._users[user_id] = user.model_copy(
            update={"balance": quantize_money(new_balance)},
        )
        self._credits[record.id] = record
        return record

    async def ping(self) -> bool:
        return True
