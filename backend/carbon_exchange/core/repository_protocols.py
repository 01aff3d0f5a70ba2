"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell - dependency arrows point inward only
    - Ledger persistence accessed through the LedgerStore Protocol
    - Implementations (memory, SQL) provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async methods: the SQL implementation does IO; the memory one simply never awaits
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol, Sequence


class UserLike(Protocol):
    id: int
    username: str
    password: str
    balance: Decimal


class ProjectLike(Protocol):
    id: int
    name: str
    price: Decimal
    credits: Decimal


class NewCreditLike(Protocol):
    project_id: int
    user_id: int
    amount: Decimal
    price: Decimal
    type: str
    timestamp: datetime


class CreditLike(NewCreditLike, Protocol):
    """Structural contract for ledger records consumed by pure position math."""
    id: int


class LedgerStore(Protocol):
    """Contract for user/project/credit persistence - implemented by shell."""
    async def get_user(self, user_id: int) -> UserLike | None: ...
    async def get_user_by_username(self, username: str) -> UserLike | None: ...
    async def create_user(self, username: str, password: str) -> UserLike: ...
    async def get_projects(self) -> Sequence[ProjectLike]: ...
    async def get_project(self, project_id: int) -> ProjectLike | None: ...
    async def add_project(self, project: ProjectLike) -> ProjectLike: ...
    async def create_credit(self, credit: NewCreditLike) -> CreditLike: ...
    async def get_user_credits(self, user_id: int) -> Sequence[CreditLike]: ...
    async def update_user_balance(self, user_id: int, balance: Decimal) -> None: ...
    async def apply_settlement(
        self,
        user_id: int,
        expected_balance: Decimal,
        new_balance: Decimal,
        credit: NewCreditLike,
    ) -> CreditLike: ...
    async def initialize(self, seed: bool = True) -> None: ...
    async def close(self) -> None: ...
    async def ping(self) -> bool: ...
