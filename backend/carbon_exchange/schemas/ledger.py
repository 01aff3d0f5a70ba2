"""Ledger Records - users, projects and credit records as immutable pydantic models.

Invariants:
    - Records are frozen; stores replace them (model_copy) instead of mutating
    - Credit.amount > 0 and Credit.type is buy | sell
    - User.password is a salted hash and never leaves the process (see UserPublic)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from carbon_exchange.core.domain_types import TradeType


class LedgerRecord(BaseModel):
    """Shared config: camelCase aliases, construction by field name, frozen."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )


class User(LedgerRecord):
    id: int
    username: str
    password: str
    balance: Decimal


class UserPublic(LedgerRecord):
    """User as returned to the client - no credential."""
    id: int
    username: str
    balance: Decimal

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(id=user.id, username=user.username, balance=user.balance)


class Project(LedgerRecord):
    """Conservation project listing. credits is informational only."""
    id: int
    name: str
    description: str
    location: str
    credits: Decimal
    price: Decimal
    image_url: str


class NewCredit(LedgerRecord):
    """Credit record before the store assigns an id."""
    project_id: int
    user_id: int
    amount: Decimal = Field(gt=0)
    price: Decimal
    type: TradeType
    timestamp: datetime


class Credit(NewCredit):
    """One settled trade on the append-only ledger."""
    id: int


class PositionPoint(LedgerRecord):
    timestamp: datetime
    position: Decimal


class CreditSummary(LedgerRecord):
    """Net credit position plus the running series the dashboard chart plots."""
    net_position: Decimal
    history: list[PositionPoint]
