"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProjectId, CreditId wrap ints - identifiers are unique per entity
    - Money and CreditAmount are Decimal, never float
    - TradeType has exactly two members

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON as their value without custom encoders
"""

from decimal import Decimal
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
ProjectId = NewType("ProjectId", int)
CreditId = NewType("CreditId", int)


# ─── Value Types ─────────────────────────────────────────────────

Money = NewType("Money", Decimal)               # currency units, 2 places
CreditAmount = NewType("CreditAmount", Decimal)  # fractional credits, > 0


# ─── Enums ───────────────────────────────────────────────────────

class TradeType(str, Enum):
    """Direction of a settled trade, as stored on the ledger record."""
    BUY = "buy"
    SELL = "sell"
