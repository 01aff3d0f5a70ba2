"""Credit Position - net holdings derived from a user's ledger records.

Invariants:
    - net_position = sum(buy amounts) - sum(sell amounts), independent of order
    - position_history replays records by (timestamp, id); one point per record
    - Pure: no IO, inputs are never mutated
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from carbon_exchange.core.domain_types import TradeType
from carbon_exchange.core.repository_protocols import CreditLike


def signed_amount(credit: CreditLike) -> Decimal:
    """+amount for a buy, -amount for a sell."""
    if TradeType(credit.type) is TradeType.BUY:
        return credit.amount
    return -credit.amount


def net_position(credits: Iterable[CreditLike]) -> Decimal:
    return sum((signed_amount(c) for c in credits), Decimal("0"))


def position_history(
    credits: Iterable[CreditLike],
) -> list[tuple[datetime, Decimal]]:
    """Running position after each record, oldest first."""
    ordered = sorted(credits, key=lambda c: (c.timestamp, c.id))
    history: list[tuple[datetime, Decimal]] = []
    running = Decimal("0")
    for credit in ordered:
        running += signed_amount(credit)
        history.append((credit.timestamp, running))
    return history
