"""Credit Position - tests for net position and running history.

Tests cover:
    - net_position sums buys minus sells
    - net_position is order-independent
    - position_history replays by timestamp and breaks ties by id
    - empty ledger yields zero and no history
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from carbon_exchange.core.credit_position import net_position, position_history

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@dataclass
class _Credit:
    id: int
    amount: Decimal
    type: str
    timestamp: datetime
    project_id: int = 1
    user_id: int = 1
    price: Decimal = Decimal("25")


def _ledger():
    return [
        _Credit(1, Decimal("10"), "buy", T0),
        _Credit(2, Decimal("4"), "sell", T0 + timedelta(minutes=1)),
        _Credit(3, Decimal("2.5"), "buy", T0 + timedelta(minutes=2)),
    ]


def test_net_position_buys_minus_sells():
    assert net_position(_ledger()) == Decimal("8.5")


def test_net_position_is_order_independent():
    assert net_position(reversed(_ledger())) == net_position(_ledger())


def test_net_position_empty_is_zero():
    assert net_position([]) == Decimal("0")


def test_net_position_can_go_negative():
    assert net_position([_Credit(1, Decimal("3"), "sell", T0)]) == Decimal("-3")


def test_position_history_is_running_total_in_time_order():
    history = position_history(list(reversed(_ledger())))
    assert [pos for _, pos in history] == [
        Decimal("10"), Decimal("6"), Decimal("8.5"),
    ]
    assert history[0][0] == T0


def test_position_history_ties_broken_by_id():
    credits = [
        _Credit(5, Decimal("1"), "sell", T0),
        _Credit(4, Decimal("3"), "buy", T0),
    ]
    assert [pos for _, pos in position_history(credits)] == [
        Decimal("3"), Decimal("2"),
    ]


def test_position_history_empty():
    assert position_history([]) == []
