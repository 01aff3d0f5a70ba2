"""Trade Settlement - verifies balance math, ledger records and all-or-nothing failure.

Tests cover:
    - buy 10 @ 25 from 1000 -> 750.00 with one buy record
    - sell 4 afterwards -> 850.00, both records returned in creation order
    - buy over balance rejected, state unchanged
    - unknown project / unknown user rejected, state unchanged
    - invalid input rejected before any store access
    - concurrent buys for one user cannot double-spend
    - stale expected balance surfaces ConcurrencyError without writing
    - oversized amounts rejected as 400-class errors, never arithmetic failures
    - per-user locks are dropped once no settlement holds them
"""

import asyncio
import gc
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from carbon_exchange.core.domain_types import TradeType
from carbon_exchange.core.errors import (
    ConcurrencyError, InsufficientBalanceError, NotFoundError, ValidationError,
)
from carbon_exchange.infrastructure.memory_store import MemoryLedgerStore
from carbon_exchange.services.settlement import SettlementService

FIXED_NOW = datetime(2026, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def service(store):
    return SettlementService(store, clock=lambda: FIXED_NOW)


@pytest.fixture
async def user(store):
    return await store.create_user("alice", "hash.salt")


async def test_buy_debits_balance_and_records_credit(service, store, user):
    credit = await service.settle_trade(user.id, 1, "10", "buy")

    assert (await store.get_user(user.id)).balance == Decimal("750.00")
    assert credit.amount == Decimal("10")
    assert credit.price == Decimal("25")
    assert credit.type is TradeType.BUY
    assert credit.project_id == 1
    assert credit.user_id == user.id
    assert credit.timestamp == FIXED_NOW
    assert await store.get_user_credits(user.id) == [credit]


async def test_sell_after_buy_credits_balance(service, store, user):
    bought = await service.settle_trade(user.id, 1, 10, "buy")
    sold = await service.settle_trade(user.id, 1, 4, "sell")

    assert (await store.get_user(user.id)).balance == Decimal("850.00")
    assert sold.type is TradeType.SELL
    assert await store.get_user_credits(user.id) == [bought, sold]


async def test_buy_over_balance_changes_nothing(service, store, user):
    await store.update_user_balance(user.id, Decimal("100.00"))

    with pytest.raises(InsufficientBalanceError):
        await service.settle_trade(user.id, 1, 10, "buy")

    assert (await store.get_user(user.id)).balance == Decimal("100.00")
    assert await store.get_user_credits(user.id) == []


async def test_buy_of_exact_balance_allowed(service, store, user):
    await store.update_user_balance(user.id, Decimal("250.00"))
    await service.settle_trade(user.id, 1, 10, "buy")
    assert (await store.get_user(user.id)).balance == Decimal("0.00")


async def test_sell_is_not_limited_by_holdings(service, store, user):
    """Selling credits never bought is accepted (no holding check)."""
    await service.settle_trade(user.id, 2, 1000, "sell")
    assert (await store.get_user(user.id)).balance == Decimal("21000.00")


async def test_project_inventory_not_decremented(service, store, user):
    before = (await store.get_project(1)).credits
    await service.settle_trade(user.id, 1, 10, "buy")
    assert (await store.get_project(1)).credits == before


async def test_unknown_project_changes_nothing(service, store, user):
    with pytest.raises(NotFoundError) as exc:
        await service.settle_trade(user.id, 99, 1, "buy")
    assert exc.value.message == "Project not found"
    assert (await store.get_user(user.id)).balance == Decimal("1000.00")
    assert await store.get_user_credits(user.id) == []


async def test_unknown_user_rejected(service):
    with pytest.raises(NotFoundError) as exc:
        await service.settle_trade(404, 1, 1, "buy")
    assert exc.value.message == "User not found"


async def test_missing_fields_rejected(service, store, user):
    with pytest.raises(ValidationError) as exc:
        await service.settle_trade(user.id, 1, None, "buy")
    assert exc.value.message == "Missing required fields"
    assert await store.get_user_credits(user.id) == []


async def test_fractional_amount_rounds_total_half_even(service, store, user):
    # 0.0050 * 25 = 0.125 -> 0.12
    await service.settle_trade(user.id, 1, "0.005", "buy")
    assert (await store.get_user(user.id)).balance == Decimal("999.88")


class _YieldingStore(MemoryLedgerStore):
    """Suspends on every balance read so concurrent settlements interleave."""

    async def get_user(self, user_id):
        await asyncio.sleep(0)
        return await super().get_user(user_id)


async def test_concurrent_buys_cannot_double_spend():
    store = _YieldingStore.seeded()
    user = await store.create_user("bob", "hash.salt")
    service = SettlementService(store)

    # each buy costs 750; only one fits in 1000
    results = await asyncio.gather(
        service.settle_trade(user.id, 1, 30, "buy"),
        service.settle_trade(user.id, 1, 30, "buy"),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], InsufficientBalanceError)
    assert (await store.get_user(user.id)).balance == Decimal("250.00")
    assert len(await store.get_user_credits(user.id)) == 1


async def test_locks_are_per_user(service):
    assert service.lock_for(1) is service.lock_for(1)
    assert service.lock_for(1) is not service.lock_for(2)


class _StaleStore(MemoryLedgerStore):
    """Reports a balance that no longer matches what apply_settlement sees."""

    async def get_user(self, user_id):
        user = await super().get_user(user_id)
        return user.model_copy(update={"balance": Decimal("5000")}) if user else None


async def test_stale_balance_raises_concurrency_error_without_writing():
    store = _StaleStore.seeded()
    user = await store.create_user("carol", "hash.salt")
    service = SettlementService(store)

    with pytest.raises(ConcurrencyError):
        await service.settle_trade(user.id, 1, 1, "buy")

    assert await store.get_user_credits(user.id) == []


async def test_lock_released_after_settlement(service, store, user):
    await service.settle_trade(user.id, 1, 1, "buy")
    gc.collect()
    assert user.id not in service._locks


async def test_huge_buy_is_insufficient_balance(service, store, user):
    with pytest.raises(InsufficientBalanceError):
        await service.settle_trade(user.id, 1, "1e30", "buy")
    assert (await store.get_user(user.id)).balance == Decimal("1000.00")


async def test_sell_past_ledger_limit_rejected(service, store, user):
    with pytest.raises(ValidationError) as exc:
        await service.settle_trade(user.id, 1, "1e30", "sell")
    assert exc.value.message == "Invalid amount"
    assert (await store.get_user(user.id)).balance == Decimal("1000.00")
    assert await store.get_user_credits(user.id) == []
