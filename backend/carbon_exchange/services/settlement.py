"""Trade Settlement - validate a trade and apply its balance change + ledger record.

Invariants:
    - Settlement for one user is serialized by that user's asyncio.Lock
    - A lock lives only while some settlement holds or awaits it (weak map)
    - The balance check reads the stored balance under the lock, never a cached User
    - Balance update and credit insert go through store.apply_settlement (all-or-nothing)
    - A rejected trade leaves balance and ledger untouched
    - Project inventory and sell-side holdings are not checked
"""

import asyncio
import logging
import weakref
from datetime import datetime, timezone
from typing import Callable

from carbon_exchange.core.enforce_trade import (
    check_ledger_limits, check_sufficient_balance, check_trade_fields,
    settled_balance,
)
from carbon_exchange.core.errors import ErrorContext, NotFoundError
from carbon_exchange.core.money import trade_total
from carbon_exchange.core.repository_protocols import LedgerStore
from carbon_exchange.schemas.ledger import Credit, NewCredit

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SettlementService:
    """Settles buy/sell trades against a LedgerStore."""

    def __init__(
        self, store: LedgerStore, clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._clock = clock
        self._locks = weakref.WeakValueDictionary()

    def lock_for(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    async def settle_trade(
        self,
        user_id: int,
        project_id: object,
        amount: object,
        trade_type: object,
    ) -> Credit:
        """Settle one trade for user_id. Returns the new ledger record.

        Raises ValidationError, NotFoundError, InsufficientBalanceError, or
        ConcurrencyError (store changed underneath); nothing is written on error.
        """
        order = check_trade_fields(project_id, amount, trade_type)
        context = ErrorContext(user_id=user_id, project_id=order.project_id)

        async with self.lock_for(user_id):
            project = await self._store.get_project(order.project_id)
            if project is None:
                raise NotFoundError("Project", context)
            user = await self._store.get_user(user_id)
            if user is None:
                raise NotFoundError("User", context)

            total = trade_total(order.amount, project.price)
            check_sufficient_balance(order.type, total, user.balance, context)
            new_balance = settled_balance(order.type, user.balance, total)
            check_ledger_limits(order.amount, new_balance, context)

            credit = await self._store.apply_settlement(
                user_id,
                expected_balance=user.balance,
                new_balance=new_balance,
                credit=NewCredit(
                    project_id=project.id,
                    user_id=user_id,
                    amount=order.amount,
                    price=project.price,
                    type=order.type,
                    timestamp=self._clock(),
                ),
            )

        logger.info(
            f"Settled {order.type.value} of {order.amount} credits "
            f"on project {project.id} for {total}",
            extra={
                "user_id": user_id, "project_id": project.id,
                "trade_type": order.type.value, "amount": str(order.amount),
                "credit_id": credit.id,
            },
        )
        return credit
