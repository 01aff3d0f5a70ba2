"""Trade Enforcement - pure validation and balance rules for settlement.

Invariants:
    - check_trade_fields is PURE: parses raw request values, raises on bad input
    - Missing (absent, empty or zero) projectId/amount/type -> "Missing required fields"
    - A buy may spend the whole balance (total == balance is allowed)
    - Sells are never limited by prior holdings or project inventory
    - Amounts use at most four decimal places; amounts and resulting balances
      stay below the ledger column limits (MAX_CREDIT_AMOUNT, MAX_BALANCE)
"""

from dataclasses import dataclass
from decimal import Decimal, localcontext

from carbon_exchange.core.domain_types import CreditAmount, Money, ProjectId, TradeType
from carbon_exchange.core.errors import (
    ErrorContext, InsufficientBalanceError, NotFoundError, ValidationError,
)
from carbon_exchange.core.money import (
    MAX_ORDER_AMOUNT, MONEY_PRECISION, quantize_money, to_decimal, within_credit_scale,
)


MISSING_FIELDS_MESSAGE = "Missing required fields"
INVALID_AMOUNT_MESSAGE = "Invalid amount"

# credits.amount is NUMERIC(18, 4); users.balance is NUMERIC(18, 2)
MAX_CREDIT_AMOUNT = Decimal("1e14")
MAX_BALANCE = Decimal("1e16")


@dataclass(frozen=True)
class TradeOrder:
    """A validated trade request, ready to settle."""
    project_id: ProjectId
    amount: CreditAmount
    type: TradeType


def check_trade_fields(
    project_id: object, amount: object, trade_type: object,
) -> TradeOrder:
    """Validate raw trade input. Raises ValidationError or NotFoundError."""
    if _is_missing(project_id) or _is_missing(amount) or _is_missing(trade_type):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    try:
        parsed_type = TradeType(trade_type)
    except ValueError:
        raise ValidationError("Invalid trade type", field="type")

    parsed_amount = to_decimal(amount)
    if parsed_amount is None:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, field="amount")
    if parsed_amount <= 0:
        raise ValidationError("Amount must be positive", field="amount")
    if parsed_amount >= MAX_ORDER_AMOUNT or not within_credit_scale(parsed_amount):
        raise ValidationError(INVALID_AMOUNT_MESSAGE, field="amount")

    parsed_project_id = parse_project_id(project_id)
    if parsed_project_id is None:
        raise NotFoundError("Project")

    return TradeOrder(
        project_id=ProjectId(parsed_project_id),
        amount=CreditAmount(parsed_amount),
        type=parsed_type,
    )


def check_sufficient_balance(
    trade_type: TradeType, total: Decimal, balance: Decimal,
    context: ErrorContext | None = None,
) -> None:
    """Reject a buy whose total exceeds the current balance."""
    if trade_type is TradeType.BUY and total > balance:
        raise InsufficientBalanceError(
            required=total, available=balance, context=context,
        )


def settled_balance(
    trade_type: TradeType, balance: Decimal, total: Decimal,
) -> Money:
    """Balance after settlement: buy debits, sell credits."""
    with localcontext(prec=MONEY_PRECISION):
        if trade_type is TradeType.BUY:
            return quantize_money(balance - total)
        return quantize_money(balance + total)


def check_ledger_limits(
    amount: Decimal, new_balance: Decimal, context: ErrorContext | None = None,
) -> None:
    """Reject a trade whose amount or resulting balance the ledger cannot hold."""
    if amount >= MAX_CREDIT_AMOUNT or new_balance >= MAX_BALANCE:
        raise ValidationError(INVALID_AMOUNT_MESSAGE, field="amount", context=context)


def _is_missing(value: object) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def parse_project_id(value: object) -> int | None:
    """Integer id from an int or numeric string; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
