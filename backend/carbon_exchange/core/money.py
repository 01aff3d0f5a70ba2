"""Money Arithmetic - Decimal conversion and the canonical rounding rule.

Invariants:
    - Every computed total and stored balance is quantized to MONEY_QUANTUM
      with ROUND_HALF_EVEN
    - Floats enter through str() so 0.1 stays 0.1
    - Non-finite values (NaN, Infinity) are rejected
    - Money math runs at MONEY_PRECISION digits, enough for any order below
      MAX_ORDER_AMOUNT, so quantize never overflows the context
    - Credit amounts carry at most CREDIT_PLACES decimal places
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, localcontext

from carbon_exchange.core.domain_types import Money


MONEY_QUANTUM = Decimal("0.01")
MONEY_PRECISION = 80
CREDIT_PLACES = 4
MAX_ORDER_AMOUNT = Decimal("1e40")


def to_decimal(value: object) -> Decimal | None:
    """Parse int/float/str/Decimal into a finite Decimal. Returns None if unparseable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def quantize_money(value: Decimal) -> Money:
    with localcontext(prec=MONEY_PRECISION):
        return Money(value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_EVEN))


def trade_total(amount: Decimal, price: Decimal) -> Money:
    """amount × price, rounded half-even to cents."""
    with localcontext(prec=MONEY_PRECISION):
        return quantize_money(amount * price)


def within_credit_scale(value: Decimal) -> bool:
    """True when value has no significant digit past CREDIT_PLACES decimals."""
    _, digits, exponent = value.as_tuple()
    excess = -CREDIT_PLACES - exponent
    if excess <= 0:
        return True
    return not any(digits[-excess:])
