"""Ledger Records - verifies JSON shape and immutability of schema records.

Tests:
    - Project/Credit dump with camelCase keys and Decimal-as-string values
    - Records are frozen
    - Credit amount must be strictly positive
    - UserPublic never carries the password
    - TradeRequest accepts the camelCase projectId key
"""

from datetime import datetime, timezone
from decimal import Decimal

import pydantic
import pytest

from carbon_exchange.core.domain_types import TradeType
from carbon_exchange.schemas.ledger import Credit, NewCredit, Project, User, UserPublic
from carbon_exchange.schemas.requests import TradeRequest

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _credit(**overrides):
    data = dict(
        id=5, project_id=1, user_id=2, amount=Decimal("10"),
        price=Decimal("25"), type=TradeType.BUY, timestamp=NOW,
    )
    data.update(overrides)
    return Credit(**data)


def test_credit_dumps_camel_case_with_string_decimals():
    body = _credit().model_dump(mode="json", by_alias=True)
    assert body["projectId"] == 1
    assert body["userId"] == 2
    assert body["amount"] == "10"
    assert body["price"] == "25"
    assert body["type"] == "buy"
    assert body["id"] == 5


def test_project_dumps_image_url_alias():
    project = Project(
        id=1, name="N", description="D", location="L",
        credits=Decimal("10000"), price=Decimal("25"), image_url="http://img",
    )
    body = project.model_dump(mode="json", by_alias=True)
    assert body["imageUrl"] == "http://img"
    assert "image_url" not in body


def test_records_are_frozen():
    credit = _credit()
    with pytest.raises(pydantic.ValidationError):
        credit.amount = Decimal("1")


def test_credit_amount_must_be_positive():
    with pytest.raises(pydantic.ValidationError):
        NewCredit(
            project_id=1, user_id=1, amount=Decimal("0"),
            price=Decimal("25"), type=TradeType.BUY, timestamp=NOW,
        )


def test_credit_type_limited_to_buy_or_sell():
    with pytest.raises(pydantic.ValidationError):
        _credit(type="hold")


def test_user_public_drops_password():
    user = User(id=1, username="alice", password="hash.salt", balance=Decimal("1000"))
    body = UserPublic.from_user(user).model_dump(by_alias=True)
    assert body == {"id": 1, "username": "alice", "balance": Decimal("1000")}


def test_trade_request_reads_camel_case_project_id():
    req = TradeRequest.model_validate({"projectId": 1, "amount": 10, "type": "buy"})
    assert req.project_id == 1
    assert req.amount == 10
    assert req.type == "buy"


def test_trade_request_fields_optional():
    req = TradeRequest.model_validate({})
    assert req.project_id is None and req.amount is None and req.type is None
