"""Trade Submission - POST /api/trade settles one buy or sell for the caller.

Invariants:
    - Caller identity comes from the session, never from the body
    - Responses: 200 Credit | 400 "Missing required fields" | 404 "Project not found"
      | 400 "Insufficient balance" | 401 | 500 "Internal server error"
    - Unexpected failures are logged with traceback and surfaced as InternalError
"""

import logging

from fastapi import APIRouter, Depends

from carbon_exchange.api.dependencies import get_current_user, get_settlement_service
from carbon_exchange.core.errors import CarbonExchangeError, ErrorContext, InternalError
from carbon_exchange.core.repository_protocols import UserLike
from carbon_exchange.schemas.ledger import Credit
from carbon_exchange.schemas.requests import TradeRequest
from carbon_exchange.services.settlement import SettlementService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/trade", tags=["trade"])


@router.post("", response_model=Credit)
async def submit_trade(
    body: TradeRequest | None = None,
    user: UserLike = Depends(get_current_user),
    settlement: SettlementService = Depends(get_settlement_service),
):
    body = body or TradeRequest()
    try:
        return await settlement.settle_trade(
            user.id, body.project_id, body.amount, body.type,
        )
    except CarbonExchangeError:
        raise
    except Exception as e:
        logger.error(f"Trade error: {e}", exc_info=True, extra={"user_id": user.id})
        raise InternalError(ErrorContext(user_id=user.id))
