"""Credit Ledger - the caller's trade records and derived position (authenticated).

Invariants:
    - Only the authenticated caller's records are ever returned
    - Records come back in creation order
"""

from fastapi import APIRouter, Depends

from carbon_exchange.api.dependencies import get_current_user, get_store
from carbon_exchange.core.credit_position import net_position, position_history
from carbon_exchange.core.repository_protocols import LedgerStore, UserLike
from carbon_exchange.schemas.ledger import Credit, CreditSummary, PositionPoint

router = APIRouter(prefix="/api/credits", tags=["credits"])


@router.get("", response_model=list[Credit])
async def list_credits(
    user: UserLike = Depends(get_current_user),
    store: LedgerStore = Depends(get_store),
):
    return await store.get_user_credits(user.id)


@router.get("/summary", response_model=CreditSummary)
async def credit_summary(
    user: UserLike = Depends(get_current_user),
    store: LedgerStore = Depends(get_store),
):
    """Net credit position and its running history."""
    credits = await store.get_user_credits(user.id)
    return CreditSummary(
        net_position=net_position(credits),
        history=[
            PositionPoint(timestamp=ts, position=pos)
            for ts, pos in position_history(credits)
        ],
    )
