"""Request Bodies - trade and credential payloads.

Invariants:
    - Fields are optional and loosely typed here; presence and value rules
      live in core/enforce_trade.py and services/auth.py so the client gets
      the exact plain-text messages it expects
"""

from pydantic import BaseModel, ConfigDict, Field


class TradeRequest(BaseModel):
    """POST /api/trade body."""
    model_config = ConfigDict(populate_by_name=True)

    project_id: int | str | None = Field(None, alias="projectId")
    amount: int | float | str | None = None
    type: str | None = None


class Credentials(BaseModel):
    """POST /api/register and /api/login body."""
    username: str | None = Field(None, max_length=100)
    password: str | None = Field(None, max_length=200)
