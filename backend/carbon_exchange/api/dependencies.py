"""Request Dependencies - access to the per-app store, services and caller identity.

Invariants:
    - Everything is read from request.app.state (set up by create_app)
    - get_current_user raises AuthenticationError (401) without a live session
"""

from fastapi import Depends, Request

from carbon_exchange.config import Settings
from carbon_exchange.core.repository_protocols import LedgerStore, UserLike
from carbon_exchange.services.auth import AuthService
from carbon_exchange.services.settlement import SettlementService


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> LedgerStore:
    return request.app.state.store


def get_settlement_service(request: Request) -> SettlementService:
    return request.app.state.settlement


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_session_token(
    request: Request, settings: Settings = Depends(get_settings_from_app),
) -> str | None:
    return request.cookies.get(settings.session_cookie_name)


async def get_current_user(
    token: str | None = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> UserLike:
    return await auth.authenticate(token)
