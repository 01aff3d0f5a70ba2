"""Authentication Routes - register, login, logout and current user.

Invariants:
    - Session token travels only in an httponly cookie
    - Responses never include the password hash (UserPublic)
    - Logout always succeeds, with or without a session
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from carbon_exchange.api.dependencies import (
    get_auth_service, get_current_user, get_session_token, get_settings_from_app,
)
from carbon_exchange.config import Settings
from carbon_exchange.core.repository_protocols import UserLike
from carbon_exchange.schemas.ledger import UserPublic
from carbon_exchange.schemas.requests import Credentials
from carbon_exchange.services.auth import AuthService

router = APIRouter(prefix="/api", tags=["auth"])


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name, token,
        max_age=settings.session_ttl_seconds,
        httponly=True, samesite="lax",
        secure=settings.session_cookie_secure,
    )


@router.post(
    "/register", response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    response: Response,
    body: Credentials | None = None,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_from_app),
):
    body = body or Credentials()
    user, token = await auth.register(body.username, body.password)
    _set_session_cookie(response, token, settings)
    return UserPublic.from_user(user)


@router.post("/login", response_model=UserPublic)
async def login(
    response: Response,
    body: Credentials | None = None,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_from_app),
):
    body = body or Credentials()
    user, token = await auth.login(body.username, body.password)
    _set_session_cookie(response, token, settings)
    return UserPublic.from_user(user)


@router.post("/logout")
async def logout(
    token: str | None = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_from_app),
):
    auth.logout(token)
    response = PlainTextResponse("OK")
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/user", response_model=UserPublic)
async def current_user(user: UserLike = Depends(get_current_user)):
    return UserPublic.from_user(user)
