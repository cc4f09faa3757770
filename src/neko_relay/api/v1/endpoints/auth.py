# src/neko_relay/api/v1/endpoints/auth.py
"""Authentication endpoints for the Neko relay API."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from neko_relay.api.v1.dependencies import RelayDep, TokenDep, raise_http_error
from neko_relay.core.settings import settings
from neko_relay.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from neko_relay.services.errors import RelayError
from neko_relay.services.relay import UserView

router = APIRouter(prefix="/auth", tags=["authentication"])


def _user_response(view: UserView) -> UserResponse:
    return UserResponse(
        user_id=view.user_id,
        username=view.username,
        reward_balance=view.reward_balance,
    )


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
)
async def register_user(payload: RegisterRequest, relay: RelayDep) -> UserResponse:
    """Create an account with a zero reward balance."""
    try:
        view = await relay.register(payload.username, payload.password)
    except RelayError as err:
        raise_http_error(err)
    return _user_response(view)


@router.post(
    "/login",
    summary="Authenticate with username and password",
    response_model=LoginResponse,
)
async def login_user(payload: LoginRequest, response: Response, relay: RelayDep) -> LoginResponse:
    """Open a new session; earlier sessions of the same user stay valid."""
    try:
        result = await relay.login(payload.username, payload.password)
    except RelayError as err:
        raise_http_error(err)

    response.set_cookie(
        settings.session_cookie_name,
        result.token,
        httponly=True,
        samesite="lax",
        max_age=settings.session_ttl_minutes * 60,
    )
    return LoginResponse(
        token=result.token,
        user_id=result.user.user_id,
        username=result.user.username,
        reward_balance=result.user.reward_balance,
    )


@router.post("/logout", summary="End the current session")
async def logout_user(token: TokenDep, response: Response, relay: RelayDep) -> dict[str, bool]:
    """Revoke the session. Logging out twice is not an error."""
    relay.logout(token)
    response.delete_cookie(settings.session_cookie_name)
    return {"ok": True}


@router.get("/me", summary="Describe the current user", response_model=UserResponse)
async def who_am_i(token: TokenDep, relay: RelayDep) -> UserResponse:
    """Return the caller's identity and current reward balance."""
    try:
        view = relay.who_am_i(token)
    except RelayError as err:
        raise_http_error(err)
    return _user_response(view)
