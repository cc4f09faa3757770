"""Shared API dependencies for authentication and error translation."""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from neko_relay.core.settings import settings
from neko_relay.services.errors import (
    DuplicateUsernameError,
    RelayError,
    UnauthorizedError,
)
from neko_relay.services.relay import ChatRelay, get_relay

# Cookie sessions are accepted too, so a missing header is not an error here.
bearer_scheme = HTTPBearer(auto_error=False)

RelayDep = Annotated[ChatRelay, Depends(get_relay)]


def raise_http_error(err: RelayError) -> NoReturn:
    """Translate a domain error into the matching HTTPException."""
    if isinstance(err, UnauthorizedError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=err.reason,
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    if isinstance(err, DuplicateUsernameError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=err.reason) from err
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=err.reason) from err


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Extract the session token from the bearer header or the session cookie.

    Raises:
        HTTPException: If neither carries a token
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    cookie_token = request.cookies.get(settings.session_cookie_name)
    if cookie_token:
        return cookie_token
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


TokenDep = Annotated[str, Depends(get_session_token)]
