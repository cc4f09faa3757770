"""Session token issue, verification and revocation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from threading import Lock

from neko_relay.core import security
from neko_relay.models.session import Session
from neko_relay.models.user import User
from neko_relay.services.errors import InvalidOrExpiredTokenError
from neko_relay.services.identity import IdentityStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class SessionManager:
    """Issues and validates opaque bearer tokens bound to a user id.

    Each token moves Active -> Revoked exactly once, either through an explicit
    revoke or when a check finds it expired; there is no way back.
    """

    def __init__(
        self,
        identities: IdentityStore,
        *,
        secret_key: str,
        algorithm: str = "HS256",
        ttl_minutes: int = 60 * 24 * 7,
        clock: Clock = utc_now,
    ) -> None:
        self._identities = identities
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl_minutes = ttl_minutes
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = Lock()

    def create_session(self, user_id: str) -> str:
        """Issue a new token for ``user_id``; existing tokens stay valid."""
        now = self._clock()
        expires_at = security.session_expiry(now, self._ttl_minutes)
        token = security.mint_session_token(
            user_id,
            issued_at=now,
            expires_at=expires_at,
            secret_key=self._secret_key,
            algorithm=self._algorithm,
        )
        with self._lock:
            self._sessions[token] = Session(
                token=token,
                user_id=user_id,
                created_at=now,
                expires_at=expires_at,
            )
        return token

    def get_session(self, token: str) -> Session:
        """Return the live binding for ``token`` or raise InvalidOrExpiredTokenError."""
        if not token:
            raise InvalidOrExpiredTokenError()
        subject = security.decode_session_token(
            token,
            secret_key=self._secret_key,
            algorithm=self._algorithm,
        )
        if subject is None:
            raise InvalidOrExpiredTokenError()

        now = self._clock()
        with self._lock:
            session = self._sessions.get(token)
            if session is None or session.user_id != subject:
                raise InvalidOrExpiredTokenError()
            if session.is_expired(now):
                del self._sessions[token]
                logger.info("Evicted expired session for user %s", session.user_id)
                raise InvalidOrExpiredTokenError()
        return session

    def verify_session(self, token: str) -> User:
        """Resolve ``token`` to its user."""
        session = self.get_session(token)
        user = self._identities.get(session.user_id)
        if user is None:  # pragma: no cover - users are never deleted
            self.revoke_session(token)
            raise InvalidOrExpiredTokenError()
        return user

    def revoke_session(self, token: str) -> bool:
        """Remove ``token``; returns False if it was already gone."""
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def purge_expired(self) -> list[str]:
        """Drop every expired binding and return the revoked tokens."""
        now = self._clock()
        with self._lock:
            expired = [token for token, session in self._sessions.items() if session.is_expired(now)]
            for token in expired:
                del self._sessions[token]
        return expired

    def active_count(self, user_id: str | None = None) -> int:
        with self._lock:
            if user_id is None:
                return len(self._sessions)
            return sum(1 for session in self._sessions.values() if session.user_id == user_id)
