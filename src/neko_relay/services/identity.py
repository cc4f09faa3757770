"""User registration and credential verification."""

from __future__ import annotations

import logging
import secrets
from threading import Lock

from neko_relay.core import security
from neko_relay.models.user import User
from neko_relay.services.errors import (
    ChatValidationError,
    CredentialTooLongError,
    DuplicateUsernameError,
    InvalidCredentialError,
    WeakCredentialError,
)

logger = logging.getLogger(__name__)


class IdentityStore:
    """Thread-safe table of registered users.

    Hashing is CPU-bound, so callers on the event loop should run ``register``
    and ``authenticate`` in a worker thread. The table lock is only held for
    the lookups and the insert, never while hashing.
    """

    def __init__(self, *, min_credential_length: int = 6, bcrypt_rounds: int = 12) -> None:
        self._min_credential_length = min_credential_length
        self._bcrypt_rounds = bcrypt_rounds
        self._by_id: dict[str, User] = {}
        self._by_username: dict[str, User] = {}
        self._lock = Lock()
        # Unknown usernames are checked against this so both failure paths
        # spend one bcrypt verification.
        self._dummy_hash = security.hash_credential(secrets.token_hex(16), rounds=bcrypt_rounds)

    def register(self, username: str, raw_credential: str) -> User:
        """Create a user; raises DuplicateUsernameError or WeakCredentialError.

        Credentials over 72 UTF-8 bytes raise CredentialTooLongError; bcrypt
        would otherwise reject or silently truncate them.
        """
        username = username.strip()
        if not username:
            raise ChatValidationError("Username must not be empty")
        if len(raw_credential) < self._min_credential_length:
            raise WeakCredentialError(
                f"Password must be at least {self._min_credential_length} characters"
            )
        if security.credential_too_long(raw_credential):
            raise CredentialTooLongError(
                f"Password must be at most {security.MAX_CREDENTIAL_BYTES} bytes"
            )
        with self._lock:
            if username in self._by_username:
                raise DuplicateUsernameError()

        credential_hash = security.hash_credential(raw_credential, rounds=self._bcrypt_rounds)
        user = User(id=secrets.token_hex(16), username=username, credential_hash=credential_hash)

        with self._lock:
            # Re-check: a concurrent registration may have won while we hashed.
            if username in self._by_username:
                raise DuplicateUsernameError()
            self._by_username[username] = user
            self._by_id[user.id] = user

        logger.info("Registered user %s", username)
        return user

    def authenticate(self, username: str, raw_credential: str) -> User:
        """Return the matching user or raise a generic InvalidCredentialError."""
        with self._lock:
            user = self._by_username.get(username.strip())

        credential_hash = user.credential_hash if user is not None else self._dummy_hash
        valid = security.verify_credential(raw_credential, credential_hash)
        if user is None or not valid:
            raise InvalidCredentialError()
        return user

    def get(self, user_id: str) -> User | None:
        with self._lock:
            return self._by_id.get(user_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
