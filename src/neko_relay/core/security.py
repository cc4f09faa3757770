"""Credential hashing and session token primitives."""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

# bcrypt only reads the first 72 bytes of its input.
MAX_CREDENTIAL_BYTES = 72


def credential_too_long(raw_credential: str) -> bool:
    return len(raw_credential.encode("utf-8")) > MAX_CREDENTIAL_BYTES


def hash_credential(raw_credential: str, rounds: int = 12) -> str:
    """Return a bcrypt hash of the supplied credential."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(raw_credential.encode("utf-8"), salt).decode("utf-8")


def verify_credential(raw_credential: str, credential_hash: str) -> bool:
    """Check a credential against a bcrypt hash.

    bcrypt compares in constant time; malformed hashes and credentials too long
    to have been hashed count as a mismatch.
    """
    if credential_too_long(raw_credential):
        return False
    try:
        return bcrypt.checkpw(raw_credential.encode("utf-8"), credential_hash.encode("utf-8"))
    except ValueError:
        return False


def mint_session_token(
    user_id: str,
    *,
    issued_at: datetime,
    expires_at: datetime,
    secret_key: str,
    algorithm: str,
) -> str:
    """Create a signed session token bound to ``user_id``.

    The random ``jti`` makes every token unique even for sessions created for
    the same user within the same second.
    """
    claims: dict[str, Any] = {
        "sub": user_id,
        "jti": secrets.token_urlsafe(24),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    encoded: str = jwt.encode(claims, secret_key, algorithm=algorithm)
    return encoded


def decode_session_token(token: str, *, secret_key: str, algorithm: str) -> str | None:
    """Return the token subject, or None if the signature does not verify.

    Expiry is enforced against the session table, which owns the clock.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"verify_exp": False},
        )
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None


def session_expiry(now: datetime, ttl_minutes: int) -> datetime:
    """Return the expiry instant for a session created at ``now``."""
    return now + timedelta(minutes=ttl_minutes)
