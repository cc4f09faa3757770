"""Domain errors raised by the relay services.

Endpoints translate these into HTTP responses; the services themselves never
import FastAPI.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for every error raised by the relay services."""

    reason: str = "Relay error"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or self.reason)
        self.reason = reason or self.reason


class UnauthorizedError(RelayError):
    """Raised when a request cannot be tied to an authenticated user."""

    reason = "Unauthorized"


class InvalidOrExpiredTokenError(UnauthorizedError):
    """Raised when a session token is unknown, forged, revoked or expired."""

    reason = "Invalid or expired session"


class InvalidCredentialError(UnauthorizedError):
    """Raised on failed login; never says which half of the pair was wrong."""

    reason = "Invalid username or password"


class ChatValidationError(RelayError):
    """Raised when caller-supplied input is rejected."""

    reason = "Invalid input"


class DuplicateUsernameError(ChatValidationError):
    reason = "Username is already taken"


class WeakCredentialError(ChatValidationError):
    reason = "Password is too short"


class CredentialTooLongError(ChatValidationError):
    reason = "Password is too long"


class EmptyMessageError(ChatValidationError):
    reason = "Message must not be empty"


class MessageTooLongError(ChatValidationError):
    reason = "Message is too long"


class InvalidDeltaError(ChatValidationError):
    reason = "Reward delta must not be negative"


class DeliveryFailure(RelayError):
    """Raised by a sink that can no longer accept events.

    Internal only: the broadcast engine resolves it by detaching the sink.
    """

    reason = "Delivery failed"


class SinkClosedError(DeliveryFailure):
    reason = "Event sink is closed"
