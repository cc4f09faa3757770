"""Live event stream bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from neko_relay.schemas.events import RelayEvent


class DeliveryScope(StrEnum):
    """Which attached streams receive a user's chat events."""

    SAME_USER_SESSIONS = "same_user_sessions"
    ALL_CLIENTS = "all_clients"


class EventSink(Protocol):
    """One-way channel the server pushes events into for one client."""

    async def write(self, event: RelayEvent) -> None: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class ConnectionHandle:
    """Registry entry tying a session token to its live sink."""

    token: str
    user_id: str
    sink: EventSink
    attached_at: datetime = field(default_factory=lambda: datetime.now(UTC))
