"""User identity records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class User:
    """A registered identity.

    The reward balance is not stored here; the reward ledger owns it.
    """

    id: str
    username: str
    credential_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
