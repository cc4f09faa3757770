"""Chat log entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class Sender(StrEnum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """An append-only chat log entry owned by a single user."""

    id: str
    user_id: str
    sender: Sender
    text: str
    timestamp: datetime

    def as_payload(self) -> dict[str, Any]:
        """Serialize the message into event/API payload form."""
        return {
            "id": self.id,
            "sender": self.sender.value,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }
