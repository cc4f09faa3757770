"""Append-only per-user chat log."""

from __future__ import annotations

import secrets
from collections import defaultdict
from threading import Lock

from neko_relay.models.message import ChatMessage, Sender
from neko_relay.services.sessions import Clock, utc_now


class MessageLog:
    """Chat history keyed by user; entries are never edited or removed.

    Timestamps never go backwards within one user's log, even if the wall
    clock does.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._logs: dict[str, list[ChatMessage]] = defaultdict(list)
        self._lock = Lock()

    def append(self, user_id: str, sender: Sender, text: str) -> ChatMessage:
        with self._lock:
            log = self._logs[user_id]
            timestamp = self._clock()
            if log and timestamp < log[-1].timestamp:
                timestamp = log[-1].timestamp
            message = ChatMessage(
                id=secrets.token_hex(8),
                user_id=user_id,
                sender=sender,
                text=text,
                timestamp=timestamp,
            )
            log.append(message)
        return message

    def for_user(self, user_id: str) -> list[ChatMessage]:
        """Return a copy of ``user_id``'s log, oldest first."""
        with self._lock:
            return list(self._logs.get(user_id, ()))
