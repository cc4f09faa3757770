"""Structured events pushed down client event streams."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from neko_relay.models.message import ChatMessage

EventType = Literal["echo", "typing", "message", "reward"]


class RelayEvent(BaseModel):
    """A single event written as one line of newline-delimited JSON."""

    type: EventType
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_line(self) -> str:
        """Return the newline-terminated JSON encoding of this event."""
        return self.model_dump_json() + "\n"

    @classmethod
    def echo(cls, message: ChatMessage) -> RelayEvent:
        return cls(type="echo", payload=message.as_payload())

    @classmethod
    def typing(cls, *, source: str, is_typing: bool, username: str | None = None) -> RelayEvent:
        payload: dict[str, Any] = {"source": source, "is_typing": is_typing}
        if username is not None:
            payload["username"] = username
        return cls(type="typing", payload=payload)

    @classmethod
    def message(cls, message: ChatMessage) -> RelayEvent:
        return cls(type="message", payload=message.as_payload())

    @classmethod
    def reward(cls, *, delta: int, balance: int) -> RelayEvent:
        return cls(type="reward", payload={"delta": delta, "balance": balance})
