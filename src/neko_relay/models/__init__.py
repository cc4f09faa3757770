"""In-memory domain models for the Neko relay."""

from .connection import ConnectionHandle, DeliveryScope, EventSink
from .message import ChatMessage, Sender
from .session import Session
from .user import User

__all__ = [
    "ChatMessage",
    "ConnectionHandle",
    "DeliveryScope",
    "EventSink",
    "Sender",
    "Session",
    "User",
]
