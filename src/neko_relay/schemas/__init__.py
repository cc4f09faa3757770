"""
Pydantic schemas for API request/response models and stream events.
"""

from .chat import ChatMessageResponse, MessageAck, MessageCreate, TypingSignal
from .events import RelayEvent
from .user import LoginRequest, LoginResponse, RegisterRequest, UserResponse

__all__ = [
    "ChatMessageResponse", "MessageAck", "MessageCreate", "TypingSignal",
    "RelayEvent",
    "LoginRequest", "LoginResponse", "RegisterRequest", "UserResponse",
]
