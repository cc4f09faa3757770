"""Chat-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    """Schema for posting a chat message to the assistant."""

    text: str = Field(..., description="Message text; must not be blank")


class MessageAck(BaseModel):
    """Synchronous acknowledgement of a processed message."""

    response_text: str
    reward_delta: int = Field(..., ge=0)
    new_reward_balance: int = Field(..., ge=0)


class ChatMessageResponse(BaseModel):
    """A single entry of the caller's chat history."""

    id: str
    sender: str
    text: str
    timestamp: datetime


class TypingSignal(BaseModel):
    """Client-side typing indicator relayed to the user's other sessions."""

    is_typing: bool = True
