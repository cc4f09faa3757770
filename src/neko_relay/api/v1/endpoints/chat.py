# src/neko_relay/api/v1/endpoints/chat.py
"""Chat endpoints for the Neko relay API."""

from __future__ import annotations

from fastapi import APIRouter, status

from neko_relay.api.v1.dependencies import RelayDep, TokenDep, raise_http_error
from neko_relay.schemas.chat import ChatMessageResponse, MessageAck, MessageCreate, TypingSignal
from neko_relay.services.errors import RelayError

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/messages", response_model=MessageAck)
async def post_message(payload: MessageCreate, token: TokenDep, relay: RelayDep) -> MessageAck:
    """Send a message to Neko and wait for the reply.

    The same exchange is pushed to the caller's event streams as
    echo, typing, message and (when coins were granted) reward events.
    """
    try:
        outcome = await relay.post_message(token, payload.text)
    except RelayError as err:
        raise_http_error(err)
    return MessageAck(
        response_text=outcome.response_text,
        reward_delta=outcome.reward_delta,
        new_reward_balance=outcome.new_reward_balance,
    )


@router.get("/history", response_model=list[ChatMessageResponse])
async def get_history(token: TokenDep, relay: RelayDep) -> list[ChatMessageResponse]:
    """Return the caller's full chat log, oldest first."""
    try:
        messages = relay.history(token)
    except RelayError as err:
        raise_http_error(err)
    return [
        ChatMessageResponse(
            id=message.id,
            sender=message.sender.value,
            text=message.text,
            timestamp=message.timestamp,
        )
        for message in messages
    ]


@router.post("/typing", status_code=status.HTTP_202_ACCEPTED)
async def signal_typing(payload: TypingSignal, token: TokenDep, relay: RelayDep) -> dict[str, int]:
    """Tell the caller's other open tabs that the user is typing."""
    try:
        delivered = await relay.signal_typing(token, payload.is_typing)
    except RelayError as err:
        raise_http_error(err)
    return {"delivered": delivered}
