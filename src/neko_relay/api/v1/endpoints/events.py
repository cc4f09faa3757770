# src/neko_relay/api/v1/endpoints/events.py
"""Long-lived event stream endpoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from neko_relay.api.v1.dependencies import RelayDep, TokenDep, raise_http_error
from neko_relay.services.connections import QueueSink
from neko_relay.services.errors import RelayError
from neko_relay.services.relay import ChatRelay

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


async def stream_events(relay: ChatRelay, token: str, sink: QueueSink) -> AsyncIterator[str]:
    """Yield one JSON line per event until the sink closes or the client leaves."""
    try:
        async for event in sink:
            yield event.to_line()
    finally:
        relay.close_event_stream(token, sink)


@router.get("/events", summary="Open the caller's event stream")
async def open_event_stream(token: TokenDep, relay: RelayDep) -> StreamingResponse:
    """Stream newline-delimited JSON events for this session.

    Reopening the stream replaces the previous one for the same session.
    Nothing missed while disconnected is replayed; use /auth/me and
    /chat/history to catch up.
    """
    try:
        user, sink = relay.open_event_stream(token)
    except RelayError as err:
        raise_http_error(err)
    logger.debug("Streaming events to %s", user.username)
    return StreamingResponse(
        stream_events(relay, token, sink),
        media_type=NDJSON_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
