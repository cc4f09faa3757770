# tests/v1/test_events.py
"""Tests for the event stream endpoint."""

from __future__ import annotations

import json

import pytest
from fastapi import status

from neko_relay.api.v1.endpoints.events import stream_events
from neko_relay.services.relay import ChatRelay
from tests.conftest import FixedPolicy, make_settings


def test_event_stream_requires_auth(client) -> None:
    response = client.get("/api/v1/events", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_stream_emits_ndjson_lines_in_pipeline_order() -> None:
    relay = ChatRelay(make_settings(), policy=FixedPolicy("Purr.", reward_delta=50))
    await relay.register("alice", "wonderland")
    token = (await relay.login("alice", "wonderland")).token
    _, sink = relay.open_event_stream(token)

    await relay.post_message(token, "halo")
    relay.logout(token)
    lines = [line async for line in stream_events(relay, token, sink)]

    events = [json.loads(line) for line in lines]
    assert all(line.endswith("\n") for line in lines)
    assert [event["type"] for event in events] == ["echo", "typing", "message", "reward"]
    assert events[3]["payload"] == {"delta": 50, "balance": 50}


@pytest.mark.asyncio
async def test_stream_cleanup_detaches_sink() -> None:
    relay = ChatRelay(make_settings())
    await relay.register("alice", "wonderland")
    token = (await relay.login("alice", "wonderland")).token
    _, sink = relay.open_event_stream(token)

    stream = stream_events(relay, token, sink)
    await relay.signal_typing(token, True)
    sink.close()
    assert [line async for line in stream] == []

    assert relay.connections.lookup(token) is None
