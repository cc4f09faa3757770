"""Tests for best-effort event delivery."""

from __future__ import annotations

import pytest

from neko_relay.models.connection import DeliveryScope
from neko_relay.schemas.events import RelayEvent
from neko_relay.services.broadcast import BroadcastEngine
from neko_relay.services.connections import ConnectionRegistry
from tests.conftest import BrokenSink, RecordingSink

EVENT = RelayEvent.reward(delta=100, balance=100)


@pytest.fixture()
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.mark.asyncio
async def test_send_writes_to_bound_sink(registry: ConnectionRegistry) -> None:
    sink = RecordingSink()
    registry.attach("tok", sink, "alice")

    assert await BroadcastEngine(registry).send("tok", EVENT) is True
    assert sink.events == [EVENT]


@pytest.mark.asyncio
async def test_send_to_absent_token_is_a_no_op(registry: ConnectionRegistry) -> None:
    assert await BroadcastEngine(registry).send("missing", EVENT) is False


@pytest.mark.asyncio
async def test_send_swallows_failure_and_detaches(registry: ConnectionRegistry) -> None:
    registry.attach("tok", BrokenSink(), "alice")

    assert await BroadcastEngine(registry).send("tok", EVENT) is False
    assert registry.lookup("tok") is None


@pytest.mark.asyncio
async def test_send_all_isolates_failures(registry: ConnectionRegistry) -> None:
    healthy_a, healthy_b = RecordingSink(), RecordingSink()
    registry.attach("a", healthy_a, "alice")
    registry.attach("broken", BrokenSink(), "alice")
    registry.attach("b", healthy_b, "bob")

    delivered = await BroadcastEngine(registry).send_all(EVENT)

    assert delivered == 2
    assert healthy_a.events == [EVENT]
    assert healthy_b.events == [EVENT]
    assert registry.lookup("broken") is None


@pytest.mark.asyncio
async def test_send_all_honours_exclusion(registry: ConnectionRegistry) -> None:
    sender, other = RecordingSink(), RecordingSink()
    registry.attach("sender", sender, "alice")
    registry.attach("other", other, "bob")

    assert await BroadcastEngine(registry).send_all(EVENT, exclude_token="sender") == 1
    assert sender.events == []
    assert other.events == [EVENT]


@pytest.mark.asyncio
async def test_publish_defaults_to_same_user_sessions(registry: ConnectionRegistry) -> None:
    tab_one, tab_two, stranger = RecordingSink(), RecordingSink(), RecordingSink()
    registry.attach("a1", tab_one, "alice")
    registry.attach("a2", tab_two, "alice")
    registry.attach("b1", stranger, "bob")

    engine = BroadcastEngine(registry)
    assert engine.scope is DeliveryScope.SAME_USER_SESSIONS
    assert await engine.publish("alice", EVENT) == 2
    assert stranger.events == []


@pytest.mark.asyncio
async def test_publish_all_clients_scope_reaches_everyone(registry: ConnectionRegistry) -> None:
    mine, theirs = RecordingSink(), RecordingSink()
    registry.attach("a1", mine, "alice")
    registry.attach("b1", theirs, "bob")

    engine = BroadcastEngine(registry, DeliveryScope.ALL_CLIENTS)
    assert await engine.publish("alice", EVENT) == 2
    assert theirs.events == [EVENT]
