# tests/conftest.py
from __future__ import annotations

import os
import random
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SESSION_SWEEP_INTERVAL_SECONDS", "0")
os.environ.setdefault("THINK_TIME_MIN_SECONDS", "0")
os.environ.setdefault("THINK_TIME_MAX_SECONDS", "0")

from neko_relay.core.settings import Settings
from neko_relay.main import app as fastapi_app
from neko_relay.schemas.events import RelayEvent
from neko_relay.services.errors import SinkClosedError
from neko_relay.services.relay import ChatRelay, get_relay
from neko_relay.services.response_policy import PolicyDecision


class FixedPolicy:
    """Response policy that always answers the same way and records its calls."""

    def __init__(self, text: str = "Meow.", reward_delta: int = 0) -> None:
        self.text = text
        self.reward_delta = reward_delta
        self.calls: list[tuple[str, int]] = []

    def __call__(self, text: str, current_reward: int) -> PolicyDecision:
        self.calls.append((text, current_reward))
        return PolicyDecision(text=self.text, reward_delta=self.reward_delta)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingSink:
    """Sink that keeps every event written to it."""

    def __init__(self) -> None:
        self.events: list[RelayEvent] = []
        self.closed = False

    async def write(self, event: RelayEvent) -> None:
        if self.closed:
            raise SinkClosedError()
        self.events.append(event)

    def close(self) -> None:
        self.closed = True

    @property
    def types(self) -> list[str]:
        return [event.type for event in self.events]


class BrokenSink(RecordingSink):
    """Sink whose every write fails, like a client that vanished."""

    async def write(self, event: RelayEvent) -> None:
        raise ConnectionResetError("client went away")


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "secret_key": "test-secret-key",
        "bcrypt_rounds": 4,
        "think_time_min_seconds": 0.0,
        "think_time_max_seconds": 0.0,
        "session_sweep_interval_seconds": 0.0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def relay_settings() -> Settings:
    return make_settings()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def policy() -> FixedPolicy:
    return FixedPolicy()


@pytest.fixture()
def relay(relay_settings: Settings) -> ChatRelay:
    """A fresh relay with the default keyword policy and a seeded random source."""
    return ChatRelay(relay_settings, rng=random.Random(1234))


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_relay_dependency(app: FastAPI, relay: ChatRelay) -> Iterator[None]:
    app.dependency_overrides[get_relay] = lambda: relay
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_relay, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def registered_user(client: TestClient) -> dict[str, str]:
    """Register bob and return his credentials."""
    credentials = {"username": "bob", "password": "secret1"}
    response = client.post("/api/v1/auth/register", json=credentials)
    assert response.status_code == 201
    return credentials


@pytest.fixture()
def auth_headers(client: TestClient, registered_user: dict[str, str]) -> dict[str, str]:
    """Log bob in and return bearer headers for the new session."""
    response = client.post("/api/v1/auth/login", json=registered_user)
    assert response.status_code == 200
    # Drop the login cookie so requests authenticate through the header only.
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}
