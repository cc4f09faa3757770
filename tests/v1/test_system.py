"""Tests for system status endpoints."""

from fastapi import status
from fastapi.testclient import TestClient


def test_system_status_counts(client: TestClient, auth_headers: dict[str, str]) -> None:
    """Status reflects registered users and live sessions."""
    r = client.get("/api/v1/system/status")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["app"]["name"]
    relay = data["relay"]
    assert relay["users"] == 1
    assert relay["sessions"] == 1
    assert relay["streams"] == 0
    assert relay["pending_messages"] == 0
    assert relay["delivery_scope"] == "same_user_sessions"
    assert relay["max_reward"] == 1200


def test_system_status_never_leaks_secrets(client: TestClient) -> None:
    """The secret key is never part of the snapshot."""
    r = client.get("/api/v1/system/status")
    assert "secret" not in r.text.lower()
