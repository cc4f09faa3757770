# tests/v1/test_chat.py
"""Tests for chat endpoints."""

from __future__ import annotations

from fastapi import status


def test_post_message_scenario(client, auth_headers) -> None:
    response = client.post("/api/v1/chat/messages", json={"text": "halo"}, headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    ack = response.json()
    assert ack["response_text"]
    assert ack["reward_delta"] >= 0

    me = client.get("/api/v1/auth/me", headers=auth_headers).json()
    assert me["reward_balance"] == ack["new_reward_balance"]


def test_post_message_rejects_blank_text(client, auth_headers) -> None:
    response = client.post("/api/v1/chat/messages", json={"text": "   "}, headers=auth_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Message must not be empty"
    assert client.get("/api/v1/chat/history", headers=auth_headers).json() == []


def test_post_message_rejects_overlong_text(client, auth_headers, relay) -> None:
    text = "x" * (relay.config.max_message_length + 1)
    response = client.post("/api/v1/chat/messages", json={"text": text}, headers=auth_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_post_message_requires_auth(client) -> None:
    response = client.post(
        "/api/v1/chat/messages",
        json={"text": "halo"},
        headers={"Authorization": "Bearer nonsense"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_history_lists_both_sides(client, auth_headers) -> None:
    ack = client.post("/api/v1/chat/messages", json={"text": "halo"}, headers=auth_headers).json()

    history = client.get("/api/v1/chat/history", headers=auth_headers).json()

    assert [entry["sender"] for entry in history] == ["user", "assistant"]
    assert history[0]["text"] == "halo"
    assert history[1]["text"] == ack["response_text"]


def test_history_is_private(client, auth_headers) -> None:
    client.post("/api/v1/chat/messages", json={"text": "halo"}, headers=auth_headers)
    client.post("/api/v1/auth/register", json={"username": "carol", "password": "secret2"})
    token = client.post(
        "/api/v1/auth/login", json={"username": "carol", "password": "secret2"}
    ).json()["token"]
    client.cookies.clear()

    history = client.get("/api/v1/chat/history", headers={"Authorization": f"Bearer {token}"})

    assert history.json() == []


def test_typing_signal_is_accepted(client, auth_headers) -> None:
    response = client.post("/api/v1/chat/typing", json={"is_typing": True}, headers=auth_headers)

    assert response.status_code == status.HTTP_202_ACCEPTED
    assert response.json() == {"delivered": 0}
