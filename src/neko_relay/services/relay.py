"""Framework-agnostic facade over the relay services.

``ChatRelay`` owns one instance of every table and exposes the operations the
HTTP layer needs. Tests build their own relay with fast settings; the app uses
the process-wide instance returned by ``get_relay``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

from neko_relay.core.settings import Settings, settings
from neko_relay.models.message import ChatMessage, Sender
from neko_relay.models.user import User
from neko_relay.schemas.events import RelayEvent
from neko_relay.services.broadcast import BroadcastEngine
from neko_relay.services.connections import ConnectionRegistry, QueueSink
from neko_relay.services.history import MessageLog
from neko_relay.services.identity import IdentityStore
from neko_relay.services.pipeline import ChatOutcome, ChatPipeline
from neko_relay.services.response_policy import KeywordResponsePolicy, ResponsePolicy
from neko_relay.services.rewards import RewardLedger
from neko_relay.services.sessions import Clock, SessionManager, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserView:
    """A user as callers see it: identity plus current balance."""

    user_id: str
    username: str
    reward_balance: int


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: UserView


class ChatRelay:
    """Wires the identity, session, ledger, registry and pipeline components."""

    def __init__(
        self,
        config: Settings | None = None,
        *,
        policy: ResponsePolicy | None = None,
        rng: random.Random | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config or settings
        self._rng = rng or random.Random()
        self.identities = IdentityStore(
            min_credential_length=self.config.min_credential_length,
            bcrypt_rounds=self.config.bcrypt_rounds,
        )
        self.sessions = SessionManager(
            self.identities,
            secret_key=self.config.secret_key,
            algorithm=self.config.jwt_algorithm,
            ttl_minutes=self.config.session_ttl_minutes,
            clock=clock,
        )
        self.ledger = RewardLedger(self.config.max_reward)
        self.history_log = MessageLog(clock=clock)
        self.connections = ConnectionRegistry()
        self.broadcaster = BroadcastEngine(self.connections, self.config.delivery_scope)
        self.policy = policy or KeywordResponsePolicy(
            reward_choices=self.config.reward_choices,
            reward_probability=self.config.reward_probability,
            rng=self._rng,
        )
        self.pipeline = ChatPipeline(
            sessions=self.sessions,
            history=self.history_log,
            ledger=self.ledger,
            broadcaster=self.broadcaster,
            policy=self.policy,
            think_time=self.config.think_time_window,
            max_message_length=self.config.max_message_length,
            rng=self._rng,
        )

    def _view(self, user: User) -> UserView:
        return UserView(
            user_id=user.id,
            username=user.username,
            reward_balance=self.ledger.get(user.id),
        )

    async def register(self, username: str, credential: str) -> UserView:
        user = await asyncio.to_thread(self.identities.register, username, credential)
        return self._view(user)

    async def login(self, username: str, credential: str) -> LoginResult:
        user = await asyncio.to_thread(self.identities.authenticate, username, credential)
        token = self.sessions.create_session(user.id)
        logger.info("User %s logged in", user.username)
        return LoginResult(token=token, user=self._view(user))

    def logout(self, token: str) -> None:
        """Revoke ``token`` and close its stream. Safe to call repeatedly."""
        if self.sessions.revoke_session(token):
            logger.info("Session revoked")
        self.connections.detach(token)

    def who_am_i(self, token: str) -> UserView:
        return self._view(self.sessions.verify_session(token))

    async def post_message(self, token: str, text: str) -> ChatOutcome:
        return await self.pipeline.post_message(token, text)

    def history(self, token: str) -> list[ChatMessage]:
        user = self.sessions.verify_session(token)
        return self.history_log.for_user(user.id)

    async def signal_typing(self, token: str, is_typing: bool) -> int:
        """Relay a client typing indicator to the user's other sessions."""
        user = self.sessions.verify_session(token)
        event = RelayEvent.typing(
            source=Sender.USER.value,
            is_typing=is_typing,
            username=user.username,
        )
        return await self.broadcaster.send_to_user(user.id, event, exclude_token=token)

    def open_event_stream(self, token: str) -> tuple[User, QueueSink]:
        """Verify ``token`` and attach a fresh sink for it."""
        user = self.sessions.verify_session(token)
        sink = QueueSink(maxsize=self.config.event_queue_size)
        self.connections.attach(token, sink, user.id)
        return user, sink

    def close_event_stream(self, token: str, sink: QueueSink) -> None:
        self.connections.detach(token, sink)

    def purge_expired_sessions(self) -> int:
        """Revoke expired sessions and close their streams."""
        expired = self.sessions.purge_expired()
        for token in expired:
            self.connections.detach(token)
        if expired:
            logger.info("Purged %d expired session(s)", len(expired))
        return len(expired)

    async def shutdown(self) -> None:
        await self.pipeline.drain()
        for handle in self.connections.handles():
            self.connections.detach(handle.token, handle.sink)


class SessionSweeper:
    """Periodically purges expired sessions in the background."""

    def __init__(self, relay: ChatRelay, interval_seconds: float) -> None:
        self._relay = relay
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        if self._interval <= 0:
            return
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval)
            except TimeoutError:
                self._relay.purge_expired_sessions()


_relay: ChatRelay | None = None


def get_relay() -> ChatRelay:
    """Return the process-wide relay instance."""
    global _relay
    if _relay is None:
        _relay = ChatRelay()
    return _relay


def describe(relay: ChatRelay) -> dict[str, Any]:
    """Return live counters for the status endpoint."""
    return {
        "users": len(relay.identities),
        "sessions": relay.sessions.active_count(),
        "streams": len(relay.connections),
        "pending_messages": relay.pipeline.pending,
        "delivery_scope": relay.broadcaster.scope.value,
        "max_reward": relay.ledger.max_reward,
    }
