"""Chat pipeline: validate, store, echo, think, respond, reward, deliver."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

from neko_relay.models.message import Sender
from neko_relay.models.user import User
from neko_relay.schemas.events import RelayEvent
from neko_relay.services.broadcast import BroadcastEngine
from neko_relay.services.errors import EmptyMessageError, MessageTooLongError
from neko_relay.services.history import MessageLog
from neko_relay.services.response_policy import ResponsePolicy
from neko_relay.services.rewards import RewardLedger
from neko_relay.services.sequencer import TokenSequencer
from neko_relay.services.sessions import SessionManager

logger = logging.getLogger(__name__)


def _log_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Message processing failed", exc_info=exc)


@dataclass(frozen=True)
class ChatOutcome:
    """Result of one processed message, returned to the posting caller."""

    response_text: str
    reward_delta: int
    new_reward_balance: int


class ChatPipeline:
    """Processes user messages one at a time per session token.

    Validation happens in the caller's task and has no side effects. Everything
    from storing the message onward runs in a tracked task that is shielded
    from caller cancellation: once a message is stored, the reply and any
    reward are always committed, and only delivery to absent sinks is lost.
    """

    def __init__(
        self,
        *,
        sessions: SessionManager,
        history: MessageLog,
        ledger: RewardLedger,
        broadcaster: BroadcastEngine,
        policy: ResponsePolicy,
        think_time: tuple[float, float] = (1.0, 2.5),
        max_message_length: int = 500,
        rng: random.Random | None = None,
    ) -> None:
        self._sessions = sessions
        self._history = history
        self._ledger = ledger
        self._broadcaster = broadcaster
        self._policy = policy
        self._think_min, self._think_max = think_time
        self._max_message_length = max_message_length
        self._rng = rng or random.Random()
        self._sequencer = TokenSequencer()
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of messages still in flight."""
        return len(self._pending)

    async def post_message(self, token: str, text: str) -> ChatOutcome:
        """Run one message through the pipeline and return the assistant's reply."""
        user = self._sessions.verify_session(token)
        body = (text or "").strip()
        if not body:
            raise EmptyMessageError()
        if len(body) > self._max_message_length:
            raise MessageTooLongError(
                f"Message must be at most {self._max_message_length} characters"
            )

        task = self._spawn(self._process(token, user, body))
        return await asyncio.shield(task)

    async def drain(self) -> None:
        """Wait for every in-flight message to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def think_time(self) -> float:
        return self._rng.uniform(self._think_min, self._think_max)

    def _spawn(self, coro: Coroutine[Any, Any, ChatOutcome]) -> asyncio.Task[ChatOutcome]:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        task.add_done_callback(_log_failure)
        return task

    async def _process(self, token: str, user: User, body: str) -> ChatOutcome:
        async with self._sequencer.hold(token):
            # Stored -> Echoed -> Thinking
            user_message = self._history.append(user.id, Sender.USER, body)
            await self._broadcaster.publish(user.id, RelayEvent.echo(user_message))
            await self._broadcaster.publish(
                user.id,
                RelayEvent.typing(source=Sender.ASSISTANT.value, is_typing=True),
            )

            await asyncio.sleep(self.think_time())

            # Responding -> RewardApplied
            decision = self._policy(body, self._ledger.get(user.id))
            if decision.reward_delta > 0:
                balance = self._ledger.add(user.id, decision.reward_delta)
            else:
                balance = self._ledger.get(user.id)

            # Delivered
            reply = self._history.append(user.id, Sender.ASSISTANT, decision.text)
            await self._broadcaster.publish(user.id, RelayEvent.message(reply))
            if decision.reward_delta > 0:
                await self._broadcaster.publish(
                    user.id,
                    RelayEvent.reward(delta=decision.reward_delta, balance=balance),
                )

        logger.debug(
            "Answered message %s for %s (reward %d, balance %d)",
            user_message.id,
            user.username,
            decision.reward_delta,
            balance,
        )
        return ChatOutcome(
            response_text=decision.text,
            reward_delta=decision.reward_delta,
            new_reward_balance=balance,
        )
