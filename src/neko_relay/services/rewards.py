"""Bounded per-user reward balances."""

from __future__ import annotations

import logging
from threading import Lock

from neko_relay.services.errors import InvalidDeltaError

logger = logging.getLogger(__name__)


class RewardLedger:
    """Grant-only counter per user, clamped to ``max_reward``.

    Every read-modify-write runs under one lock, so concurrent grants for the
    same user are all reflected and no reader can see a value above the cap.
    """

    def __init__(self, max_reward: int) -> None:
        if max_reward < 0:
            raise ValueError("max_reward must be non-negative")
        self._max_reward = max_reward
        self._balances: dict[str, int] = {}
        self._lock = Lock()

    @property
    def max_reward(self) -> int:
        return self._max_reward

    def get(self, user_id: str) -> int:
        with self._lock:
            return self._balances.get(user_id, 0)

    def add(self, user_id: str, delta: int) -> int:
        """Grant ``delta`` and return the clamped new balance."""
        if delta < 0:
            raise InvalidDeltaError()
        with self._lock:
            current = self._balances.get(user_id, 0)
            balance = min(current + delta, self._max_reward)
            self._balances[user_id] = balance
        if balance == self._max_reward and current + delta > self._max_reward:
            logger.debug("Reward for %s clamped at %d", user_id, self._max_reward)
        return balance
