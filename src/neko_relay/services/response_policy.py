"""Decides what Neko says back and how many coins that earns."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Protocol


@dataclass(frozen=True)
class PolicyDecision:
    """Reply text and the reward it grants (never negative)."""

    text: str
    reward_delta: int = 0


class ResponsePolicy(Protocol):
    """Pure mapping from (message, current balance) to a decision."""

    def __call__(self, text: str, current_reward: int) -> PolicyDecision: ...


GREETING_KEYWORDS: Final[tuple[str, ...]] = ("halo", "hallo", "hello", "hai", "hi neko")
BALANCE_KEYWORDS: Final[tuple[str, ...]] = ("koin", "coin", "balance", "saldo")
THANKS_KEYWORDS: Final[tuple[str, ...]] = ("makasih", "thanks", "thank you", "terima kasih")

GREETING_REPLIES: Final[tuple[str, ...]] = (
    "Halo Meng! Anything Neko can help with?",
    "Hai hai! Neko is all ears.",
)
THANKS_REPLIES: Final[tuple[str, ...]] = (
    "Anytime, Meng!",
    "Neko accepts payment in head scratches.",
)
FALLBACK_REPLIES: Final[tuple[str, ...]] = (
    "Hmm, Neko is thinking really hard about that...",
    "Give Neko a better reason than that!",
    "Wow, that's creative. Neko approves.",
    "Neko likes your reasoning!",
    "Sorry Meng, that reason is not convincing enough. Try again!",
)

DEFAULT_REWARD_CHOICES: Final[tuple[int, ...]] = (50, 100, 150, 200)
DEFAULT_REWARD_PROBABILITY: Final[float] = 0.3


class KeywordResponsePolicy:
    """Default policy: case-insensitive substring rules, else a random phrase.

    The reward is decided separately from the reply: with probability
    ``reward_probability`` one of ``reward_choices`` is granted, otherwise
    nothing. Pass a seeded ``random.Random`` for reproducible decisions.
    """

    def __init__(
        self,
        *,
        reward_choices: Sequence[int] = DEFAULT_REWARD_CHOICES,
        reward_probability: float = DEFAULT_REWARD_PROBABILITY,
        rng: random.Random | None = None,
    ) -> None:
        self._reward_choices = tuple(choice for choice in reward_choices if choice >= 0)
        self._reward_probability = min(max(reward_probability, 0.0), 1.0)
        self._rng = rng or random.Random()

    def __call__(self, text: str, current_reward: int) -> PolicyDecision:
        reply = self.reply_for(text, current_reward)
        delta = self.reward_for()
        if delta > 0:
            reply = f"{reply} You got {delta} coins!"
        return PolicyDecision(text=reply, reward_delta=delta)

    def reply_for(self, text: str, current_reward: int) -> str:
        normalized = " ".join(str(text).lower().split())
        if _contains_any(normalized, BALANCE_KEYWORDS):
            return f"You have {max(current_reward, 0)} coins right now, Meng. Want more?"
        if _contains_any(normalized, GREETING_KEYWORDS):
            return self._rng.choice(GREETING_REPLIES)
        if _contains_any(normalized, THANKS_KEYWORDS):
            return self._rng.choice(THANKS_REPLIES)
        return self._rng.choice(FALLBACK_REPLIES)

    def reward_for(self) -> int:
        if not self._reward_choices or self._rng.random() >= self._reward_probability:
            return 0
        return self._rng.choice(self._reward_choices)


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)
