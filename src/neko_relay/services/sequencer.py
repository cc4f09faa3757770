"""Per-token serial execution for the chat pipeline."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class _Slot:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class TokenSequencer:
    """Runs critical sections one at a time per session token.

    Unrelated tokens never wait on each other. A token's lock only lives while
    somebody holds or waits for it, so the table stays as small as the set of
    tokens with work in flight.
    """

    def __init__(self) -> None:
        self._slots: dict[str, _Slot] = {}

    @asynccontextmanager
    async def hold(self, token: str) -> AsyncIterator[None]:
        slot = self._slots.get(token)
        if slot is None:
            slot = self._slots[token] = _Slot()
        slot.holders += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.holders -= 1
            if slot.holders == 0:
                self._slots.pop(token, None)

    def busy(self, token: str) -> bool:
        return token in self._slots
