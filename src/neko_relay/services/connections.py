"""Registry of live client event streams."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from threading import Lock
from typing import Final, cast

from neko_relay.models.connection import ConnectionHandle, EventSink
from neko_relay.schemas.events import RelayEvent
from neko_relay.services.errors import SinkClosedError

logger = logging.getLogger(__name__)

_CLOSED: Final = object()


class QueueSink:
    """Event sink backed by a bounded asyncio queue.

    The HTTP stream consumes it with ``async for``. A sink whose consumer falls
    more than ``maxsize`` events behind is treated as dead, the same as a
    closed one.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize + 1)
        self._maxsize = maxsize
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, event: RelayEvent) -> None:
        if self._closed:
            raise SinkClosedError()
        if self._queue.qsize() >= self._maxsize:
            self.close()
            raise SinkClosedError("Event sink backlog exceeded")
        self._queue.put_nowait(event)

    def close(self) -> None:
        """Stop accepting events and wake the consumer. Idempotent."""
        if self._closed:
            return
        self._closed = True
        # One slot is reserved for the close marker.
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[RelayEvent]:
        return self._drain()

    async def _drain(self) -> AsyncIterator[RelayEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield cast(RelayEvent, item)


class ConnectionRegistry:
    """Maps a session token to at most one live sink.

    The registry owns the handles; everyone else gets snapshots.
    """

    def __init__(self) -> None:
        self._handles: dict[str, ConnectionHandle] = {}
        self._lock = Lock()

    def attach(self, token: str, sink: EventSink, user_id: str) -> ConnectionHandle:
        """Bind ``sink`` to ``token``, silently replacing any previous sink."""
        handle = ConnectionHandle(token=token, user_id=user_id, sink=sink)
        with self._lock:
            previous = self._handles.get(token)
            self._handles[token] = handle
        if previous is not None and previous.sink is not sink:
            previous.sink.close()
            logger.info("Replaced event stream for user %s", user_id)
        else:
            logger.info("Attached event stream for user %s", user_id)
        return handle

    def detach(self, token: str, sink: EventSink | None = None) -> bool:
        """Remove the mapping for ``token``.

        With ``sink`` given, only removes it if ``token`` is still bound to that
        exact sink. Returns True if something was removed.
        """
        with self._lock:
            handle = self._handles.get(token)
            if handle is None or (sink is not None and handle.sink is not sink):
                return False
            del self._handles[token]
        handle.sink.close()
        logger.info("Detached event stream for user %s", handle.user_id)
        return True

    def lookup(self, token: str) -> EventSink | None:
        with self._lock:
            handle = self._handles.get(token)
        return handle.sink if handle is not None else None

    def handles(self, user_id: str | None = None) -> list[ConnectionHandle]:
        """Return a snapshot of the attached handles, optionally for one user."""
        with self._lock:
            if user_id is None:
                return list(self._handles.values())
            return [handle for handle in self._handles.values() if handle.user_id == user_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)
