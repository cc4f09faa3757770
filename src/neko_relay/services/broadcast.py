"""Best-effort fan-out of relay events to attached sinks."""

from __future__ import annotations

import logging

from neko_relay.models.connection import ConnectionHandle, DeliveryScope
from neko_relay.schemas.events import RelayEvent
from neko_relay.services.connections import ConnectionRegistry

logger = logging.getLogger(__name__)


class BroadcastEngine:
    """Writes events to sinks borrowed from the connection registry.

    Delivery is at most once with no retry and no backlog. A sink that fails a
    write is detached on the spot and the failure never reaches the caller, so
    a vanished recipient cannot abort the sender's request.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        scope: DeliveryScope = DeliveryScope.SAME_USER_SESSIONS,
    ) -> None:
        self._registry = registry
        self._scope = scope

    @property
    def scope(self) -> DeliveryScope:
        return self._scope

    async def send(self, token: str, event: RelayEvent) -> bool:
        """Write ``event`` to the sink bound to ``token``; False if nobody got it."""
        sink = self._registry.lookup(token)
        if sink is None:
            return False
        try:
            await sink.write(event)
        except Exception as exc:
            logger.warning("Dropping event stream after failed %s write: %s", event.type, exc)
            self._registry.detach(token, sink)
            return False
        return True

    async def send_all(self, event: RelayEvent, exclude_token: str | None = None) -> int:
        """Write ``event`` to every attached sink except ``exclude_token``'s."""
        return await self._fan_out(self._registry.handles(), event, exclude_token)

    async def send_to_user(
        self,
        user_id: str,
        event: RelayEvent,
        exclude_token: str | None = None,
    ) -> int:
        """Write ``event`` to every attached session of ``user_id``."""
        return await self._fan_out(self._registry.handles(user_id), event, exclude_token)

    async def publish(
        self,
        user_id: str,
        event: RelayEvent,
        exclude_token: str | None = None,
    ) -> int:
        """Deliver a user's chat event according to the configured scope."""
        if self._scope is DeliveryScope.ALL_CLIENTS:
            return await self.send_all(event, exclude_token)
        return await self.send_to_user(user_id, event, exclude_token)

    async def _fan_out(
        self,
        handles: list[ConnectionHandle],
        event: RelayEvent,
        exclude_token: str | None,
    ) -> int:
        delivered = 0
        for handle in handles:
            if handle.token == exclude_token:
                continue
            try:
                await handle.sink.write(event)
            except Exception as exc:
                logger.warning(
                    "Dropping event stream for user %s after failed %s write: %s",
                    handle.user_id,
                    event.type,
                    exc,
                )
                self._registry.detach(handle.token, handle.sink)
                continue
            delivered += 1
        logger.debug("Delivered %s event to %d stream(s)", event.type, delivered)
        return delivered
