"""System status endpoints for the Neko relay API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from neko_relay.api.v1.dependencies import RelayDep
from neko_relay.core.settings import settings
from neko_relay.services.relay import describe

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/status")
async def get_status(relay: RelayDep) -> dict[str, Any]:
    """Return live counters and a sanitized configuration snapshot."""
    return {
        "app": {"name": settings.app_name, "version": settings.app_version},
        "relay": describe(relay),
    }
