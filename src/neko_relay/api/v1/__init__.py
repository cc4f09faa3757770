# src/neko_relay/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import auth_router, chat_router, events_router, system_router

__all__ = [
    "auth_router",
    "chat_router",
    "events_router",
    "system_router",
]
