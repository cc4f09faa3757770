# src/neko_relay/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .chat import router as chat_router
from .events import router as events_router
from .system import router as system_router

__all__ = [
    "auth_router",
    "chat_router",
    "events_router",
    "system_router",
]
