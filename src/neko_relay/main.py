# src/neko_relay/main.py
"""Main entry point for the Neko relay application."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from neko_relay.api.v1 import auth_router, chat_router, events_router, system_router
from neko_relay.core.settings import settings
from neko_relay.services.relay import SessionSweeper, get_relay

# Initialize FastAPI app
app = FastAPI(
    title="Neko Relay API",
    description="Real-time chat relay with a capped reward ledger",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(chat_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    sweeper = SessionSweeper(get_relay(), settings.session_sweep_interval_seconds)
    await sweeper.start()
    app.state.session_sweeper = sweeper


@app.on_event("shutdown")
async def on_shutdown() -> None:
    sweeper: SessionSweeper | None = getattr(app.state, "session_sweeper", None)
    if sweeper:
        await sweeper.stop()
    await get_relay().shutdown()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Real-time chat relay with a capped reward ledger",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "neko_relay.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
