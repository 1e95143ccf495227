"""FastAPI status dashboard application factory."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from meanrev.dashboard.routes import api


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI status dashboard.

    Route handlers read ``app.state.orchestrator``, ``app.state.price_store``,
    ``app.state.pair`` and ``app.state.strategy_config``, which main.py sets.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to inject startup/shutdown logic.

    Returns:
        Configured FastAPI application with JSON API routes under /api.
    """
    app = FastAPI(
        title="Mean Reversion Bot Dashboard",
        lifespan=lifespan,
    )
    app.include_router(api.router, prefix="/api")
    return app
