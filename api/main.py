"""
FastAPI application for the Surebet Scanner API.

Main entry point for the REST API that exposes:
- Health check endpoints
- Odds sync trigger and sync status
- Stored games and the arbitrage log
- Surebet evaluation and risk-tier picks
- Bookmaker comparison and accumulator pricing
- Scheduler job control

Run with:
    uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import analytics, games, health, jobs, sync
from api.state import AppState

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Initializes components on startup and cleans up on shutdown.
    """
    logger.info("Starting Surebet API...")

    state = getattr(app.state, "app_state", None) or AppState()
    await state.initialize()
    app.state.app_state = state

    logger.info("Surebet API started successfully")

    yield

    # Cleanup on shutdown
    logger.info("Shutting down Surebet API...")
    await state.shutdown()
    logger.info("Surebet API shutdown complete")


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        state: Pre-built application state (default: built from settings
            on startup)
    """
    app = FastAPI(
        title="Surebet Scanner API",
        description="Cross-bookmaker arbitrage detection over live h2h odds",
        version="0.1.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    if state is not None:
        app.state.app_state = state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(sync.router, prefix="/api", tags=["Sync"])
    app.include_router(games.router, prefix="/api", tags=["Games"])
    app.include_router(jobs.router, prefix="/api", tags=["Jobs"])
    app.include_router(analytics.router, prefix="/api", tags=["Analytics"])

    @app.get("/")
    async def root():
        """Root endpoint pointing at the API documentation."""
        return {
            "name": "Surebet Scanner API",
            "version": "0.1.0",
            "docs": "/api/docs",
            "health": "/api/health",
        }

    return app


app = create_app()
