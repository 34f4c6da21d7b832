"""API routers for the Surebet Scanner."""

from . import analytics, games, health, jobs, sync

__all__ = [
    "analytics",
    "games",
    "health",
    "jobs",
    "sync",
]
