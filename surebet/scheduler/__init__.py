"""
Job scheduling module.

Provides APScheduler-based background job orchestration for:
- Single-sport odds sync with arbitrage logging
- Multi-sport sync at a configurable interval
- Health monitoring

Example:
    >>> from surebet.scheduler import SchedulerOrchestrator
    >>>
    >>> scheduler = SchedulerOrchestrator(settings, client, repository)
    >>> scheduler.start()
    >>>
    >>> # Manual trigger
    >>> scheduler.trigger_job("sync_all_sports")
    >>>
    >>> # Graceful shutdown
    >>> scheduler.stop()
"""

from .orchestrator import HEALTH_CHECK_JOB, SYNC_ALL_SPORTS_JOB, SchedulerOrchestrator
from .jobs import (
    SchedulerRunResult,
    SyncResult,
    health_check,
    sync_all_sports,
    sync_odds,
)

__all__ = [
    "SchedulerOrchestrator",
    "SYNC_ALL_SPORTS_JOB",
    "HEALTH_CHECK_JOB",
    "SchedulerRunResult",
    "SyncResult",
    "health_check",
    "sync_all_sports",
    "sync_odds",
]
