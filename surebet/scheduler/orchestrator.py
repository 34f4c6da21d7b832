"""
APScheduler orchestrator for the periodic odds sync.

Registers two interval jobs on an AsyncIOScheduler:
- sync_all_sports: every configured sport, one after another
- health_check: provider reachability, every 5 minutes
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from surebet.betting.arbitrage_scanner import ArbitrageScanner
from surebet.scheduler.jobs import SchedulerRunResult, health_check, sync_all_sports

logger = logging.getLogger(__name__)

SYNC_ALL_SPORTS_JOB = "sync_all_sports"
HEALTH_CHECK_JOB = "health_check"

HEALTH_CHECK_MINUTES = 5


@dataclass
class JobRunState:
    """Outcome bookkeeping for one scheduled job."""

    last_run: Optional[datetime] = None
    last_status: str = "pending"
    last_error: Optional[str] = None
    run_count: int = 0

    def record(self, error: Optional[BaseException]) -> None:
        self.last_run = datetime.now(timezone.utc)
        self.run_count += 1
        if error is None:
            self.last_status = "success"
            self.last_error = None
        else:
            self.last_status = "error"
            self.last_error = str(error)


class SchedulerOrchestrator:
    """
    Owns the scheduler lifecycle and the sync job registrations.

    Example:
        >>> orchestrator = SchedulerOrchestrator(settings, client, repository)
        >>> orchestrator.start()
        >>> # ... event loop runs ...
        >>> orchestrator.stop()
    """

    def __init__(
        self,
        settings: Any,
        client: Any,
        repository: Any,
        scanner: Optional[ArbitrageScanner] = None,
    ):
        """
        Args:
            settings: Application settings (scheduler group is read)
            client: OddsAPIClient instance
            repository: OddsRepository instance
            scanner: ArbitrageScanner shared by the sync runs
        """
        self.settings = settings
        self.client = client
        self.repository = repository
        self.scanner = scanner or ArbitrageScanner()

        self.scheduler = AsyncIOScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 60,
            },
        )
        self.scheduler.add_listener(self._on_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

        self._job_states: dict[str, JobRunState] = {}
        self._last_run: Optional[SchedulerRunResult] = None
        self._is_running = False

    def start(self) -> None:
        """Register the jobs and start the scheduler on the running loop."""
        if self._is_running:
            logger.warning("Scheduler already running")
            return

        self._register_jobs()
        self.scheduler.start()
        self._is_running = True

        for job in self.scheduler.get_jobs():
            when = job.next_run_time.isoformat() if job.next_run_time else "paused"
            logger.info(f"Scheduled {job.id} (next run {when})")

    def stop(self) -> None:
        """Shut the scheduler down without waiting for running jobs."""
        if not self._is_running:
            return

        self.scheduler.shutdown(wait=False)
        self._is_running = False
        logger.info("Scheduler stopped")

    def _register_jobs(self) -> None:
        sched = self.settings.scheduler

        first_run = {}
        if sched.run_on_start:
            first_run["next_run_time"] = datetime.now(timezone.utc)

        self.scheduler.add_job(
            self._sync_all_sports_job,
            trigger=IntervalTrigger(minutes=sched.interval_minutes),
            id=SYNC_ALL_SPORTS_JOB,
            name="Sync odds (all sports)",
            replace_existing=True,
            **first_run,
        )
        self.scheduler.add_job(
            self._health_check_job,
            trigger=IntervalTrigger(minutes=HEALTH_CHECK_MINUTES),
            id=HEALTH_CHECK_JOB,
            name="Provider health check",
            replace_existing=True,
        )

        self._job_states = {job_id: JobRunState() for job_id in (SYNC_ALL_SPORTS_JOB, HEALTH_CHECK_JOB)}
        logger.info(
            f"Syncing {len(sched.sports)} sports every {sched.interval_minutes} min"
        )

    async def _sync_all_sports_job(self) -> None:
        sched = self.settings.scheduler
        self._last_run = await sync_all_sports(
            client=self.client,
            repository=self.repository,
            sports=sched.sports,
            delay_seconds=sched.inter_sport_delay_seconds,
            scanner=self.scanner,
        )

    async def _health_check_job(self) -> None:
        health = await health_check(client=self.client)
        if health is not None and health.status.value != "healthy":
            logger.warning(
                f"Odds provider {health.status.value}: {health.error_message}"
            )

    def _on_job_event(self, event: JobExecutionEvent) -> None:
        state = self._job_states.get(event.job_id)
        if state is not None:
            state.record(event.exception)
        if event.exception is not None:
            logger.error(f"Job {event.job_id} failed: {event.exception}")

    def get_job_status(self) -> dict[str, dict]:
        """Name, next run and run bookkeeping for every scheduled job."""
        status = {}
        for job in self.scheduler.get_jobs():
            state = self._job_states.get(job.id, JobRunState())
            status[job.id] = {
                "name": job.name,
                "next_run": job.next_run_time,
                **asdict(state),
            }
        return status

    def get_last_run(self) -> Optional[SchedulerRunResult]:
        """Totals of the most recent scheduled multi-sport run."""
        return self._last_run

    def trigger_job(self, job_id: str) -> bool:
        """Run a job now, resuming it first if paused. False if unknown."""
        if self.scheduler.get_job(job_id) is None:
            return False
        self.scheduler.resume_job(job_id)
        self.scheduler.modify_job(job_id, next_run_time=datetime.now(timezone.utc))
        logger.info(f"Triggered job: {job_id}")
        return True

    def pause_job(self, job_id: str) -> bool:
        if self.scheduler.get_job(job_id) is None:
            return False
        self.scheduler.pause_job(job_id)
        logger.info(f"Paused job: {job_id}")
        return True

    def resume_job(self, job_id: str) -> bool:
        if self.scheduler.get_job(job_id) is None:
            return False
        self.scheduler.resume_job(job_id)
        logger.info(f"Resumed job: {job_id}")
        return True

    @property
    def is_running(self) -> bool:
        return self._is_running
