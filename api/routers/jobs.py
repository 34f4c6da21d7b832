"""Scheduler job control endpoints."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from surebet.scheduler.orchestrator import HEALTH_CHECK_JOB, SYNC_ALL_SPORTS_JOB

router = APIRouter()

VALID_JOBS = [SYNC_ALL_SPORTS_JOB, HEALTH_CHECK_JOB]


class JobAction(str, Enum):
    TRIGGER = "trigger"
    PAUSE = "pause"
    RESUME = "resume"


class JobStatus(BaseModel):
    """One scheduled job."""

    job_id: str
    name: str
    last_status: str
    run_count: int = 0
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    error: Optional[str] = None


class JobsStatusResponse(BaseModel):
    scheduler_running: bool
    jobs: list[JobStatus]


class JobActionResponse(BaseModel):
    success: bool = True
    job_id: str
    action: JobAction
    at: datetime


@router.get("/jobs/status", response_model=JobsStatusResponse)
async def get_jobs_status(request: Request) -> JobsStatusResponse:
    """Last run, next run and outcome of every scheduled job."""
    scheduler = request.app.state.app_state.scheduler
    if not scheduler:
        return JobsStatusResponse(scheduler_running=False, jobs=[])

    jobs = [
        JobStatus(
            job_id=job_id,
            name=info["name"],
            last_status=info["last_status"],
            run_count=info["run_count"],
            last_run=info["last_run"],
            next_run=info["next_run"],
            error=info["last_error"],
        )
        for job_id, info in scheduler.get_job_status().items()
    ]
    return JobsStatusResponse(scheduler_running=scheduler.is_running, jobs=jobs)


@router.post("/jobs/{job_id}/{action}", response_model=JobActionResponse)
async def control_job(request: Request, job_id: str, action: JobAction) -> Any:
    """
    Trigger, pause or resume one job.

    Triggering a paused job resumes it and runs it immediately.
    """
    scheduler = request.app.state.app_state.scheduler
    if not scheduler:
        raise HTTPException(status_code=503, detail="Scheduler not initialized")
    if job_id not in VALID_JOBS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid job ID. Must be one of: {VALID_JOBS}",
        )

    handlers = {
        JobAction.TRIGGER: scheduler.trigger_job,
        JobAction.PAUSE: scheduler.pause_job,
        JobAction.RESUME: scheduler.resume_job,
    }
    if not handlers[action](job_id):
        raise HTTPException(status_code=404, detail=f"Job '{job_id}' is not scheduled")

    return JobActionResponse(job_id=job_id, action=action, at=datetime.now(timezone.utc))
