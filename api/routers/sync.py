"""Odds sync trigger and sync status endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from surebet.config.constants import DEFAULT_SPORT_KEY
from surebet.data.sources.base import ConfigurationError, DataSourceError, UpstreamFetchError
from surebet.database.schemas import (
    HourlySyncResponse,
    SyncOddsRequest,
    SyncOddsResponse,
    SyncRunResponse,
    SyncStatusResponse,
)
from surebet.scheduler.jobs import sync_all_sports, sync_odds

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(error: Exception) -> JSONResponse:
    """
    Map a sync failure onto an HTTP error body.

    Configuration problems and unexpected failures are 500; provider
    failures carry the provider's status code (502 when there is none).
    """
    if isinstance(error, ConfigurationError):
        status_code = 500
    elif isinstance(error, UpstreamFetchError):
        status_code = error.status_code or 502
    elif isinstance(error, DataSourceError):
        status_code = 502
    else:
        status_code = 500
    return JSONResponse(status_code=status_code, content={"error": str(error)})


def _default_sport_key(app_state: Any) -> str:
    settings = app_state.settings
    if settings is not None:
        return settings.arbitrage.default_sport_key
    return DEFAULT_SPORT_KEY


@router.post("/sync-odds", response_model=SyncOddsResponse)
async def trigger_sync(
    request: Request,
    payload: Optional[SyncOddsRequest] = None,
) -> Any:
    """
    Fetch one sport's odds, persist them and log arbitrage opportunities.

    Body: {"sportKey": "soccer_epl"} (optional, defaults to basketball_nba)
    """
    app_state = request.app.state.app_state
    sport_key = (payload.sport_key if payload else None) or _default_sport_key(app_state)

    try:
        result = await sync_odds(
            sport_key,
            app_state.client,
            app_state.repository,
            app_state.scanner,
        )
    except Exception as e:
        if isinstance(e, DataSourceError):
            logger.error(f"Sync failed for {sport_key}: {e}")
        else:
            logger.exception(f"Unexpected error syncing {sport_key}: {e}")
        return error_response(e)

    response = SyncOddsResponse(
        success=True,
        games_processed=result.games_processed,
        odds_processed=result.odds_processed,
        arbitrages_logged=result.arbitrages_logged,
        sport_key=result.sport_key,
    )
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))


@router.post("/sync-all", response_model=HourlySyncResponse)
async def trigger_sync_all(request: Request) -> Any:
    """
    Sync every configured sport in sequence.

    A failing sport is skipped; its key is listed in failedSports.
    """
    app_state = request.app.state.app_state

    try:
        sched = app_state.settings.scheduler
        run = await sync_all_sports(
            client=app_state.client,
            repository=app_state.repository,
            sports=sched.sports,
            delay_seconds=sched.inter_sport_delay_seconds,
            scanner=app_state.scanner,
        )
    except Exception as e:
        logger.exception(f"Multi-sport sync failed: {e}")
        return error_response(e)

    response = HourlySyncResponse(
        success=True,
        timestamp=run.timestamp,
        total_games=run.total_games,
        total_odds=run.total_odds,
        total_arbitrages=run.total_arbitrages,
        sports_processed=run.sports_processed,
        failed_sports=run.failed_sports,
    )
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))


@router.get("/sync-status", response_model=SyncStatusResponse)
async def get_sync_status(request: Request) -> Any:
    """
    Most recent completed sync.

    Returns {"lastRunAt": null, "sportKey": "basketball_nba"} before the
    first sync completes.
    """
    app_state = request.app.state.app_state

    try:
        record = app_state.repository.get_sync_status()
    except Exception as e:
        logger.exception(f"Failed to read sync status: {e}")
        return error_response(e)

    if record is None:
        response = SyncStatusResponse(
            last_run_at=None,
            sport_key=_default_sport_key(app_state),
        )
    else:
        response = SyncStatusResponse(
            last_run_at=record.last_run_at,
            sport_key=record.sport_key,
        )
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))


@router.get("/sync-runs", response_model=list[SyncRunResponse])
async def list_sync_runs(
    request: Request,
    limit: int = Query(24, ge=1, le=500),
) -> Any:
    """Totals of the most recent multi-sport runs, newest first."""
    app_state = request.app.state.app_state

    runs = app_state.repository.list_run_stats(limit)
    return JSONResponse(
        content=[
            SyncRunResponse.model_validate(run).model_dump(mode="json", by_alias=True)
            for run in runs
        ]
    )
