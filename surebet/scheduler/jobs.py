"""
Background job definitions for the scheduler.

Each job is an async function that performs a specific task:
- sync_odds: Fetch one sport's odds, persist games and quotes, log arbitrage
- sync_all_sports: Run sync_odds over the configured sports in sequence
- health_check: Monitor data source health
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from loguru import logger

from surebet.betting.arbitrage_scanner import ArbitrageScanner
from surebet.data.normalizer import NormalizedQuote, event_to_game, normalize_event, parse_event
from surebet.data.sources.base import DataSourceError
from surebet.database.repository import OddsRepository, RepositoryError


@dataclass
class SyncResult:
    """Counts from one single-sport sync."""

    games_processed: int
    odds_processed: int
    arbitrages_logged: int
    sport_key: str


@dataclass
class SchedulerRunResult:
    """Totals from one multi-sport run."""

    timestamp: datetime
    total_games: int = 0
    total_odds: int = 0
    total_arbitrages: int = 0
    sports_processed: int = 0
    results: list[SyncResult] = field(default_factory=list)
    failed_sports: list[str] = field(default_factory=list)


async def sync_odds(
    sport_key: str,
    client: Any,
    repository: OddsRepository,
    scanner: Optional[ArbitrageScanner] = None,
) -> SyncResult:
    """
    Fetch odds for one sport, persist them and log arbitrage opportunities.

    This is the core sync job that:
    1. Fetches the sport's events from The Odds API
    2. Upserts each event as a game
    3. Upserts each bookmaker's h2h quote for that game
    4. Scans the saved quotes pairwise and logs every arbitrage found
    5. Records the sync status

    A failing game or quote is logged and skipped; only the fetch is fatal.

    Note: the scan covers home and away legs only. For draw sports the
    logged entries are not risk-free, since both legs lose on a draw.

    Args:
        sport_key: Provider sport key (e.g. basketball_nba)
        client: OddsAPIClient instance
        repository: Storage for games, quotes and the arbitrage log
        scanner: ArbitrageScanner instance (default: report any arbitrage)

    Returns:
        SyncResult with games, quotes and arbitrages written

    Raises:
        DataSourceError: When configuration is missing or the fetch fails
    """
    scanner = scanner or ArbitrageScanner()
    log = logger.bind(sport_key=sport_key)

    log.info(f"=== STARTING ODDS SYNC: {sport_key} ===")
    start_time = datetime.now()

    raw_events = await client.get_odds(sport_key)
    log.info(f"Step 1: Fetched {len(raw_events)} events")

    games_processed = 0
    odds_processed = 0
    arbitrages_logged = 0

    for raw in raw_events:
        try:
            event = parse_event(raw)
        except ValueError as e:
            log.warning(f"Skipping malformed event: {e}")
            continue

        try:
            game = repository.upsert_game(event_to_game(event, sport_key))
        except RepositoryError as e:
            log.error(f"Error saving game {event.id}: {e}")
            continue
        games_processed += 1

        saved: list[NormalizedQuote] = []
        for quote in normalize_event(event):
            try:
                repository.upsert_odd(game.id, quote)
            except RepositoryError as e:
                log.error(f"Error saving odds {quote.bookmaker} for game {game.id}: {e}")
                continue
            saved.append(quote)
            odds_processed += 1

        if len(saved) < 2:
            continue

        scan = scanner.scan_pairs(saved)
        for opportunity in scan.opportunities:
            try:
                repository.append_arbitrage(game, opportunity)
            except RepositoryError as e:
                log.error(f"Error logging arbitrage for game {game.id}: {e}")
                continue
            arbitrages_logged += 1
            log.info(
                f"Arbitrage: {game.home_team} vs {game.away_team} "
                f"{opportunity.bookmaker_a}@{opportunity.odd_a} / "
                f"{opportunity.bookmaker_b}@{opportunity.odd_b} "
                f"({opportunity.profit_percent:.2f}%)"
            )

    try:
        repository.set_sync_status(sport_key, datetime.now(timezone.utc))
    except RepositoryError as e:
        log.error(f"Error updating sync status: {e}")

    elapsed = (datetime.now() - start_time).total_seconds()
    log.info(
        f"=== ODDS SYNC COMPLETE in {elapsed:.1f}s === "
        f"games={games_processed} odds={odds_processed} arbitrages={arbitrages_logged}"
    )

    return SyncResult(
        games_processed=games_processed,
        odds_processed=odds_processed,
        arbitrages_logged=arbitrages_logged,
        sport_key=sport_key,
    )


async def sync_all_sports(
    client: Any,
    repository: OddsRepository,
    sports: Sequence[str],
    delay_seconds: float = 1.0,
    scanner: Optional[ArbitrageScanner] = None,
) -> SchedulerRunResult:
    """
    Sync every sport in order, pausing between provider calls.

    A sport that fails is logged and skipped. The run totals are appended
    to the run statistics afterwards.

    Args:
        client: OddsAPIClient instance
        repository: Storage for games, quotes and statistics
        sports: Provider sport keys, synced in the given order
        delay_seconds: Pause between consecutive sports
        scanner: ArbitrageScanner shared across sports

    Returns:
        SchedulerRunResult with aggregate counts
    """
    run = SchedulerRunResult(timestamp=datetime.now(timezone.utc))
    logger.info(f"Starting scheduled sync of {len(sports)} sports")

    for index, sport_key in enumerate(sports):
        if index > 0 and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

        try:
            result = await sync_odds(sport_key, client, repository, scanner)
        except DataSourceError as e:
            logger.error(f"Sync failed for {sport_key}: {e}")
            run.failed_sports.append(sport_key)
            continue
        except Exception as e:
            logger.exception(f"Unexpected error syncing {sport_key}: {e}")
            run.failed_sports.append(sport_key)
            continue

        run.results.append(result)
        run.total_games += result.games_processed
        run.total_odds += result.odds_processed
        run.total_arbitrages += result.arbitrages_logged
        run.sports_processed += 1

    try:
        repository.append_run_stats(
            total_games=run.total_games,
            total_odds=run.total_odds,
            total_arbitrages=run.total_arbitrages,
            sports_synced=run.sports_processed,
            sync_time=run.timestamp,
        )
    except RepositoryError as e:
        logger.error(f"Error saving run statistics: {e}")

    logger.info(
        f"Scheduled sync complete: {run.sports_processed}/{len(sports)} sports, "
        f"{run.total_games} games, {run.total_odds} odds, "
        f"{run.total_arbitrages} arbitrages"
    )
    if run.failed_sports:
        logger.warning(f"Failed sports: {run.failed_sports}")

    return run


async def health_check(client: Any) -> Any:
    """
    Check the provider's health.

    Args:
        client: OddsAPIClient instance

    Returns:
        DataSourceHealth, or None if the check itself failed
    """
    logger.debug("Running health check...")

    try:
        health = await client.health_check()
        logger.debug(f"Health check: {client.source_name} is {health.status.value}")
        return health
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return None
