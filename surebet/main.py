#!/usr/bin/env python3
"""
Surebet Scanner - Main Application Entry Point.

Cross-bookmaker arbitrage detection system that:
1. Fetches head-to-head odds from The Odds API
2. Stores games and the latest quote of every bookmaker
3. Scans bookmaker pairs for guaranteed-profit combinations
4. Logs every opportunity found

Usage:
    surebet sync                      # Sync the default sport once
    surebet sync --sport soccer_epl   # Sync one sport once
    surebet sync --all                # Sync every configured sport once
    surebet status                    # Show the last completed sync
    surebet run                       # Headless scheduler
    surebet serve                     # HTTP API with scheduler
"""

import argparse
import asyncio
import logging
import signal
import sys
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)


class SurebetApp:
    """
    Main application orchestrator.

    Initializes all components and manages the application lifecycle:
    - Storage for games, quotes and the arbitrage log
    - Odds API client
    - Arbitrage scanner
    - Scheduler for background syncs
    """

    def __init__(self, enable_scheduler: bool = True, debug: bool = False):
        """
        Initialize the application.

        Args:
            enable_scheduler: Whether to start background sync jobs
            debug: Enable debug logging
        """
        self.enable_scheduler = enable_scheduler
        self.debug = debug

        # Components (initialized in setup)
        self.settings = None
        self.repository = None
        self.client = None
        self.scanner = None
        self.scheduler = None

        # State
        self._running = False
        self._shutdown_event = asyncio.Event()

    def setup(self) -> None:
        """Initialize all application components."""
        from surebet.betting.arbitrage_scanner import ArbitrageScanner
        from surebet.config.settings import get_settings
        from surebet.data.sources.odds_api import OddsAPIClient
        from surebet.database.models import init_db
        from surebet.database.repository import SQLAlchemyRepository
        from surebet.utils.logging import setup_logging

        self.settings = get_settings()
        level = "DEBUG" if (self.debug or self.settings.debug) else self.settings.log_level
        setup_logging(level, self.settings.log_file)

        logger.info("=" * 60)
        logger.info("SUREBET SCANNER - Cross-Book Arbitrage Detection")
        logger.info("=" * 60)
        logger.info(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        logger.info("Initializing storage...")
        engine = init_db(self.settings.database_url)
        self.repository = SQLAlchemyRepository(engine)

        self.client = OddsAPIClient.from_settings(self.settings)
        self.scanner = ArbitrageScanner()

        logger.info("Initialization complete")

    async def _init_scheduler(self) -> None:
        """Initialize APScheduler with background jobs."""
        from surebet.scheduler.orchestrator import SchedulerOrchestrator

        self.scheduler = SchedulerOrchestrator(
            settings=self.settings,
            client=self.client,
            repository=self.repository,
            scanner=self.scanner,
        )

        self.scheduler.start()
        logger.info("✓ Scheduler started")

    async def sync(self, sport_key: Optional[str] = None, all_sports: bool = False) -> None:
        """Run one sync (or one multi-sport run) and report the counts."""
        from surebet.config.constants import get_sport_name
        from surebet.scheduler.jobs import sync_all_sports, sync_odds

        try:
            if all_sports:
                sched = self.settings.scheduler
                run = await sync_all_sports(
                    client=self.client,
                    repository=self.repository,
                    sports=sched.sports,
                    delay_seconds=sched.inter_sport_delay_seconds,
                    scanner=self.scanner,
                )
                print(
                    f"Synced {run.sports_processed}/{len(sched.sports)} sports: "
                    f"{run.total_games} games, {run.total_odds} odds, "
                    f"{run.total_arbitrages} arbitrages"
                )
                if run.failed_sports:
                    print(f"Failed: {', '.join(run.failed_sports)}")
                return

            sport_key = sport_key or self.settings.arbitrage.default_sport_key
            result = await sync_odds(sport_key, self.client, self.repository, self.scanner)
            print(
                f"{get_sport_name(result.sport_key)}: {result.games_processed} games, "
                f"{result.odds_processed} odds, {result.arbitrages_logged} arbitrages"
            )
        finally:
            await self.client.close()

    def status(self) -> None:
        """Print the most recent completed sync."""
        record = self.repository.get_sync_status()
        if record is None:
            print("No sync has completed yet")
            return
        print(f"Last sync: {record.last_run_at.isoformat()} ({record.sport_key})")

    async def run(self) -> None:
        """Run the scheduler until a shutdown signal arrives."""
        self._running = True

        # Set up signal handlers for graceful shutdown
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._signal_handler)

        try:
            if self.enable_scheduler:
                await self._init_scheduler()
            logger.info("Running in headless mode")
            await self._shutdown_event.wait()
        finally:
            await self.shutdown()

    def _signal_handler(self) -> None:
        """Handle shutdown signals."""
        logger.info("Shutdown signal received...")
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Gracefully shutdown all components."""
        logger.info("Shutting down...")

        if self.scheduler:
            self.scheduler.stop()
            logger.info("✓ Scheduler stopped")

        if self.client:
            await self.client.close()

        self._running = False
        logger.info("Shutdown complete")


async def main_async(args: argparse.Namespace) -> int:
    """Async main function."""
    from surebet.data.sources.base import DataSourceError

    app = SurebetApp(
        enable_scheduler=not getattr(args, "no_scheduler", False),
        debug=args.debug,
    )

    try:
        app.setup()
        if args.command == "sync":
            await app.sync(args.sport, all_sports=args.all)
        elif args.command == "status":
            app.status()
        else:
            await app.run()
        return 0
    except DataSourceError as e:
        logger.error(f"Sync failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


def serve(host: str, port: int) -> None:
    """Run the HTTP API (with its scheduler) under uvicorn."""
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port)


def main() -> None:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Surebet Scanner - cross-bookmaker arbitrage detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    surebet sync                      Sync basketball_nba once
    surebet sync --sport soccer_epl   Sync one sport once
    surebet sync --all                Sync every configured sport once
    surebet status                    Show the last completed sync
    surebet run                       Start the headless scheduler
    surebet serve --port 8000         Start the HTTP API
        """,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Fetch odds and log arbitrage once")
    sync_parser.add_argument(
        "--sport",
        default=None,
        help="Provider sport key (default from settings)",
    )
    sync_parser.add_argument(
        "--all",
        action="store_true",
        help="Sync every configured sport in sequence",
    )

    subparsers.add_parser("status", help="Show the most recent completed sync")

    run_parser = subparsers.add_parser("run", help="Run the scheduler in the foreground")
    run_parser.add_argument(
        "--no-scheduler",
        action="store_true",
        help="Start without background sync jobs",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.command == "serve":
        serve(args.host, args.port)
        return

    # Run async main
    exit_code = asyncio.run(main_async(args))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
