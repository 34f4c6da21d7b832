"""
Application state management for FastAPI.

Holds shared state across the application:
- Settings
- Repository (games, quotes, arbitrage log, sync status)
- Odds API client
- Arbitrage scanner
- Scheduler orchestrator
"""

import logging
import traceback
from datetime import datetime
from typing import Any, Optional

logger = logging.getLogger(__name__)


class AppState:
    """
    Centralized application state.

    Components passed to the constructor are used as given; the rest are
    built from settings on initialize().
    """

    def __init__(
        self,
        settings: Any = None,
        repository: Any = None,
        client: Any = None,
        scanner: Any = None,
        enable_scheduler: bool = True,
    ):
        self.settings = settings
        self.repository = repository
        self.client = client
        self.scanner = scanner
        self.scheduler = None
        self.enable_scheduler = enable_scheduler
        self._initialized = False
        self._init_error: Optional[str] = None
        self._started_at: Optional[datetime] = None

    async def initialize(self) -> None:
        """Initialize all application components."""
        if self._initialized:
            return

        try:
            # Import here to avoid circular imports
            from surebet.betting.arbitrage_scanner import ArbitrageScanner
            from surebet.config.settings import get_settings
            from surebet.data.sources.odds_api import OddsAPIClient
            from surebet.database.models import init_db
            from surebet.database.repository import SQLAlchemyRepository
            from surebet.scheduler.orchestrator import SchedulerOrchestrator

            if self.settings is None:
                self.settings = get_settings()
                logger.info("Settings loaded")

            if self.repository is None:
                engine = init_db(self.settings.database_url)
                self.repository = SQLAlchemyRepository(engine)
                logger.info("Repository initialized")

            if self.client is None:
                self.client = OddsAPIClient.from_settings(self.settings)
                logger.info("Odds API client initialized")

            if self.scanner is None:
                self.scanner = ArbitrageScanner()

            if self.enable_scheduler:
                self.scheduler = SchedulerOrchestrator(
                    settings=self.settings,
                    client=self.client,
                    repository=self.repository,
                    scanner=self.scanner,
                )
                self.scheduler.start()
                logger.info("Scheduler started")

            self._initialized = True
            self._started_at = datetime.now()
            logger.info("All components initialized successfully")

        except Exception as e:
            self._init_error = f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
            logger.error(f"Failed to initialize components: {self._init_error}")
            # Don't raise - allow API to start and report degraded health
            self._initialized = False

    async def shutdown(self) -> None:
        """Gracefully shutdown all components."""
        if self.scheduler:
            try:
                self.scheduler.stop()
                logger.info("Scheduler stopped")
            except Exception as e:
                logger.error(f"Error stopping scheduler: {e}")

        if self.client and hasattr(self.client, "close"):
            try:
                await self.client.close()
            except Exception as e:
                logger.error(f"Error closing odds client: {e}")

    @property
    def is_initialized(self) -> bool:
        """Check if all components are initialized."""
        return self._initialized

    def get_health_status(self) -> dict:
        """Get health status of all components."""
        provider = None
        if self.client is not None and hasattr(self.client, "get_health"):
            health = self.client.get_health()
            provider = {
                "status": health.status.value,
                "consecutive_failures": health.consecutive_failures,
                "error": health.error_message,
                "remaining_credits": getattr(self.client, "remaining_credits", None),
            }

        status = {
            "initialized": self._initialized,
            "settings": self.settings is not None,
            "repository": self.repository is not None,
            "odds_client": self.client is not None,
            "scanner": self.scanner is not None,
            "scheduler": self.scheduler is not None,
            "scheduler_running": self.scheduler.is_running if self.scheduler else False,
            "provider": provider,
            "started_at": self._started_at.isoformat() if self._started_at else None,
        }
        if self._init_error:
            status["init_error"] = self._init_error
        return status
