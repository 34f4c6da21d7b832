"""
Base class and error types for external data sources.

Provides the common error taxonomy, health tracking and logging that the
provider clients share.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from loguru import logger


class DataSourceStatus(str, Enum):
    """Health status of a data source."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    DISABLED = "disabled"


@dataclass
class DataSourceHealth:
    """Health information for a data source."""

    source_name: str
    status: DataSourceStatus
    last_success: Optional[datetime] = None
    last_failure: Optional[datetime] = None
    consecutive_failures: int = 0
    error_message: Optional[str] = None
    latency_ms: Optional[float] = None


class DataSourceError(Exception):
    """Base exception for data source errors."""

    def __init__(
        self,
        message: str,
        source_name: str,
        original_error: Optional[Exception] = None,
        retry_allowed: bool = True,
    ):
        super().__init__(message)
        self.source_name = source_name
        self.original_error = original_error
        self.retry_allowed = retry_allowed


class ConfigurationError(DataSourceError):
    """Credentials or endpoint missing; raised before any network call."""

    def __init__(self, source_name: str, message: str):
        super().__init__(message, source_name, retry_allowed=False)


class UpstreamFetchError(DataSourceError):
    """Provider answered with a non-success status or was unreachable."""

    def __init__(
        self,
        message: str,
        source_name: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
        retry_allowed: bool = True,
    ):
        super().__init__(
            message,
            source_name,
            original_error=original_error,
            retry_allowed=retry_allowed,
        )
        self.status_code = status_code


class RateLimitError(UpstreamFetchError):
    """Error when rate limit is exceeded."""

    def __init__(
        self,
        source_name: str,
        retry_after_seconds: Optional[int] = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {source_name}",
            source_name,
            status_code=429,
            retry_allowed=True,
        )
        self.retry_after_seconds = retry_after_seconds


class AuthenticationError(UpstreamFetchError):
    """Error when authentication fails."""

    def __init__(self, source_name: str, message: str = "Authentication failed"):
        super().__init__(message, source_name, status_code=401, retry_allowed=False)


class BaseDataSource(ABC):
    """
    Abstract base class for provider clients.

    Provides:
    - Health monitoring
    - Logging bound to the source name

    Requests are issued once; retry policy belongs to the caller.
    """

    def __init__(self, source_name: str, enabled: bool = True):
        self.source_name = source_name
        self.enabled = enabled

        self._health = DataSourceHealth(
            source_name=source_name,
            status=DataSourceStatus.HEALTHY if enabled else DataSourceStatus.DISABLED,
        )

        # Setup logging
        self.logger = logger.bind(source=source_name)

    @abstractmethod
    async def health_check(self) -> DataSourceHealth:
        """
        Perform a health check on the data source.

        Should be a lightweight check (e.g., ping endpoint).
        """

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""

    def _record_success(self, latency_ms: float) -> None:
        """Record a successful fetch."""
        self._health.last_success = datetime.now()
        self._health.latency_ms = latency_ms
        self._health.consecutive_failures = 0
        self._health.error_message = None
        self._health.status = DataSourceStatus.HEALTHY

    def _record_failure(self, error_message: str) -> None:
        """Record a failed fetch."""
        self._health.last_failure = datetime.now()
        self._health.consecutive_failures += 1
        self._health.error_message = error_message

        if self._health.consecutive_failures >= 5:
            self._health.status = DataSourceStatus.UNHEALTHY
        elif self._health.consecutive_failures >= 2:
            self._health.status = DataSourceStatus.DEGRADED

    def get_health(self) -> DataSourceHealth:
        """Get current health status of the data source."""
        return self._health
