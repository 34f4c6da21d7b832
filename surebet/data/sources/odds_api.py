"""
The Odds API client for head-to-head betting odds.

Fetches upcoming events with per-bookmaker h2h prices in decimal format
for a single sport key. Features async HTTP with credit tracking.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import aiohttp

from .base import (
    AuthenticationError,
    BaseDataSource,
    ConfigurationError,
    DataSourceHealth,
    DataSourceStatus,
    RateLimitError,
    UpstreamFetchError,
)


def parse_retry_after(value: str | None) -> int | None:
    """
    Seconds to wait from a Retry-After header.

    Accepts delay-seconds (fractions truncated) or an HTTP-date; anything
    unparseable gives None.
    """
    if not value:
        return None
    try:
        return max(0, int(float(value)))
    except (ValueError, OverflowError):
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0, int((when - datetime.now(timezone.utc)).total_seconds()))


class OddsAPIClient(BaseDataSource):
    """
    Async client for The Odds API.

    This client handles:
    - Async HTTP requests with a shared session
    - Credit tracking via response headers
    - Mapping of HTTP failures onto the data source error types

    Credit costs:
    - Odds request: 1 credit per region per market
    """

    SOURCE_NAME = "odds_api"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        regions: list[str] | None = None,
        markets: list[str] | None = None,
        odds_format: str = "decimal",
        timeout_seconds: float = 30.0,
    ):
        super().__init__(source_name=self.SOURCE_NAME, enabled=bool(api_key and base_url))

        self.api_key = api_key
        self.base_url = (base_url or "").rstrip("/")
        self.regions = regions or ["eu"]
        self.markets = markets or ["h2h"]
        self.odds_format = odds_format
        self.timeout_seconds = timeout_seconds

        # API credit tracking
        self._remaining_credits: int | None = None
        self._used_credits: int | None = None
        self._last_credit_check: datetime | None = None

        # Session management
        self._session: aiohttp.ClientSession | None = None

        if not self.enabled:
            self.logger.warning("Odds API key or base URL missing - syncs will fail")

    @classmethod
    def from_settings(cls, settings: Any) -> "OddsAPIClient":
        """Build a client from application settings."""
        odds = settings.odds_api
        return cls(
            api_key=odds.api_key,
            base_url=odds.base_url,
            regions=odds.regions,
            markets=odds.markets,
            odds_format=odds.odds_format,
            timeout_seconds=odds.timeout_seconds,
        )

    @property
    def remaining_credits(self) -> int | None:
        return self._remaining_credits

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when credentials or endpoint are missing."""
        if not self.api_key or not self.base_url:
            raise ConfigurationError(
                self.source_name,
                "Odds API configuration missing (ODDS_API_KEY / ODDS_BASE_URL)",
            )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def health_check(self) -> DataSourceHealth:
        """Check if The Odds API is accessible."""
        if not self.enabled:
            return DataSourceHealth(
                source_name=self.source_name,
                status=DataSourceStatus.DISABLED,
                error_message="API key not configured",
            )

        try:
            # Sports listing costs no credits
            url = f"{self.base_url}/sports"
            params = {"apiKey": self.api_key}

            session = await self._get_session()
            async with session.get(url, params=params) as response:
                self._update_credits(response.headers)

                if response.status == 200:
                    return DataSourceHealth(
                        source_name=self.source_name,
                        status=DataSourceStatus.HEALTHY,
                        last_success=datetime.now(),
                    )
                elif response.status == 401:
                    return DataSourceHealth(
                        source_name=self.source_name,
                        status=DataSourceStatus.UNHEALTHY,
                        error_message="Invalid API key",
                    )
                else:
                    return DataSourceHealth(
                        source_name=self.source_name,
                        status=DataSourceStatus.DEGRADED,
                        error_message=f"HTTP {response.status}",
                    )

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            return DataSourceHealth(
                source_name=self.source_name,
                status=DataSourceStatus.UNHEALTHY,
                error_message=str(e),
            )

    def _update_credits(self, headers: Any) -> None:
        """Update credit tracking from response headers."""
        if "x-requests-remaining" in headers:
            self._remaining_credits = int(float(headers["x-requests-remaining"]))
        if "x-requests-used" in headers:
            self._used_credits = int(float(headers["x-requests-used"]))
        self._last_credit_check = datetime.now()

        self.logger.debug(
            f"API credits - Remaining: {self._remaining_credits}, "
            f"Used: {self._used_credits}"
        )

        if self._remaining_credits is not None and self._remaining_credits < 100:
            self.logger.warning(
                f"Low API credits! Only {self._remaining_credits} remaining"
            )

    async def _make_request(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict | list:
        """
        Make an authenticated request to The Odds API.

        Args:
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            JSON response data

        Raises:
            ConfigurationError: When credentials are missing
            UpstreamFetchError: On non-2xx responses or connection errors
        """
        self.ensure_configured()

        url = f"{self.base_url}/{endpoint}"
        request_params = {"apiKey": self.api_key}
        if params:
            request_params.update(params)

        session = await self._get_session()
        start_time = datetime.now()

        try:
            async with session.get(url, params=request_params) as response:
                self._update_credits(response.headers)
                elapsed = (datetime.now() - start_time).total_seconds()

                if 200 <= response.status < 300:
                    data = await response.json()
                    self._record_success(elapsed * 1000)
                    return data

                error_text = await response.text()
                self._record_failure(f"HTTP {response.status}")

                if response.status == 401:
                    raise AuthenticationError(self.source_name, "Invalid API key")

                if response.status == 429:
                    retry_after = response.headers.get("Retry-After", "60")
                    raise RateLimitError(
                        self.source_name,
                        retry_after_seconds=parse_retry_after(retry_after),
                    )

                raise UpstreamFetchError(
                    f"Error fetching odds: {response.status} {error_text}".strip(),
                    self.source_name,
                    status_code=response.status,
                    retry_allowed=response.status >= 500,
                )

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._record_failure(str(e))
            raise UpstreamFetchError(
                f"Connection error: {e}",
                self.source_name,
                original_error=e,
            ) from e

    async def get_odds(self, sport_key: str) -> list[dict]:
        """
        Get current h2h odds for all upcoming events of a sport.

        Args:
            sport_key: Provider sport key (e.g. basketball_nba)

        Returns:
            List of raw events with bookmaker markets

        Example:
            >>> client = OddsAPIClient(api_key="...", base_url="https://api.the-odds-api.com/v4")
            >>> events = await client.get_odds("soccer_epl")
            >>> for event in events:
            ...     print(f"{event['home_team']} vs {event['away_team']}")
        """
        params = {
            "regions": ",".join(self.regions),
            "markets": ",".join(self.markets),
            "oddsFormat": self.odds_format,
        }

        self.logger.info(f"Fetching odds for sport: {sport_key}")

        data = await self._make_request(f"sports/{sport_key}/odds", params)

        if not isinstance(data, list):
            raise UpstreamFetchError(
                f"Unexpected odds payload for {sport_key}",
                self.source_name,
                retry_allowed=False,
            )

        self.logger.info(f"Received {len(data)} events from the API")
        return data
