"""
Holiday sources for business-day calculation.

Every source answers one question: which dates are flagged as holidays,
optionally restricted to an inclusive date range. Failures are reported as
HolidaySourceError so the calculator can degrade to "no known holidays".
"""

import logging
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Protocol, Set, Tuple

import holidays
import httpx

from smg_daily_dates.core.exceptions import HolidaySourceError
from smg_daily_dates.data.schemas import Config, HolidaySourceType

logger = logging.getLogger(__name__)


class HolidaySource(Protocol):
    """Read-only provider of holiday dates."""

    async def get_holiday_dates(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> Set[date]:
        ...


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


class SupabaseHolidayProvider:
    """Reads holiday flags from a Supabase table through its PostgREST API."""

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = "calendar",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the Supabase holiday provider.

        Args:
            url: Supabase project URL, e.g. https://xyz.supabase.co
            api_key: Key sent as both apikey header and bearer token.
            table: Table with a ``date`` column and an ``is_holiday`` flag.
            timeout: Request timeout in seconds.
            client: Optional shared client. A short-lived one is created per query otherwise.
        """
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.timeout = timeout
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def _headers(self) -> dict:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def build_params(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[Tuple[str, str]]:
        """
        Build the PostgREST query parameters.

        Args:
            start: Optional inclusive lower bound.
            end: Optional inclusive upper bound.

        Returns:
            Parameter pairs; ``date`` may appear twice for a bounded range.
        """
        params = [("select", "date"), ("is_holiday", "eq.true")]
        if start is not None:
            params.append(("date", f"gte.{start.isoformat()}"))
        if end is not None:
            params.append(("date", f"lte.{end.isoformat()}"))
        return params

    async def get_holiday_dates(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> Set[date]:
        """
        Query the holiday table.

        Args:
            start: Optional inclusive lower bound.
            end: Optional inclusive upper bound.

        Returns:
            Set of holiday dates.

        Raises:
            HolidaySourceError: If the request fails or the payload is unusable.
        """
        params = self.build_params(start, end)
        try:
            if self._client is not None:
                response = await self._client.get(
                    self.endpoint, params=params, headers=self._headers(), timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.endpoint, params=params, headers=self._headers())
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPStatusError as e:
            raise HolidaySourceError(
                f"Holiday query returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise HolidaySourceError(f"Holiday query failed: {e}") from e
        except ValueError as e:
            raise HolidaySourceError(f"Holiday query returned invalid JSON: {e}") from e

        return parse_holiday_rows(rows)


def parse_holiday_rows(rows: Any) -> Set[date]:
    """
    Convert PostgREST rows of the form ``{"date": "YYYY-MM-DD"}`` to dates.

    Raises:
        HolidaySourceError: If the payload is not a list of such rows.
    """
    if not isinstance(rows, list):
        raise HolidaySourceError("Holiday query returned an unexpected payload")

    result = set()
    for row in rows:
        value = row.get("date") if isinstance(row, dict) else None
        if not isinstance(value, str):
            raise HolidaySourceError(f"Holiday row without a date: {row!r}")
        try:
            result.add(datetime.strptime(value[:10], "%Y-%m-%d").date())
        except ValueError as e:
            raise HolidaySourceError(f"Holiday row with invalid date: {value!r}") from e
    return result


class StaticHolidayProvider:
    """Serves a fixed list of holidays, typically from configuration."""

    def __init__(self, holiday_dates: Iterable[date] = ()):
        self.holiday_dates = frozenset(holiday_dates)

    async def get_holiday_dates(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> Set[date]:
        return {d for d in self.holiday_dates if _in_range(d, start, end)}


class CountryHolidayProvider:
    """Public holidays of a country (and optional subdivision) from the holidays library."""

    def __init__(
        self,
        country: str,
        subdivision: Optional[str] = None,
        years: Optional[Iterable[int]] = None,
    ):
        """
        Initialize the country holiday provider.

        Args:
            country: ISO country code, e.g. 'US', 'DE'.
            subdivision: Optional state/province code.
            years: Years to cover when no range is given. Defaults to the
                previous, current and next year.
        """
        self.country = country
        self.subdivision = subdivision
        self.years = sorted(years) if years else None

    def _default_years(self) -> List[int]:
        if self.years:
            return self.years
        current = date.today().year
        return [current - 1, current, current + 1]

    async def get_holiday_dates(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> Set[date]:
        if start is not None and end is not None:
            years = list(range(start.year, end.year + 1))
        else:
            years = self._default_years()

        try:
            calendar = holidays.country_holidays(
                self.country, subdiv=self.subdivision, years=years
            )
        except NotImplementedError as e:
            raise HolidaySourceError(
                f"No holiday calendar for {self.country}/{self.subdivision}: {e}"
            ) from e

        return {d for d in calendar.keys() if _in_range(d, start, end)}


def build_holiday_provider(
    config: Config, client: Optional[httpx.AsyncClient] = None
) -> HolidaySource:
    """
    Create the holiday source selected by the configuration.

    Args:
        config: Loaded configuration.
        client: Optional HTTP client for the Supabase source.

    Returns:
        A HolidaySource implementation.
    """
    if config.holiday_source == HolidaySourceType.COUNTRY:
        return CountryHolidayProvider(config.holiday_country, config.holiday_subdivision)

    if config.holiday_source == HolidaySourceType.SUPABASE:
        if config.supabase_url and config.supabase_key:
            return SupabaseHolidayProvider(
                url=config.supabase_url,
                api_key=config.supabase_key,
                table=config.holiday_table,
                timeout=config.holiday_timeout,
                client=client,
            )
        logger.warning(
            f"Supabase URL or key not configured, using {len(config.static_holidays)} static holidays"
        )

    return StaticHolidayProvider(config.static_holidays)
