"""
Tests for the holiday sources.
"""

from datetime import date

import httpx
import pytest

from smg_daily_dates.core.exceptions import HolidaySourceError
from smg_daily_dates.core.holiday_provider import (
    CountryHolidayProvider,
    StaticHolidayProvider,
    SupabaseHolidayProvider,
    build_holiday_provider,
    parse_holiday_rows,
)
from smg_daily_dates.data.schemas import Config, HolidaySourceType


def make_provider(handler, **kwargs):
    """Create a SupabaseHolidayProvider whose HTTP calls go to ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseHolidayProvider(
        url="https://project.supabase.co/",
        api_key="anon-key",
        client=client,
        **kwargs,
    )


class TestSupabaseHolidayProvider:
    """Tests for SupabaseHolidayProvider."""

    async def test_full_table_query(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"date": "2024-01-01"}, {"date": "2024-07-04"}])

        provider = make_provider(handler)
        holidays = await provider.get_holiday_dates()

        assert holidays == {date(2024, 1, 1), date(2024, 7, 4)}
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/calendar"
        assert request.url.params.get_list("select") == ["date"]
        assert request.url.params.get_list("is_holiday") == ["eq.true"]
        assert request.url.params.get_list("date") == []
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"

    async def test_range_query_bounds_both_ends(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        provider = make_provider(handler, table="holiday_calendar")
        holidays = await provider.get_holiday_dates(date(2024, 1, 1), date(2024, 1, 7))

        assert holidays == set()
        assert seen[0].url.path == "/rest/v1/holiday_calendar"
        assert seen[0].url.params.get_list("date") == ["gte.2024-01-01", "lte.2024-01-07"]

    async def test_http_error_becomes_holiday_source_error(self):
        provider = make_provider(lambda request: httpx.Response(401, json={"message": "bad key"}))

        with pytest.raises(HolidaySourceError, match="HTTP 401"):
            await provider.get_holiday_dates()

    async def test_transport_error_becomes_holiday_source_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = make_provider(handler)

        with pytest.raises(HolidaySourceError, match="Holiday query failed"):
            await provider.get_holiday_dates()

    async def test_invalid_json_becomes_holiday_source_error(self):
        provider = make_provider(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(HolidaySourceError, match="invalid JSON"):
            await provider.get_holiday_dates()

    def test_build_params(self):
        provider = SupabaseHolidayProvider(url="https://x.supabase.co", api_key="k")

        assert provider.endpoint == "https://x.supabase.co/rest/v1/calendar"
        assert provider.build_params(start=date(2024, 3, 1)) == [
            ("select", "date"),
            ("is_holiday", "eq.true"),
            ("date", "gte.2024-03-01"),
        ]


class TestParseHolidayRows:
    """Tests for parse_holiday_rows."""

    def test_accepts_timestamps(self):
        assert parse_holiday_rows([{"date": "2024-12-25T00:00:00+00:00"}]) == {date(2024, 12, 25)}

    def test_duplicates_collapse(self):
        rows = [{"date": "2024-12-25"}, {"date": "2024-12-25"}]
        assert parse_holiday_rows(rows) == {date(2024, 12, 25)}

    @pytest.mark.parametrize(
        "rows",
        [
            {"date": "2024-01-01"},
            [{"day": "2024-01-01"}],
            [{"date": None}],
            [{"date": "not a date"}],
            ["2024-01-01"],
        ],
    )
    def test_rejects_malformed_payloads(self, rows):
        with pytest.raises(HolidaySourceError):
            parse_holiday_rows(rows)


class TestStaticHolidayProvider:
    """Tests for StaticHolidayProvider."""

    async def test_filters_by_range(self):
        provider = StaticHolidayProvider([date(2024, 1, 1), date(2024, 5, 27), date(2024, 7, 4)])

        assert await provider.get_holiday_dates() == {
            date(2024, 1, 1),
            date(2024, 5, 27),
            date(2024, 7, 4),
        }
        assert await provider.get_holiday_dates(date(2024, 5, 1), date(2024, 7, 4)) == {
            date(2024, 5, 27),
            date(2024, 7, 4),
        }


class TestCountryHolidayProvider:
    """Tests for CountryHolidayProvider."""

    async def test_us_holidays_in_range(self):
        provider = CountryHolidayProvider("US")

        holidays = await provider.get_holiday_dates(date(2024, 7, 1), date(2024, 7, 31))

        assert holidays == {date(2024, 7, 4)}

    async def test_configured_years_without_range(self):
        provider = CountryHolidayProvider("US", years=[2024])

        holidays = await provider.get_holiday_dates()

        assert date(2024, 1, 1) in holidays
        assert date(2024, 12, 25) in holidays
        assert all(d.year == 2024 for d in holidays)

    async def test_unknown_country_becomes_holiday_source_error(self):
        provider = CountryHolidayProvider("XX")

        with pytest.raises(HolidaySourceError):
            await provider.get_holiday_dates(date(2024, 1, 1), date(2024, 1, 31))


class TestBuildHolidayProvider:
    """Tests for build_holiday_provider."""

    def test_supabase_when_configured(self):
        config = Config(supabase_url="https://x.supabase.co", supabase_key="k", holiday_table="cal")

        provider = build_holiday_provider(config)

        assert isinstance(provider, SupabaseHolidayProvider)
        assert provider.table == "cal"

    def test_supabase_without_credentials_falls_back_to_static(self, caplog):
        config = Config(static_holidays=[date(2024, 1, 1)])

        with caplog.at_level("WARNING"):
            provider = build_holiday_provider(config)

        assert isinstance(provider, StaticHolidayProvider)
        assert provider.holiday_dates == {date(2024, 1, 1)}
        assert "Supabase URL or key not configured" in caplog.text

    def test_country_source(self):
        config = Config(holiday_source=HolidaySourceType.COUNTRY, holiday_country="DE", holiday_subdivision="HH")

        provider = build_holiday_provider(config)

        assert isinstance(provider, CountryHolidayProvider)
        assert provider.country == "DE"
        assert provider.subdivision == "HH"

    def test_static_source(self):
        provider = build_holiday_provider(Config(holiday_source="static"))

        assert isinstance(provider, StaticHolidayProvider)
