"""
Shared fixtures for the SMG daily dates tests.
"""

from datetime import date
from typing import List, Optional, Set, Tuple

import pytest

from smg_daily_dates.config.manager import ConfigManager
from smg_daily_dates.core.calculator import BusinessDayCalculator
from smg_daily_dates.core.exceptions import HolidaySourceError
from smg_daily_dates.core.holiday_provider import StaticHolidayProvider


class RecordingEventLog:
    """Event log that keeps (level, message) pairs for assertions."""

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def log(self, message: str, level: str = "INFO") -> None:
        self.events.append((level, message))

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [m for lvl, m in self.events if level is None or lvl == level]


class FailingHolidaySource:
    """Holiday source that is always unreachable."""

    def __init__(self):
        self.calls = 0

    async def get_holiday_dates(self, start=None, end=None) -> Set[date]:
        self.calls += 1
        raise HolidaySourceError("connection refused")


class RecordingHolidaySource(StaticHolidayProvider):
    """Static source that remembers the ranges it was queried with."""

    def __init__(self, holiday_dates=()):
        super().__init__(holiday_dates)
        self.queries: List[Tuple[Optional[date], Optional[date]]] = []

    async def get_holiday_dates(self, start=None, end=None) -> Set[date]:
        self.queries.append((start, end))
        return await super().get_holiday_dates(start, end)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of configuration loading."""
    for env_var in ConfigManager.ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("SMG_CONFIG_FILE", raising=False)


@pytest.fixture
def event_log():
    """Create a RecordingEventLog instance."""
    return RecordingEventLog()


@pytest.fixture
def holiday_source():
    """Holiday source with New Year's Day 2024 and Independence Day 2024."""
    return RecordingHolidaySource([date(2024, 1, 1), date(2024, 7, 4)])


@pytest.fixture
def calculator(holiday_source, event_log):
    """Create a BusinessDayCalculator backed by the recording holiday source."""
    return BusinessDayCalculator(holiday_source, event_log=event_log)


@pytest.fixture
def failing_calculator(event_log):
    """Create a BusinessDayCalculator whose holiday source always fails."""
    return BusinessDayCalculator(FailingHolidaySource(), event_log=event_log)
