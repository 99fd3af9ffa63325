"""
Core business logic for business-day calculation.
"""

from smg_daily_dates.core.calculator import BusinessDayCalculator
from smg_daily_dates.core.event_log import EventLog, LoggerEventLog
from smg_daily_dates.core.holiday_provider import (
    CountryHolidayProvider,
    HolidaySource,
    StaticHolidayProvider,
    SupabaseHolidayProvider,
    build_holiday_provider,
)

__all__ = [
    "BusinessDayCalculator",
    "CountryHolidayProvider",
    "EventLog",
    "HolidaySource",
    "LoggerEventLog",
    "StaticHolidayProvider",
    "SupabaseHolidayProvider",
    "build_holiday_provider",
]
