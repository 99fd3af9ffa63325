"""
Data models and schemas for business-day calculation.
"""

from smg_daily_dates.data.schemas import (
    Config,
    DayClassification,
    HolidaySourceType,
    LookbackResult,
    RangeRequest,
    RangeResult,
    SkipReason,
)

__all__ = [
    "Config",
    "DayClassification",
    "HolidaySourceType",
    "LookbackResult",
    "RangeRequest",
    "RangeResult",
    "SkipReason",
]
