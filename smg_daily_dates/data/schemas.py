"""
Data models for business-day calculation using Pydantic.
"""

import datetime
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator
from pydantic.alias_generators import to_camel


class SkipReason(str, Enum):
    """Why a date was excluded from the business days."""

    WEEKEND = "Weekend"
    HOLIDAY = "Holiday"


class HolidaySourceType(str, Enum):
    """Backends that can supply the holiday calendar."""

    SUPABASE = "supabase"
    STATIC = "static"
    COUNTRY = "country"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the HTTP layer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DayClassification(CamelModel):
    """Classification of a single calendar date."""

    date: datetime.date = Field(..., description="The calendar date")
    day_of_week: str = Field(..., description="English weekday name")
    day_number: int = Field(..., ge=0, le=6, description="Day of week, 0=Sunday .. 6=Saturday")
    is_weekend: bool = Field(..., description="Saturday or Sunday")
    is_holiday: bool = Field(..., description="Listed in the holiday source")
    is_business_day: bool = Field(..., description="Included after applying exclusion rules")
    skip_reason: Optional[SkipReason] = Field(default=None, description="Rule that excluded the date")


class LookbackResult(BaseModel):
    """Result of searching backwards for the most recent business days."""

    requested_days: int = Field(..., ge=1, description="Number of business days asked for")
    reference_date: date = Field(..., description="Day the search was relative to (not inspected)")
    business_days: List[DayClassification] = Field(
        default_factory=list, description="Business days found, oldest first"
    )
    scanned_days: int = Field(..., ge=0, description="Calendar days inspected")
    holidays_loaded: int = Field(default=0, ge=0, description="Holidays returned by the holiday source")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal problems")

    @property
    def found_days(self) -> int:
        return len(self.business_days)

    @property
    def start_date(self) -> Optional[date]:
        return self.business_days[0].date if self.business_days else None

    @property
    def end_date(self) -> Optional[date]:
        return self.business_days[-1].date if self.business_days else None


class RangeRequest(BaseModel):
    """Validated input for enumerating an explicit date range."""

    start_date: date = Field(..., description="First date of the range (inclusive)")
    end_date: date = Field(..., description="Last date of the range (inclusive)")
    exclude_weekends: StrictBool = Field(default=True, description="Treat Saturdays and Sundays as non-business days")
    exclude_holidays: StrictBool = Field(default=True, description="Treat listed holidays as non-business days")

    @model_validator(mode="after")
    def validate_date_order(self) -> "RangeRequest":
        """Ensure start_date is on or before end_date."""
        if self.start_date > self.end_date:
            raise ValueError("startDate must be before or equal to endDate")
        return self


class RangeResult(BaseModel):
    """Every date of a range with its classification and summary counts."""

    request: RangeRequest
    dates: List[DayClassification] = Field(default_factory=list, description="All dates, oldest first")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal problems")

    @property
    def total_days(self) -> int:
        return len(self.dates)

    @property
    def business_days(self) -> List[DayClassification]:
        return [d for d in self.dates if d.is_business_day]

    @property
    def business_day_count(self) -> int:
        return len(self.business_days)

    @property
    def skipped_days(self) -> int:
        return self.total_days - self.business_day_count

    @property
    def business_dates_only(self) -> List[str]:
        return [d.date.isoformat() for d in self.business_days]


class Config(BaseModel):
    """Configuration for the business-day service."""

    holiday_source: HolidaySourceType = Field(
        default=HolidaySourceType.SUPABASE, description="Where holidays are read from"
    )
    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL")
    supabase_key: Optional[str] = Field(default=None, description="Supabase anon/service key")
    holiday_table: str = Field(default="calendar", description="Table holding the holiday flags")
    holiday_timeout: float = Field(default=10.0, gt=0, le=120, description="Holiday query timeout in seconds")
    static_holidays: List[date] = Field(default_factory=list, description="Holidays for the static source")
    holiday_country: str = Field(default="US", description="Country code for the country source")
    holiday_subdivision: Optional[str] = Field(default=None, description="Subdivision for the country source")
    default_lookback_days: int = Field(default=3, ge=1, le=10, description="Days returned when none requested")
    log_level: str = Field(default="INFO", description="Logging level")
    output_format: str = Field(default="json", description="Default export format: json or csv")
    output_directory: str = Field(default="results", description="Directory for exported files")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=3000, ge=1, le=65535, description="API server port")
