"""
Business-day calculation: recent business days and explicit date ranges.
"""

from datetime import date, datetime, timedelta
from typing import AbstractSet, Any, Iterator, List, Optional, Set, Tuple

from smg_daily_dates.core.event_log import EventLog, LoggerEventLog
from smg_daily_dates.core.exceptions import (
    HolidaySourceError,
    InvalidDateError,
    InvalidDateRangeError,
    InvalidDayCountError,
    MissingDateError,
)
from smg_daily_dates.core.holiday_provider import HolidaySource
from smg_daily_dates.data.schemas import (
    DayClassification,
    LookbackResult,
    RangeRequest,
    RangeResult,
    SkipReason,
)

DATE_FORMAT = "%Y-%m-%d"

MIN_DAYS = 1
MAX_DAYS = 10
DEFAULT_DAYS = 3

# Calendar days inspected by the lookback search, however many business days are requested
MAX_LOOKBACK = 10

# Indexed by date.weekday(), Monday first
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def day_number(day: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def parse_calendar_date(value: Any, field_name: str = "date") -> date:
    """
    Parse a YYYY-MM-DD string into a date.

    Args:
        value: Raw value, usually from a request body or command line.
        field_name: Name used in error messages.

    Returns:
        The parsed date.

    Raises:
        MissingDateError: If the value is empty.
        InvalidDateError: If the value is not a valid YYYY-MM-DD date.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if value is None or value == "":
        raise MissingDateError(f"{field_name} is required")
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid {field_name}: {value!r}. Use YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateError(f"Invalid {field_name}: {value!r}. Use YYYY-MM-DD")


def validate_day_count(count: Any) -> int:
    """
    Validate the number of business days requested from the lookback search.

    Raises:
        InvalidDayCountError: If count is not an integer between 1 and 10.
    """
    if isinstance(count, bool):
        raise InvalidDayCountError(f"Days parameter must be between {MIN_DAYS} and {MAX_DAYS}")
    if isinstance(count, str):
        try:
            count = int(count.strip())
        except ValueError:
            raise InvalidDayCountError(f"Days parameter must be between {MIN_DAYS} and {MAX_DAYS}")
    if not isinstance(count, int) or not MIN_DAYS <= count <= MAX_DAYS:
        raise InvalidDayCountError(f"Days parameter must be between {MIN_DAYS} and {MAX_DAYS}")
    return count


def classify_date(
    day: date,
    holiday_dates: AbstractSet[date],
    exclude_weekends: bool = True,
    exclude_holidays: bool = True,
) -> DayClassification:
    """
    Classify a single date against the weekend and holiday rules.

    When a date is both a weekend and a holiday and both rules apply, the
    reported skip reason is Weekend.

    Args:
        day: Date to classify.
        holiday_dates: Known holidays.
        exclude_weekends: Whether weekends are non-business days.
        exclude_holidays: Whether holidays are non-business days.

    Returns:
        DayClassification for the date.
    """
    weekend = is_weekend(day)
    holiday = day in holiday_dates

    skip_reason = None
    if exclude_weekends and weekend:
        skip_reason = SkipReason.WEEKEND
    elif exclude_holidays and holiday:
        skip_reason = SkipReason.HOLIDAY

    return DayClassification(
        date=day,
        day_of_week=WEEKDAY_NAMES[day.weekday()],
        day_number=day_number(day),
        is_weekend=weekend,
        is_holiday=holiday,
        is_business_day=skip_reason is None,
        skip_reason=skip_reason,
    )


def scan_recent_business_days(
    count: int,
    today: date,
    holiday_dates: AbstractSet[date],
    max_lookback: int = MAX_LOOKBACK,
    event_log: Optional[EventLog] = None,
) -> Tuple[List[DayClassification], int]:
    """
    Walk backwards from the day before ``today`` collecting business days.

    Args:
        count: Business days wanted.
        today: Reference date; never inspected itself.
        holiday_dates: Known holidays.
        max_lookback: Maximum calendar days to inspect.
        event_log: Optional sink for per-day events.

    Returns:
        Tuple of (business days oldest first, calendar days scanned).
    """
    found: List[DayClassification] = []
    scanned = 0
    current = today

    # The scan also ends at the first representable date
    while len(found) < count and scanned < max_lookback and current > date.min:
        current -= timedelta(days=1)
        scanned += 1
        entry = classify_date(current, holiday_dates)
        if entry.is_business_day:
            found.append(entry)
            if event_log is not None:
                event_log.log(f"Business day {len(found)}: {current.isoformat()} ({entry.day_of_week})")
        elif event_log is not None:
            event_log.log(
                f"Skipping {current.isoformat()} ({entry.day_of_week}) - {entry.skip_reason.value}"
            )

    found.reverse()
    return found, scanned


def classify_range(
    start: date,
    end: date,
    holiday_dates: AbstractSet[date],
    exclude_weekends: bool = True,
    exclude_holidays: bool = True,
) -> List[DayClassification]:
    """Classify every date from start to end inclusive."""
    return [
        classify_date(day, holiday_dates, exclude_weekends, exclude_holidays)
        for day in date_range(start, end)
    ]


class BusinessDayCalculator:
    """Finds business days using a holiday source and weekend rules."""

    def __init__(
        self,
        holiday_source: HolidaySource,
        event_log: Optional[EventLog] = None,
        max_lookback: int = MAX_LOOKBACK,
    ):
        """
        Initialize the business-day calculator.

        Args:
            holiday_source: Provider for holiday dates.
            event_log: Where calculation events are written. Defaults to the module logger.
            max_lookback: Calendar days the lookback search may inspect.
        """
        self.holiday_source = holiday_source
        self.event_log = event_log or LoggerEventLog()
        self.max_lookback = max_lookback

    async def _load_holidays(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> Tuple[Set[date], List[str]]:
        """Fetch holidays, degrading to an empty set when the source fails."""
        try:
            return set(await self.holiday_source.get_holiday_dates(start, end)), []
        except HolidaySourceError as e:
            message = f"Could not fetch holidays: {e}"
            self.event_log.log(f"Warning: {message}", "WARN")
            return set(), [message]

    async def find_recent_business_days(self, count: int, today: date) -> LookbackResult:
        """
        Find the most recent business days before ``today``.

        The caller is expected to have validated ``count`` with validate_day_count.
        Finding fewer days than requested within the lookback window is not an error.

        Args:
            count: Business days wanted (1-10).
            today: Reference date.

        Returns:
            LookbackResult with business days in chronological order.
        """
        self.event_log.log(f"Calculating last {count} business days before {today.isoformat()}")

        holiday_dates, warnings = await self._load_holidays()
        self.event_log.log(f"Found {len(holiday_dates)} holidays in calendar")

        business_days, scanned = scan_recent_business_days(
            count, today, holiday_dates, self.max_lookback, self.event_log
        )

        if len(business_days) < count:
            message = (
                f"Only found {len(business_days)} business days in last {self.max_lookback} days"
            )
            self.event_log.log(f"Warning: {message}", "WARN")
            warnings.append(message)

        return LookbackResult(
            requested_days=count,
            reference_date=today,
            business_days=business_days,
            scanned_days=scanned,
            holidays_loaded=len(holiday_dates),
            warnings=warnings,
        )

    async def enumerate_range(self, request: RangeRequest) -> RangeResult:
        """
        Classify every date of an explicit range.

        Only holidays inside the range are fetched, and only when holidays are excluded.

        Args:
            request: Validated range request.

        Returns:
            RangeResult with every date and the business-day subset.
        """
        self.event_log.log(
            f"Custom date range: {request.start_date.isoformat()} to {request.end_date.isoformat()}"
        )

        holiday_dates: Set[date] = set()
        warnings: List[str] = []
        if request.exclude_holidays:
            holiday_dates, warnings = await self._load_holidays(request.start_date, request.end_date)

        result = RangeResult(
            request=request,
            dates=classify_range(
                request.start_date,
                request.end_date,
                holiday_dates,
                request.exclude_weekends,
                request.exclude_holidays,
            ),
            warnings=warnings,
        )

        self.event_log.log(f"Custom range: {result.business_day_count} business days found")
        return result

    async def enumerate_dates(
        self,
        start: date,
        end: date,
        exclude_weekends: bool = True,
        exclude_holidays: bool = True,
    ) -> RangeResult:
        """
        Keyword form of enumerate_range.

        Raises:
            InvalidDateRangeError: If start is after end.
        """
        if start > end:
            raise InvalidDateRangeError("startDate must be before or equal to endDate")
        return await self.enumerate_range(
            RangeRequest(
                start_date=start,
                end_date=end,
                exclude_weekends=exclude_weekends,
                exclude_holidays=exclude_holidays,
            )
        )
