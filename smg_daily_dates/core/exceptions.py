"""
Exception types for business-day calculation.
"""


class SmgDatesError(Exception):
    """Base class for all errors raised by smg_daily_dates."""


class InputValidationError(SmgDatesError, ValueError):
    """Raised when caller input is rejected before any computation starts."""


class InvalidDayCountError(InputValidationError):
    """Requested number of business days is outside the allowed range."""


class MissingDateError(InputValidationError):
    """A required date was not supplied."""


class InvalidDateError(InputValidationError):
    """A date value could not be parsed as YYYY-MM-DD."""


class InvalidDateRangeError(InputValidationError):
    """Start date lies after end date."""


class HolidaySourceError(SmgDatesError):
    """The holiday source could not be queried or returned unusable data."""
