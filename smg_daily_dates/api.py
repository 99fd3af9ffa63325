"""
FastAPI REST API for the SMG daily dates service.
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from smg_daily_dates import __version__
from smg_daily_dates.config.manager import ConfigManager
from smg_daily_dates.core.calculator import (
    BusinessDayCalculator,
    parse_calendar_date,
    validate_day_count,
)
from smg_daily_dates.core.exceptions import (
    InputValidationError,
    InvalidDateError,
    InvalidDateRangeError,
    MissingDateError,
)
from smg_daily_dates.core.holiday_provider import build_holiday_provider
from smg_daily_dates.data.schemas import Config, RangeRequest
from smg_daily_dates.output.exporter import lookback_to_dict, range_to_dict

logger = logging.getLogger(__name__)

SERVICE_NAME = "SMG Cloud Automation Pipeline"

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /health",
    "GET /smg-daily-dates",
    "POST /smg-daily-dates",
]

_config: Optional[Config] = None
_calculator: Optional[BusinessDayCalculator] = None
_started_at = time.monotonic()


def get_config() -> Config:
    """Get the service configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = ConfigManager(os.environ.get("SMG_CONFIG_FILE")).load_config()
    return _config


def get_calculator() -> BusinessDayCalculator:
    """Get the shared business-day calculator."""
    global _calculator
    if _calculator is None:
        _calculator = BusinessDayCalculator(build_holiday_provider(get_config()))
    return _calculator


def get_today() -> date:
    """Reference date for the lookback search."""
    return date.today()


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def envelope(success: bool, **payload: Any) -> Dict[str, Any]:
    """Wrap a payload in the uniform response envelope."""
    return {"success": success, **payload, "timestamp": utc_timestamp()}


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(False, error=message, **extra))


def _flag(body: Dict[str, Any], key: str) -> Any:
    value = body.get(key)
    return True if value is None else value


def parse_range_body(body: Any) -> RangeRequest:
    """
    Validate a POST /smg-daily-dates body.

    Args:
        body: Decoded JSON body.

    Returns:
        RangeRequest ready for the calculator.

    Raises:
        InputValidationError: With the message reported to the client.
    """
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise InputValidationError("Request body must be a JSON object")

    start_raw = body.get("startDate")
    end_raw = body.get("endDate")
    if not start_raw or not end_raw:
        raise MissingDateError("startDate and endDate are required")

    try:
        start = parse_calendar_date(start_raw, "startDate")
        end = parse_calendar_date(end_raw, "endDate")
    except InvalidDateError:
        raise InvalidDateError("Invalid date format. Use YYYY-MM-DD")

    if start > end:
        raise InvalidDateRangeError("startDate must be before or equal to endDate")

    try:
        return RangeRequest(
            start_date=start,
            end_date=end,
            exclude_weekends=_flag(body, "excludeWeekends"),
            exclude_holidays=_flag(body, "excludeHolidays"),
        )
    except ValidationError:
        raise InputValidationError("excludeWeekends and excludeHolidays must be booleans")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the calculator at startup so configuration errors surface early."""
    global _calculator, _config
    config = get_config()
    get_calculator()
    logger.info(f"{SERVICE_NAME} ready (holiday source: {config.holiday_source.value})")

    yield

    _calculator = None
    _config = None


app = FastAPI(
    title="SMG Daily Dates API",
    description="Business days for the SMG data pipeline, excluding weekends and holidays",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError):
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
    return error_response(400, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected {request.method} {request.url.path}: malformed request")
    return error_response(400, "Malformed request")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        logger.warning(f"404 - Route not found: {request.method} {request.url.path}")
        return error_response(404, "Endpoint not found", availableEndpoints=AVAILABLE_ENDPOINTS)
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {exc}")
    return error_response(500, "Internal server error")


@app.get("/")
async def root():
    """Service status document."""
    return envelope(
        True,
        service=SERVICE_NAME,
        version=__version__,
        modules={
            "/smg-daily-dates": "available",
            "/smg-transform": "planned",
            "/smg-upload": "planned",
            "/smg-pipeline": "planned",
            "/smg-status": "planned",
        },
        endpoints=AVAILABLE_ENDPOINTS,
    )


@app.get("/health")
async def health_check(config: Config = Depends(get_config)):
    """Health check endpoint."""
    return envelope(
        True,
        status="healthy",
        version=__version__,
        uptime=round(time.monotonic() - _started_at, 3),
        holidaySource=config.holiday_source.value,
        environment=os.environ.get("ENVIRONMENT", "development"),
    )


@app.get("/smg-daily-dates")
async def get_daily_dates(
    days: Optional[str] = Query(None, description="Number of business days (1-10)"),
    calculator: BusinessDayCalculator = Depends(get_calculator),
    today: date = Depends(get_today),
    config: Config = Depends(get_config),
):
    """
    Return the most recent business days before today, oldest first.

    Defaults to the configured number of days (3).
    """
    logger.info("=== SMG DAILY DATES REQUEST ===")

    count = validate_day_count(config.default_lookback_days if days in (None, "") else days)
    logger.info(f"Requested {count} business days")

    try:
        result = await calculator.find_recent_business_days(count, today)
    except Exception as e:
        logger.exception(f"Error in GET /smg-daily-dates: {e}")
        return error_response(500, "Internal server error")

    logger.info(f"Successfully calculated {result.found_days} business days")
    return envelope(True, **lookback_to_dict(result))


@app.post("/smg-daily-dates")
async def post_daily_dates(
    body: Any = Body(None),
    calculator: BusinessDayCalculator = Depends(get_calculator),
):
    """
    Classify every date of an explicit range.

    Body: ``{startDate, endDate, excludeWeekends?, excludeHolidays?}``; both
    exclusion flags default to true.
    """
    logger.info("=== SMG DAILY DATES POST REQUEST ===")

    range_request = parse_range_body(body)

    try:
        result = await calculator.enumerate_range(range_request)
    except Exception as e:
        logger.exception(f"Error in POST /smg-daily-dates: {e}")
        return error_response(500, "Internal server error")

    return envelope(True, **range_to_dict(result))
