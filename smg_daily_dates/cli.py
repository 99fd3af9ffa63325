"""
CLI interface for SMG daily dates.
"""

import asyncio
import logging
import os
import sys
from datetime import date
from typing import Optional

import click

from smg_daily_dates import __version__
from smg_daily_dates.config.manager import ConfigManager
from smg_daily_dates.core.calculator import (
    BusinessDayCalculator,
    parse_calendar_date,
    validate_day_count,
)
from smg_daily_dates.core.exceptions import InputValidationError
from smg_daily_dates.core.holiday_provider import build_holiday_provider
from smg_daily_dates.data.schemas import Config, RangeRequest
from smg_daily_dates.output.exporter import ResultExporter
from smg_daily_dates.output.formatter import ConsoleFormatter

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for CLI and server runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )


def load_config(config_path: Optional[str]) -> Config:
    """Load configuration and apply its log level unless --verbose was given."""
    cfg = ConfigManager(config_path).load_config()
    ctx = click.get_current_context(silent=True)
    if ctx is None or not ctx.find_root().params.get("verbose"):
        configure_logging(cfg.log_level)
    return cfg


def build_calculator(cfg: Config) -> BusinessDayCalculator:
    return BusinessDayCalculator(build_holiday_provider(cfg))


def export_result(result, format: str, output: Optional[str], cfg: Config, formatter: ConsoleFormatter) -> None:
    """Write a result to JSON and/or CSV as requested by --format."""
    exporter = ResultExporter(output_directory=cfg.output_directory)

    if format == "json":
        path = exporter.export_json(result, output)
        formatter.print_success(f"Result saved to {path}")
    elif format == "csv":
        path = exporter.export_csv(result, output)
        formatter.print_success(f"Result saved to {path}")
    elif format == "both":
        json_path, csv_path = exporter.export_both(result)
        formatter.print_success(f"Results saved to:\n  - {json_path}\n  - {csv_path}")


output_options = [
    click.option(
        "--output", "-o",
        type=click.Path(),
        help="Output file path (optional)",
    ),
    click.option(
        "--format", "-f",
        type=click.Choice(["json", "csv", "both", "console"]),
        default="console",
        help="Output format (default: console)",
    ),
    click.option(
        "--config", "-c",
        type=click.Path(exists=True),
        help="Path to config file (optional)",
    ),
]


def with_output_options(func):
    for option in reversed(output_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="smg-dates")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def main(verbose):
    """SMG Daily Dates - business days for the SMG data pipeline."""
    configure_logging("DEBUG" if verbose else "WARNING")


@main.command()
@click.option(
    "--days", "-d",
    type=int,
    default=None,
    help="Number of business days to find (1-10, default: from config or 3)",
)
@click.option(
    "--today", "-t",
    default=None,
    help="Reference date YYYY-MM-DD (default: today)",
)
@with_output_options
def recent(days, today, output, format, config):
    """Find the most recent business days before today."""
    formatter = ConsoleFormatter()

    try:
        cfg = load_config(config)
        count = validate_day_count(cfg.default_lookback_days if days is None else days)
        reference = parse_calendar_date(today, "today") if today else date.today()

        calculator = build_calculator(cfg)
        result = asyncio.run(calculator.find_recent_business_days(count, reference))

        if format in ("console", "both"):
            formatter.print_lookback_result(result)
        export_result(result, format, output, cfg, formatter)

    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception("Detailed error:")
        formatter.print_error(f"Unexpected error: {e}")
        sys.exit(1)


@main.command(name="range")
@click.option("--start", "-s", required=True, help="Start date (YYYY-MM-DD)")
@click.option("--end", "-e", required=True, help="End date (YYYY-MM-DD)")
@click.option(
    "--include-weekends",
    is_flag=True,
    default=False,
    help="Count Saturdays and Sundays as business days",
)
@click.option(
    "--include-holidays",
    is_flag=True,
    default=False,
    help="Count holidays as business days (skips the holiday lookup)",
)
@with_output_options
def date_range(start, end, include_weekends, include_holidays, output, format, config):
    """Classify every date between two dates (inclusive)."""
    formatter = ConsoleFormatter()

    try:
        start_date = parse_calendar_date(start, "start")
        end_date = parse_calendar_date(end, "end")
        if start_date > end_date:
            raise InputValidationError("Start date must be before or equal to end date")

        cfg = load_config(config)
        calculator = build_calculator(cfg)

        request = RangeRequest(
            start_date=start_date,
            end_date=end_date,
            exclude_weekends=not include_weekends,
            exclude_holidays=not include_holidays,
        )
        result = asyncio.run(calculator.enumerate_range(request))

        if format in ("console", "both"):
            formatter.print_range_result(result)
        export_result(result, format, output, cfg, formatter)

    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception("Detailed error:")
        formatter.print_error(f"Unexpected error: {e}")
        sys.exit(1)


@main.command()
@click.option(
    "--host", "-h",
    default=None,
    help="Host to bind to (default: from config or 0.0.0.0)",
)
@click.option(
    "--port", "-p",
    type=int,
    default=None,
    help="Port to bind to (default: from config or 3000)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
def serve(host, port, config):
    """Start the FastAPI server."""
    formatter = ConsoleFormatter()

    try:
        import uvicorn

        cfg = load_config(config)

        if config:
            # The API process reads its configuration file from the environment
            os.environ["SMG_CONFIG_FILE"] = config

        api_host = host or cfg.api_host
        api_port = port or cfg.api_port

        logger.info(f"SMG Cloud Automation Pipeline listening on http://{api_host}:{api_port}")
        formatter.console.print(f"Starting API server at http://{api_host}:{api_port}")
        formatter.console.print("Press Ctrl+C to stop")
        formatter.console.print()

        uvicorn.run(
            "smg_daily_dates.api:app",
            host=api_host,
            port=api_port,
            reload=False,
            log_config=None,
        )

    except ImportError:
        formatter.print_error("uvicorn is required for the API server. Install it with: pip install uvicorn")
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
