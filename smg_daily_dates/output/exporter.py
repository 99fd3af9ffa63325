"""
Export functionality for business-day results.
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from smg_daily_dates.data.schemas import DayClassification, LookbackResult, RangeResult

logger = logging.getLogger(__name__)

# Follow-up pipeline stages consuming the lookback dates
NEXT_STEPS = [
    "Use these dates with /smg-download endpoint",
    "Transform CSV data with /smg-transform",
    "Upload to Supabase with /smg-upload",
]

BusinessDayResult = Union[LookbackResult, RangeResult]


def day_to_dict(day: DayClassification) -> Dict[str, Any]:
    """Serialise a classified day with camelCase keys."""
    return day.model_dump(mode="json", by_alias=True)


def lookback_to_dict(result: LookbackResult) -> Dict[str, Any]:
    """
    Convert a LookbackResult to the JSON payload served by the API.

    Args:
        result: LookbackResult to convert.

    Returns:
        Dictionary representation.
    """
    return {
        "requestedDays": result.requested_days,
        "foundDays": result.found_days,
        "businessDays": [day_to_dict(d) for d in result.business_days],
        "dateRange": {
            "startDate": result.start_date.isoformat() if result.start_date else None,
            "endDate": result.end_date.isoformat() if result.end_date else None,
        },
        "warnings": result.warnings,
        "nextSteps": list(NEXT_STEPS),
    }


def range_to_dict(result: RangeResult) -> Dict[str, Any]:
    """
    Convert a RangeResult to the JSON payload served by the API.

    Args:
        result: RangeResult to convert.

    Returns:
        Dictionary representation.
    """
    return {
        "dateRange": {
            "startDate": result.request.start_date.isoformat(),
            "endDate": result.request.end_date.isoformat(),
        },
        "filters": {
            "excludeWeekends": result.request.exclude_weekends,
            "excludeHolidays": result.request.exclude_holidays,
        },
        "totalDays": result.total_days,
        "businessDays": result.business_day_count,
        "skippedDays": result.skipped_days,
        "dates": [day_to_dict(d) for d in result.dates],
        "businessDatesOnly": result.business_dates_only,
        "warnings": result.warnings,
    }


class ResultExporter:
    """Exports business-day results to JSON and CSV files."""

    CSV_HEADER = [
        "Date",
        "Day Of Week",
        "Day Number",
        "Is Weekend",
        "Is Holiday",
        "Is Business Day",
        "Skip Reason",
    ]

    def __init__(
        self,
        output_directory: str = "results",
        timestamp_format: str = "%Y%m%d_%H%M%S",
    ):
        """
        Initialize the result exporter.

        Args:
            output_directory: Directory for output files.
            timestamp_format: Format string for timestamps in filenames.
        """
        self.output_directory = output_directory
        self.timestamp_format = timestamp_format

    def _ensure_output_dir(self) -> Path:
        """Ensure output directory exists and return path."""
        output_path = Path(self.output_directory)
        output_path.mkdir(parents=True, exist_ok=True)
        return output_path

    def _generate_filename(self, prefix: str, extension: str) -> str:
        """Generate a filename with timestamp."""
        timestamp = datetime.now().strftime(self.timestamp_format)
        return f"{prefix}_{timestamp}.{extension}"

    def _resolve_path(self, result: BusinessDayResult, extension: str, output_path: Optional[str]) -> Path:
        if output_path:
            file_path = Path(output_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            return file_path
        prefix = "business_days" if isinstance(result, LookbackResult) else "date_range"
        return self._ensure_output_dir() / self._generate_filename(prefix, extension)

    def export_json(self, result: BusinessDayResult, output_path: Optional[str] = None) -> str:
        """
        Export result to JSON file.

        Args:
            result: LookbackResult or RangeResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        file_path = self._resolve_path(result, "json", output_path)

        if isinstance(result, LookbackResult):
            payload = lookback_to_dict(result)
        else:
            payload = range_to_dict(result)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

        logger.info(f"Exported result to: {file_path}")
        return str(file_path)

    def export_csv(self, result: BusinessDayResult, output_path: Optional[str] = None) -> str:
        """
        Export result to CSV file, one row per date.

        Lookback results contain only the business days found; range results
        contain every date of the range.

        Args:
            result: LookbackResult or RangeResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        file_path = self._resolve_path(result, "csv", output_path)

        days: List[DayClassification]
        if isinstance(result, LookbackResult):
            days = result.business_days
        else:
            days = result.dates

        with open(file_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.CSV_HEADER)
            for day in days:
                writer.writerow([
                    day.date.isoformat(),
                    day.day_of_week,
                    day.day_number,
                    day.is_weekend,
                    day.is_holiday,
                    day.is_business_day,
                    day.skip_reason.value if day.skip_reason else "",
                ])

        logger.info(f"Exported {len(days)} dates to: {file_path}")
        return str(file_path)

    def export_both(self, result: BusinessDayResult) -> Tuple[str, str]:
        """
        Export result to both JSON and CSV.

        Args:
            result: Result to export.

        Returns:
            Tuple of (json_path, csv_path).
        """
        return self.export_json(result), self.export_csv(result)
