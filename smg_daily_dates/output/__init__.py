"""
Output formatting and export functionality.
"""

from smg_daily_dates.output.formatter import ConsoleFormatter
from smg_daily_dates.output.exporter import ResultExporter

__all__ = ["ConsoleFormatter", "ResultExporter"]
