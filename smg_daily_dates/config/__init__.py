"""
Configuration loading.
"""

from smg_daily_dates.config.manager import ConfigManager

__all__ = ["ConfigManager"]
