"""
Logging capability injected into the calculator.
"""

import logging
from typing import Optional, Protocol

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class EventLog(Protocol):
    """Anything that accepts a message and a level name."""

    def log(self, message: str, level: str = "INFO") -> None:
        ...


class LoggerEventLog:
    """Forwards calculator events to a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the event log.

        Args:
            logger: Logger to write to. Defaults to the calculator module logger.
        """
        self.logger = logger or logging.getLogger("smg_daily_dates.core.calculator")

    def log(self, message: str, level: str = "INFO") -> None:
        """Write a message at the named level; unknown names log at INFO."""
        self.logger.log(LEVELS.get(level.upper(), logging.INFO), message)
