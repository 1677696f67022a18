"""
palettekit Structured Logging
Centralized loguru configuration plus a thin structured wrapper used by the
palette builder to attach generation context to every line.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger

from palettekit.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[component]} | {message} | {extra}"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Install the single stdout sink used by palettekit."""
    global _configured
    logger.remove()
    logger.configure(extra={"component": "palettekit"})
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level or config.LOG_LEVEL,
        serialize=False  # Set to True for JSON output
    )
    _configured = True


class StructuredLogger:
    """Structured logger bound to one palettekit component."""

    def __init__(self, component: str = "palettekit"):
        if not _configured:
            configure_logging()
        self.component = component
        self._logger = logger.bind(component=component)

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        bound = self._logger.bind(**extra) if extra else self._logger
        bound.log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log info message with optional extra data."""
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log warning message with optional extra data."""
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log error message with optional extra data."""
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log debug message with optional extra data."""
        self._log("DEBUG", message, extra)


# Global logger instances, one per component
_loggers: Dict[str, StructuredLogger] = {}


def get_logger(component: str = "palettekit") -> StructuredLogger:
    """Get or create the structured logger for ``component``."""
    if component not in _loggers:
        _loggers[component] = StructuredLogger(component)
    return _loggers[component]
