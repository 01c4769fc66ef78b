"""Logging configuration and setup utilities."""

import logging
import os
import sys
from typing import TYPE_CHECKING, Any, Optional, TextIO

if TYPE_CHECKING:
    from calendarutil.config.settings import CalendarUtilSettings

# Custom log level between INFO(20) and DEBUG(10)
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

PACKAGE_LOGGER = "calendarutil"

# Loggers of libraries we depend on, quieted to logging.third_party_level
THIRD_PARTY_LOGGERS = ("pytz", "dateutil", "pydantic", "yaml")


def verbose(self: logging.Logger, message: Any, *args: Any, **kwargs: Any) -> None:
    """Add verbose() method to Logger class for detailed diagnostic logging.

    Example:
        >>> logger = logging.getLogger(__name__)
        >>> logger.verbose("Resolved offset %s for %s", offset, timezone)
    """
    if self.isEnabledFor(VERBOSE):
        self._log(VERBOSE, message, args, **kwargs)


# Add verbose method to all Logger instances
logging.Logger.verbose = verbose  # type: ignore[attr-defined]


def get_log_level(level_name: str) -> int:
    """Get numeric log level from string name, including custom VERBOSE level.

    Args:
        level_name: Log level name (DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL),
            case insensitive

    Returns:
        Numeric log level value

    Raises:
        ValueError: If level name is not recognized

    Example:
        >>> get_log_level("verbose")
        15
        >>> get_log_level("INFO")
        20
    """
    level_name = level_name.upper()
    if level_name == "VERBOSE":
        return VERBOSE
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


class AutoColoredFormatter(logging.Formatter):
    """Formatter that auto-detects terminal color support."""

    # Color schemes for different terminal types
    COLORS = {
        "ERROR": {"truecolor": "\033[91m", "basic": "\033[31m", "none": ""},
        "INFO": {"truecolor": "\033[94m", "basic": "\033[34m", "none": ""},
        "VERBOSE": {"truecolor": "\033[92m", "basic": "\033[32m", "none": ""},
        "WARNING": {"truecolor": "\033[93m", "basic": "\033[33m", "none": ""},
        "DEBUG": {"truecolor": "\033[95m", "basic": "\033[35m", "none": ""},
        "CRITICAL": {"truecolor": "\033[91m\033[1m", "basic": "\033[31m\033[1m", "none": ""},
        "RESET": {"truecolor": "\033[0m", "basic": "\033[0m", "none": ""},
    }

    def __init__(
        self, *args: Any, enable_colors: bool = True, stream: Optional[TextIO] = None, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.enable_colors = enable_colors
        self.stream = stream if stream is not None else sys.stderr
        self.color_mode = self._detect_color_support() if enable_colors else "none"

    def _detect_color_support(self) -> str:
        """Auto-detect terminal color capabilities."""
        if not hasattr(self.stream, "isatty") or not self.stream.isatty():
            return "none"

        term = os.environ.get("TERM", "").lower()
        colorterm = os.environ.get("COLORTERM", "").lower()

        if term == "dumb" or "NO_COLOR" in os.environ:
            return "none"

        if colorterm in ("truecolor", "24bit") or "256color" in term:
            return "truecolor"

        if term and "color" in term:
            return "basic"

        # Windows Terminal detection
        if os.name == "nt" and "WT_SESSION" in os.environ:
            return "truecolor"

        return "none"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors if supported."""
        formatted = super().format(record)

        if self.color_mode == "none":
            return formatted

        level_name = record.levelname
        if level_name in self.COLORS:
            color_start = self.COLORS[level_name][self.color_mode]
            color_end = self.COLORS["RESET"][self.color_mode]
            colored_level = f"{color_start}{level_name}{color_end}"
            formatted = formatted.replace(level_name, colored_level, 1)

        return formatted


def setup_logging(
    settings: Optional["CalendarUtilSettings"] = None,
    level: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure console logging for the calendarutil package.

    Only the ``calendarutil`` logger is configured; the root logger is left
    alone so embedding applications keep control of their own handlers.
    Calling this again replaces the previously installed handler.

    Args:
        settings: Settings providing the logging section. Defaults to the
            global settings.
        level: Console level override (e.g. from the ``--log-level`` flag).
        stream: Output stream, stderr by default.

    Returns:
        The configured package logger.
    """
    if settings is None:
        from calendarutil.config import get_settings  # noqa: PLC0415

        settings = get_settings()

    log_settings = settings.logging
    console_level = get_log_level(level or log_settings.console_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_calendarutil_handler", False):
            package_logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(console_level)
    handler.setFormatter(
        AutoColoredFormatter(
            log_settings.console_format,
            datefmt="%H:%M:%S",
            enable_colors=log_settings.console_colors,
            stream=handler.stream,
        )
    )
    handler._calendarutil_handler = True  # type: ignore[attr-defined]

    package_logger.addHandler(handler)
    package_logger.setLevel(console_level)
    package_logger.propagate = False

    third_party_level = get_log_level(log_settings.third_party_level)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    package_logger.debug(f"Logging configured at {logging.getLevelName(console_level)}")
    return package_logger
