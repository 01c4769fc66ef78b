"""
Exceptions raised by calendarutil.

All errors derive from CalendarUtilError so callers can catch everything the
library raises with a single clause, while still being able to distinguish
bad input (InvalidArgumentError) from timezone resolution failures
(TimezoneError and its subclasses).
"""

from typing import Any, Optional


class CalendarUtilError(Exception):
    """Base exception for all calendarutil errors.

    Args:
        message: Human-readable error description
        details: Optional dictionary containing additional error context

    Example:
        >>> raise CalendarUtilError("Conversion failed", {"timezone": "Asia/Seoul"})
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidArgumentError(CalendarUtilError, ValueError):
    """Raised when input text does not match its pattern, or a value is out of range.

    The message carries the underlying parser diagnostic unchanged so callers
    can surface it to users.

    Example:
        >>> raise InvalidArgumentError(
        ...     "unconverted data remains: 1",
        ...     {"text": "202411221029481", "pattern": "%Y%m%d%H%M%S"},
        ... )
    """


class TimezoneError(CalendarUtilError):
    """Raised when timezone operations fail."""


class UnknownTimezoneError(TimezoneError):
    """Raised when a timezone name is not present in the timezone database."""


class AmbiguousTimeError(TimezoneError):
    """Raised for a wall-clock time that occurs twice (DST fall-back) under the ``raise`` policy."""


class NonExistentTimeError(TimezoneError):
    """Raised for a wall-clock time skipped by a DST spring-forward under the ``raise`` policy."""


class ConfigurationError(CalendarUtilError):
    """Raised when an explicitly requested configuration file cannot be used."""
