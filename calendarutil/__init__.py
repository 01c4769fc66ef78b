"""calendarutil - calendar and timezone helper functions.

Converts pattern-formatted timestamps between local wall-clock time and UTC,
and computes month ends and Monday/Sunday week bounds.

Example usage:
    >>> from calendarutil import local_datetime_to_utc, get_week_start_end
    >>> local_datetime_to_utc("20241122102948", "%Y%m%d%H%M%S", "Asia/Seoul")
    datetime.datetime(2024, 11, 22, 1, 29, 48, tzinfo=datetime.timezone.utc)
"""

from .date_util import (
    get_latest_day,
    get_week_start_end,
    local_datetime_to_utc,
    parse_naive_datetime,
    utc_datetime_to_local,
)
from .exceptions import (
    AmbiguousTimeError,
    CalendarUtilError,
    ConfigurationError,
    InvalidArgumentError,
    NonExistentTimeError,
    TimezoneError,
    UnknownTimezoneError,
)
from .timezone import DstPolicy, TimezoneService

__version__ = "0.2.1"
__author__ = "calendarutil contributors"

__all__ = [
    "AmbiguousTimeError",
    "CalendarUtilError",
    "ConfigurationError",
    "DstPolicy",
    "InvalidArgumentError",
    "NonExistentTimeError",
    "TimezoneError",
    "TimezoneService",
    "UnknownTimezoneError",
    "__author__",
    "__version__",
    "get_latest_day",
    "get_week_start_end",
    "local_datetime_to_utc",
    "parse_naive_datetime",
    "utc_datetime_to_local",
]
