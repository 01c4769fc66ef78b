"""
Timezone package for calendarutil.

Provides timezone lookup and UTC offset resolution with a clean public API.
Uses zoneinfo by default, pytz as an alternate backend.

Example usage:
    >>> from datetime import datetime
    >>> from calendarutil.timezone import offset_from_local_datetime, offset_from_utc_datetime
    >>>
    >>> # Offset for 10:29 wall-clock time in Seoul
    >>> offset_from_local_datetime(datetime(2024, 11, 22, 10, 29), "Asia/Seoul")
    datetime.timedelta(seconds=32400)
    >>>
    >>> # Offset in New York at a UTC instant
    >>> offset_from_utc_datetime(datetime(2024, 7, 1, 12, 0), "America/New_York")
    datetime.timedelta(days=-1, seconds=72000)
"""

from .service import (
    DstPolicy,
    TimezoneService,
    get_timezone,
    get_timezone_service,
    is_valid_timezone,
    offset_from_local_datetime,
    offset_from_utc_datetime,
    reset_timezone_service,
)

__all__ = [
    "DstPolicy",
    "TimezoneService",
    "get_timezone",
    "get_timezone_service",
    "is_valid_timezone",
    "offset_from_local_datetime",
    "offset_from_utc_datetime",
    "reset_timezone_service",
]
