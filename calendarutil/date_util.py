"""Calendar and date-time helpers.

Conversion between local wall-clock time and UTC for pattern-formatted
timestamp strings, plus month-end and week-bound calculations.
"""

import calendar
import logging
import re
from datetime import date, datetime, timedelta, timezone as dt_timezone
from typing import Optional, TypeVar

from calendarutil.exceptions import InvalidArgumentError
from calendarutil.timezone.service import TimezoneLike, TimezoneService, get_timezone_service

logger = logging.getLogger(__name__)

DateT = TypeVar("DateT", date, datetime)

# Splits a pattern into literal runs and single %-directives
_DIRECTIVE = re.compile(r"(%.)")


def parse_naive_datetime(text: str, pattern: str, *, strict: Optional[bool] = None) -> datetime:
    """Parse text into a naive datetime using a strptime pattern.

    Args:
        text: Date-time string (e.g. ``"2024-11-27 13:23:47"``)
        pattern: strptime pattern (e.g. ``"%Y-%m-%d %H:%M:%S"``)
        strict: Require the parsed value to format back to ``text``
            (compared case-insensitively). strptime alone accepts
            single-digit fields, so ``"2024112210294"`` would otherwise parse
            as 10:29:04. Defaults to the ``strict_parsing`` setting.

    Returns:
        Naive datetime.

    Raises:
        InvalidArgumentError: If text does not match pattern, the pattern is
            malformed, or the pattern carries a UTC offset (``%z``).
        TypeError: If text or pattern is not a string.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected string, got {type(text)}")
    if not isinstance(pattern, str):
        raise TypeError(f"Expected string pattern, got {type(pattern)}")

    if strict is None:
        from calendarutil.config import get_settings  # noqa: PLC0415

        strict = get_settings().strict_parsing

    details = {"text": text, "pattern": pattern}
    try:
        parsed = datetime.strptime(text, pattern)
    except ValueError as e:
        logger.debug(f"strptime failed for {text!r} with {pattern!r}: {e}")
        raise InvalidArgumentError(str(e), details) from e

    if parsed.tzinfo is not None:
        raise InvalidArgumentError("Pattern must not contain a UTC offset", details)

    if strict and not _matches_exactly(parsed, text, pattern):
        logger.debug(f"{text!r} parsed as {parsed} but does not round-trip through {pattern!r}")
        raise InvalidArgumentError(f"time data {text!r} does not match format {pattern!r}", details)

    return parsed


def _matches_exactly(parsed: datetime, text: str, pattern: str) -> bool:
    """Check that text is exactly what pattern renders for parsed.

    Directives are rendered one at a time. ``%Y`` is always four digits
    (glibc strftime writes ``999`` for year 999) and ``%f`` accepts the
    1-6 digits strptime does. Comparison is case-insensitive.
    """
    parts = []
    for token in _DIRECTIVE.split(pattern):
        if not token:
            continue
        if token == "%%":
            parts.append("%")
        elif token == "%Y":
            parts.append(re.escape(f"{parsed.year:04d}"))
        elif token == "%f":
            parts.append(r"\d{1,6}")
        elif _DIRECTIVE.fullmatch(token):
            parts.append(re.escape(parsed.strftime(token)))
        else:
            parts.append(re.escape(token))
    return re.fullmatch("".join(parts), text, re.IGNORECASE) is not None


def local_datetime_to_utc(
    text: str,
    pattern: str,
    timezone: TimezoneLike,
    *,
    service: Optional[TimezoneService] = None,
) -> datetime:
    """Convert a local date-time string to a UTC datetime.

    The parsed value is wall-clock time in ``timezone``. The offset is resolved
    from that local interpretation, so DST transitions follow the zone's local
    rules (and the service's DST policy for ambiguous or skipped times).

    Args:
        text: Local date-time string (e.g. ``"20241122102948"``)
        pattern: strptime pattern (e.g. ``"%Y%m%d%H%M%S"``)
        timezone: IANA name or tzinfo (e.g. ``"Asia/Seoul"``)
        service: Timezone service to use; defaults to the global one

    Returns:
        Timezone-aware datetime in UTC.

    Raises:
        InvalidArgumentError: If text does not match pattern.
        TimezoneError: If the timezone is unknown, or the DST policy is
            ``raise`` and the local time is ambiguous or non-existent.

    Example:
        >>> local_datetime_to_utc("20241122102948", "%Y%m%d%H%M%S", "Asia/Seoul")
        datetime.datetime(2024, 11, 22, 1, 29, 48, tzinfo=datetime.timezone.utc)
    """
    naive = parse_naive_datetime(text, pattern)
    service = service or get_timezone_service()
    offset = service.offset_from_local_datetime(naive, timezone)

    try:
        utc_naive = naive - offset
    except OverflowError as e:
        raise InvalidArgumentError(
            f"UTC value for {naive} is out of range", {"text": text, "offset": str(offset)}
        ) from e

    logger.debug(f"{naive} in {timezone} (offset {offset}) -> {utc_naive} UTC")
    return utc_naive.replace(tzinfo=dt_timezone.utc)


def utc_datetime_to_local(
    text: str,
    pattern: str,
    timezone: TimezoneLike,
    *,
    service: Optional[TimezoneService] = None,
) -> datetime:
    """Convert a UTC date-time string to naive local time in a timezone.

    The parsed value is a UTC instant, so the offset is resolved from the UTC
    interpretation and is never ambiguous.

    Args:
        text: UTC date-time string (e.g. ``"20240911234758"``)
        pattern: strptime pattern (e.g. ``"%Y%m%d%H%M%S"``)
        timezone: Target IANA name or tzinfo (e.g. ``"Asia/Seoul"``)
        service: Timezone service to use; defaults to the global one

    Returns:
        Naive datetime holding local wall-clock time.

    Raises:
        InvalidArgumentError: If text does not match pattern.
        UnknownTimezoneError: If the timezone is unknown.

    Example:
        >>> utc_datetime_to_local("20240911234758", "%Y%m%d%H%M%S", "Asia/Seoul")
        datetime.datetime(2024, 9, 12, 8, 47, 58)
    """
    naive = parse_naive_datetime(text, pattern)
    service = service or get_timezone_service()
    offset = service.offset_from_utc_datetime(naive, timezone)

    try:
        local = naive + offset
    except OverflowError as e:
        raise InvalidArgumentError(
            f"Local value for {naive} UTC is out of range", {"text": text, "offset": str(offset)}
        ) from e

    logger.debug(f"{naive} UTC -> {local} in {timezone} (offset {offset})")
    return local


def get_latest_day(value: date) -> int:
    """Return the last day of the month containing value (28-31).

    Only the calendar date is used; time of day and tzinfo are ignored, so an
    aware datetime is not normalized to UTC first.

    Example:
        >>> get_latest_day(datetime(2024, 2, 11, 13, 27))
        29
        >>> get_latest_day(date(2025, 2, 11))
        28
    """
    if not isinstance(value, date):
        raise TypeError(f"Expected date or datetime object, got {type(value)}")

    return calendar.monthrange(value.year, value.month)[1]


def get_week_start_end(value: DateT) -> tuple[DateT, DateT]:
    """Return the Monday and Sunday of the week containing value.

    Time of day and tzinfo are carried over unchanged; only the date moves.

    Raises:
        InvalidArgumentError: If the Sunday falls after datetime.max
            (the week of 9999-12-31). This is a range limit of Python's
            ``date``/``datetime`` types, not a calendar rule: every
            representable week has a Monday and a Sunday.

    Example:
        >>> get_week_start_end(datetime(1978, 6, 22, 9, 30))
        (datetime.datetime(1978, 6, 19, 9, 30), datetime.datetime(1978, 6, 25, 9, 30))
    """
    if not isinstance(value, date):
        raise TypeError(f"Expected date or datetime object, got {type(value)}")

    # weekday(): Monday == 0 ... Sunday == 6. 0001-01-01 is a Monday, so this
    # subtraction never underflows
    monday = value - timedelta(days=value.weekday())
    try:
        sunday = monday + timedelta(days=6)
    except OverflowError as e:
        raise InvalidArgumentError(
            f"Sunday of the week containing {value} is out of range", {"monday": str(monday)}
        ) from e

    return monday, sunday
