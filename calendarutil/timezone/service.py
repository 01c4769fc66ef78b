"""Core timezone service for calendarutil.

Resolves IANA timezone names with zoneinfo (default) or pytz and answers the
one question the conversion functions need: which UTC offset applies to a
naive date-time in a given zone. There are two distinct resolution paths:

- local interpretation: the naive value is wall-clock time in the zone, so a
  fall-back hour is ambiguous and a spring-forward hour does not exist;
- UTC interpretation: the naive value is a UTC instant, which always maps to
  exactly one offset.
"""

import importlib.util
import logging
from datetime import datetime, timedelta, timezone as dt_timezone, tzinfo
from enum import Enum
from typing import Any, Optional, Union

from calendarutil.exceptions import (
    AmbiguousTimeError,
    InvalidArgumentError,
    NonExistentTimeError,
    TimezoneError,
    UnknownTimezoneError,
)
from calendarutil.utils.logging import VERBOSE

logger = logging.getLogger(__name__)

# Check for timezone library availability
ZONEINFO_AVAILABLE = importlib.util.find_spec("zoneinfo") is not None
PYTZ_AVAILABLE = importlib.util.find_spec("pytz") is not None

# Import timezone libraries at top level if available
ZoneInfo = None
if ZONEINFO_AVAILABLE:
    from zoneinfo import ZoneInfo

pytz = None
if PYTZ_AVAILABLE:
    import pytz

SUPPORTED_BACKENDS = ("zoneinfo", "pytz")

TimezoneLike = Union[str, tzinfo]


class DstPolicy(str, Enum):
    """How to resolve a local wall-clock time at a DST transition.

    EARLIER picks the offset in effect before the transition (PEP 495 fold=0),
    LATER the offset in effect after it (fold=1), RAISE refuses to guess.
    """

    EARLIER = "earlier"
    LATER = "later"
    RAISE = "raise"


class TimezoneService:
    """Timezone lookup and UTC offset resolution.

    All offset lookups in calendarutil go through this service so that the
    backend and DST policy are applied consistently.
    """

    def __init__(
        self,
        backend: str = "zoneinfo",
        dst_policy: Union[DstPolicy, str] = DstPolicy.EARLIER,
    ) -> None:
        """Initialize timezone service.

        Args:
            backend: Timezone library to use, ``zoneinfo`` or ``pytz``.
            dst_policy: Resolution policy for ambiguous/non-existent local times.

        Raises:
            TimezoneError: If the backend is unknown or not installed.
        """
        self.backend = backend
        self.dst_policy = DstPolicy(dst_policy)
        self._cache: dict[str, tzinfo] = {}
        self._validate_timezone_support()

    def _validate_timezone_support(self) -> None:
        """Validate that the requested timezone library is available.

        Raises:
            TimezoneError: If the backend is unknown or unavailable.
        """
        if self.backend not in SUPPORTED_BACKENDS:
            raise TimezoneError(
                f"Unsupported timezone backend '{self.backend}'",
                {"supported": list(SUPPORTED_BACKENDS)},
            )

        if self.backend == "zoneinfo" and not ZONEINFO_AVAILABLE:
            raise TimezoneError("zoneinfo backend requested but zoneinfo is not available")
        if self.backend == "pytz" and not PYTZ_AVAILABLE:
            raise TimezoneError("pytz backend requested but pytz is not installed")

        logger.debug(f"Using {self.backend} for timezone handling")

    def get_timezone(self, timezone: TimezoneLike) -> tzinfo:
        """Get a timezone object from the active backend.

        Args:
            timezone: IANA name (e.g. ``"Asia/Seoul"``) or a tzinfo. ZoneInfo and
                pytz zones are re-resolved by name in the active backend; other
                tzinfo objects (fixed offsets) are returned unchanged.

        Returns:
            Timezone object.

        Raises:
            UnknownTimezoneError: If the name is not in the timezone database.
            TypeError: If timezone is neither a string nor a tzinfo.
        """
        if isinstance(timezone, str):
            name = timezone
        elif isinstance(timezone, tzinfo):
            name = getattr(timezone, "key", None) or getattr(timezone, "zone", None)
            if name is None:
                return timezone
        else:
            raise TypeError(f"Expected timezone name or tzinfo, got {type(timezone)}")

        cached = self._cache.get(name)
        if cached is not None:
            return cached

        try:
            if self.backend == "pytz" and pytz is not None:
                tz = pytz.timezone(name)
            elif ZoneInfo is not None:
                tz = ZoneInfo(name)
            else:
                raise TimezoneError(f"No timezone library available for backend '{self.backend}'")
        except (KeyError, ValueError, OSError) as e:
            # ZoneInfoNotFoundError and pytz.UnknownTimeZoneError are KeyErrors;
            # malformed keys ("../etc") raise ValueError; tzdata directory
            # names ("America") raise IsADirectoryError
            raise UnknownTimezoneError(f"Unknown timezone '{name}'", {"backend": self.backend}) from e

        logger.debug(f"Created timezone: {tz} ({self.backend})")
        self._cache[name] = tz
        return tz

    def is_valid_timezone(self, name: str) -> bool:
        """Return True if name resolves in the active backend."""
        try:
            self.get_timezone(name)
        except UnknownTimezoneError:
            return False
        return True

    def offset_from_local_datetime(self, naive: datetime, timezone: TimezoneLike) -> timedelta:
        """Resolve the UTC offset for a wall-clock time in a timezone.

        Args:
            naive: Naive datetime holding local wall-clock time.
            timezone: Timezone the wall-clock time belongs to.

        Returns:
            Offset to subtract from the wall-clock time to obtain UTC.

        Raises:
            InvalidArgumentError: If naive carries tzinfo.
            AmbiguousTimeError: Repeated wall time under DstPolicy.RAISE.
            NonExistentTimeError: Skipped wall time under DstPolicy.RAISE.
        """
        self._require_naive(naive)
        tz = self.get_timezone(timezone)

        if hasattr(tz, "localize"):
            return self._pytz_local_offset(naive, tz)
        return self._fold_local_offset(naive, tz)

    def offset_from_utc_datetime(self, naive: datetime, timezone: TimezoneLike) -> timedelta:
        """Resolve the UTC offset in effect at a UTC instant.

        Args:
            naive: Naive datetime holding a UTC instant.
            timezone: Timezone whose offset is wanted.

        Returns:
            Offset to add to the UTC instant to obtain local wall-clock time.

        Raises:
            InvalidArgumentError: If naive carries tzinfo.
        """
        self._require_naive(naive)
        tz = self.get_timezone(timezone)

        try:
            # astimezone() runs tz.fromutc(), which is exact for both backends
            offset = naive.replace(tzinfo=dt_timezone.utc).astimezone(tz).utcoffset()
        except OverflowError as e:
            raise InvalidArgumentError(f"Date value out of range: {e}", {"datetime": str(naive)}) from e
        return offset or timedelta(0)

    def _fold_local_offset(self, naive: datetime, tz: tzinfo) -> timedelta:
        """Local resolution for PEP 495 timezones (zoneinfo, fixed offsets)."""
        earlier = naive.replace(tzinfo=tz, fold=0)
        earlier_offset = earlier.utcoffset() or timedelta(0)
        later_offset = naive.replace(tzinfo=tz, fold=1).utcoffset() or timedelta(0)

        if earlier_offset == later_offset:
            return earlier_offset

        # A skipped wall time does not survive a round trip through UTC
        round_trip = earlier.astimezone(dt_timezone.utc).astimezone(tz).replace(tzinfo=None)
        ambiguous = round_trip == naive
        return self._apply_dst_policy(naive, tz, ambiguous, earlier_offset, later_offset)

    def _pytz_local_offset(self, naive: datetime, tz: Any) -> timedelta:
        """Local resolution for pytz timezones via localize()."""
        try:
            return tz.localize(naive, is_dst=None).utcoffset()
        except pytz.AmbiguousTimeError:
            ambiguous = True
        except pytz.NonExistentTimeError:
            ambiguous = False

        candidates = (
            tz.localize(naive, is_dst=False).utcoffset(),
            tz.localize(naive, is_dst=True).utcoffset(),
        )
        # Clocks go back on a repeated hour and forward on a skipped one
        if ambiguous:
            earlier_offset, later_offset = max(candidates), min(candidates)
        else:
            earlier_offset, later_offset = min(candidates), max(candidates)
        return self._apply_dst_policy(naive, tz, ambiguous, earlier_offset, later_offset)

    def _apply_dst_policy(
        self,
        naive: datetime,
        tz: tzinfo,
        ambiguous: bool,
        earlier_offset: timedelta,
        later_offset: timedelta,
    ) -> timedelta:
        kind = "ambiguous" if ambiguous else "non-existent"
        logger.log(
            VERBOSE,
            f"{naive} is {kind} in {tz}, resolving with policy '{self.dst_policy.value}'"
        )

        if self.dst_policy is DstPolicy.EARLIER:
            return earlier_offset
        if self.dst_policy is DstPolicy.LATER:
            return later_offset

        details = {
            "datetime": naive.isoformat(),
            "timezone": str(tz),
            "offsets": [str(earlier_offset), str(later_offset)],
        }
        if ambiguous:
            raise AmbiguousTimeError(f"{naive} occurs twice in {tz}", details)
        raise NonExistentTimeError(f"{naive} does not exist in {tz}", details)

    @staticmethod
    def _require_naive(naive: datetime) -> None:
        if not isinstance(naive, datetime):
            raise TypeError(f"Expected datetime object, got {type(naive)}")
        if naive.tzinfo is not None:
            raise InvalidArgumentError(
                "Expected a naive datetime", {"datetime": naive.isoformat()}
            )


# Global service instance (using module-level variable instead of global statement)
_timezone_service: Optional[TimezoneService] = None


def get_timezone_service() -> TimezoneService:
    """Get global timezone service instance.

    The backend and DST policy come from the active CalendarUtilSettings.

    Returns:
        Singleton TimezoneService instance.
    """
    if "_timezone_service" not in globals() or globals()["_timezone_service"] is None:
        from calendarutil.config import get_settings  # noqa: PLC0415

        settings = get_settings()
        globals()["_timezone_service"] = TimezoneService(
            backend=settings.timezone_backend, dst_policy=settings.dst_policy
        )
        logger.info(
            f"Timezone service ready: {settings.timezone_backend} backend, "
            f"DST policy '{settings.dst_policy.value}'"
        )
    return globals()["_timezone_service"]


def reset_timezone_service() -> None:
    """Drop the global service so the next call rebuilds it from settings."""
    globals()["_timezone_service"] = None


# Convenience functions for direct use
def get_timezone(timezone: TimezoneLike) -> tzinfo:
    """Get timezone object from the global service."""
    return get_timezone_service().get_timezone(timezone)


def is_valid_timezone(name: str) -> bool:
    """Check a timezone name against the global service's backend."""
    return get_timezone_service().is_valid_timezone(name)


def offset_from_local_datetime(naive: datetime, timezone: TimezoneLike) -> timedelta:
    """Resolve the offset for local wall-clock time using the global service."""
    return get_timezone_service().offset_from_local_datetime(naive, timezone)


def offset_from_utc_datetime(naive: datetime, timezone: TimezoneLike) -> timedelta:
    """Resolve the offset at a UTC instant using the global service."""
    return get_timezone_service().offset_from_utc_datetime(naive, timezone)
