"""CLI module for calendarutil.

Parses arguments, applies them on top of the configured settings, runs one
command and maps library errors to exit codes.
"""

import argparse
import logging
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from calendarutil.config import CalendarUtilSettings, configure
from calendarutil.date_util import (
    get_latest_day,
    get_week_start_end,
    local_datetime_to_utc,
    utc_datetime_to_local,
)
from calendarutil.exceptions import CalendarUtilError
from calendarutil.utils.logging import setup_logging

from .parser import create_parser, parse_iso_datetime

logger = logging.getLogger(__name__)


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Collect settings given on the command line."""
    overrides: dict[str, Any] = {}
    if args.config:
        overrides["config_file"] = args.config
    if args.backend:
        overrides["timezone_backend"] = args.backend
    if args.dst_policy:
        overrides["dst_policy"] = args.dst_policy
    if args.strict is not None:
        overrides["strict_parsing"] = args.strict
    return overrides


def run_command(args: argparse.Namespace, settings: CalendarUtilSettings) -> list[str]:
    """Execute the selected command and return its output lines."""
    if args.command in ("to-utc", "to-local"):
        pattern = args.pattern or settings.default_pattern
        timezone = args.timezone or settings.default_timezone
        if args.command == "to-utc":
            result = local_datetime_to_utc(args.text, pattern, timezone)
        else:
            result = utc_datetime_to_local(args.text, pattern, timezone)
        return [result.isoformat()]

    if args.command == "last-day":
        return [str(get_latest_day(args.date))]

    if args.command == "week":
        monday, sunday = get_week_start_end(args.date)
        return [monday.isoformat(), sunday.isoformat()]

    raise ValueError(f"Unknown command: {args.command}")


def main_entry(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with argument parsing.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    level = "VERBOSE" if args.verbose else args.log_level

    try:
        settings = configure(**_settings_overrides(args))
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    except CalendarUtilError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(settings, level=level)

    try:
        lines = run_command(args, settings)
    except CalendarUtilError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


__all__ = [
    "create_parser",
    "main_entry",
    "parse_iso_datetime",
    "run_command",
]
