"""Command-line argument parsing for calendarutil."""

import argparse
from datetime import datetime

from dateutil import parser as date_parser

from calendarutil.timezone.service import DstPolicy
from calendarutil.utils.logging import get_log_level


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 date or date-time for command-line arguments.

    Raises:
        argparse.ArgumentTypeError: If the value is not ISO 8601
    """
    try:
        return date_parser.isoparse(value)
    except (ValueError, OverflowError) as err:
        raise argparse.ArgumentTypeError(
            f"Invalid date: {value}. Use ISO 8601, e.g. 2024-02-11 or 2024-02-11T13:27:00"
        ) from err


def parse_log_level(value: str) -> str:
    """Validate a log level name for --log-level."""
    try:
        get_log_level(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from err
    return value.upper()


def _add_conversion_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("text", help="Date-time string to convert")
    subparser.add_argument(
        "--pattern",
        "-p",
        help="strptime pattern for TEXT (default: settings.default_pattern)",
    )
    subparser.add_argument(
        "--timezone",
        "-z",
        help="IANA timezone name, e.g. Asia/Seoul (default: settings.default_timezone)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser.

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["to-utc", "20241122102948", "-z", "Asia/Seoul"])
        >>> args.command
        'to-utc'
    """
    parser = argparse.ArgumentParser(
        prog="calendarutil",
        description="Calendar helpers: UTC/local conversion, month end and week bounds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s to-utc 20241122102948 --timezone Asia/Seoul
  %(prog)s to-local 20240911234758 --timezone Asia/Seoul
  %(prog)s to-utc "2024-03-10 02:30" -p "%%Y-%%m-%%d %%H:%%M" -z America/New_York --dst-policy later
  %(prog)s last-day 2024-02-11
  %(prog)s week 1978-06-22
        """,
    )

    parser.add_argument("--config", "-c", help="Path to a YAML configuration file")
    parser.add_argument(
        "--log-level",
        type=parse_log_level,
        help="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Shortcut for --log-level VERBOSE"
    )
    parser.add_argument(
        "--backend",
        choices=["zoneinfo", "pytz"],
        help="Timezone library (default: settings.timezone_backend)",
    )
    parser.add_argument(
        "--dst-policy",
        choices=[policy.value for policy in DstPolicy],
        help="Resolution of ambiguous/skipped local times (default: settings.dst_policy)",
    )
    parser.add_argument(
        "--no-strict",
        dest="strict",
        action="store_false",
        default=None,
        help="Accept text that strptime parses but does not format back identically",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    to_utc = subparsers.add_parser("to-utc", help="Convert local date-time text to UTC")
    _add_conversion_arguments(to_utc)

    to_local = subparsers.add_parser("to-local", help="Convert UTC date-time text to local time")
    _add_conversion_arguments(to_local)

    last_day = subparsers.add_parser("last-day", help="Print the last day of the month")
    last_day.add_argument("date", type=parse_iso_datetime, help="ISO 8601 date or date-time")

    week = subparsers.add_parser("week", help="Print Monday and Sunday of the week")
    week.add_argument("date", type=parse_iso_datetime, help="ISO 8601 date or date-time")

    return parser


__all__ = [
    "create_parser",
    "parse_iso_datetime",
    "parse_log_level",
]
