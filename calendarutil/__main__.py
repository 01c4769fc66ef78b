"""Entry point for `python -m calendarutil` command."""

import sys

from calendarutil.cli import main_entry


def main() -> None:
    """Entry point for python -m calendarutil and the console script."""
    try:
        sys.exit(main_entry())
    except KeyboardInterrupt:
        print("Operation cancelled by user", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
