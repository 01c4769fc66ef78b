"""Utility functions and helpers package."""

from .logging import VERBOSE, AutoColoredFormatter, get_log_level, setup_logging

__all__ = [
    "VERBOSE",
    "AutoColoredFormatter",
    "get_log_level",
    "setup_logging",
]
