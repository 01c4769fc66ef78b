"""Configuration package for calendarutil."""

from .settings import (
    CalendarUtilSettings,
    LoggingSettings,
    configure,
    get_settings,
    load_yaml_config,
    reset_settings,
)

__all__ = [
    "CalendarUtilSettings",
    "LoggingSettings",
    "configure",
    "get_settings",
    "load_yaml_config",
    "reset_settings",
]
