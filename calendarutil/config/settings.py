"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from calendarutil.exceptions import ConfigurationError
from calendarutil.timezone.service import DstPolicy, TimezoneService
from calendarutil.utils.logging import get_log_level

logger = logging.getLogger(__name__)

ENV_PREFIX = "CALENDARUTIL_"
CONFIG_FILE_NAME = "config.yaml"


class LoggingSettings(BaseModel):
    """Console logging configuration."""

    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )
    console_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="logging.Formatter format string for console output",
    )
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )

    @field_validator("console_level", "third_party_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize level names and reject unknown ones."""
        get_log_level(v)
        return v.upper()


class CalendarUtilSettings(BaseSettings):
    """Application settings with environment variable and YAML support.

    Precedence: explicit keyword arguments, then ``CALENDARUTIL_*`` environment
    variables (nested fields use ``__``, e.g. ``CALENDARUTIL_LOGGING__CONSOLE_LEVEL``),
    then the YAML config file, then defaults.
    """

    # Timezone resolution
    timezone_backend: Literal["zoneinfo", "pytz"] = Field(
        default="zoneinfo", description="Timezone library: zoneinfo or pytz"
    )
    dst_policy: DstPolicy = Field(
        default=DstPolicy.EARLIER,
        description="Ambiguous/non-existent local time resolution: earlier, later, raise",
    )
    default_timezone: str = Field(
        default="UTC", description="Timezone used by the CLI when --timezone is omitted"
    )

    # Parsing
    default_pattern: str = Field(
        default="%Y%m%d%H%M%S", description="Pattern used by the CLI when --pattern is omitted"
    )
    strict_parsing: bool = Field(
        default=True,
        description="Require parsed text to format back to the exact input",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **kwargs: Any) -> None:
        config_file = kwargs.pop("config_file", None)

        yaml_values = _strip_env_overrides(load_yaml_config(config_file))
        for key, value in yaml_values.items():
            if key not in kwargs:
                kwargs[key] = value

        super().__init__(**kwargs)

    @field_validator("default_timezone")
    @classmethod
    def validate_default_timezone(cls, v: str, info: ValidationInfo) -> str:
        """Validate timezone name against the configured backend."""
        v = v.strip()
        if not v:
            raise ValueError("Timezone cannot be empty")

        backend = info.data.get("timezone_backend", "zoneinfo")
        if not TimezoneService(backend=backend).is_valid_timezone(v):
            raise ValueError(f"Unknown timezone '{v}'")
        return v

    @field_validator("default_pattern")
    @classmethod
    def validate_default_pattern(cls, v: str) -> str:
        if "%" not in v:
            raise ValueError("Pattern must contain at least one % directive")
        return v


def find_config_file() -> Optional[Path]:
    """Find config file, checking project directory first, then user home."""
    project_root = Path(__file__).parent.parent.parent
    project_config = project_root / "config" / CONFIG_FILE_NAME
    if project_config.exists():
        return project_config

    user_config = Path.home() / ".config" / "calendarutil" / CONFIG_FILE_NAME
    if user_config.exists():
        return user_config

    return None


def load_yaml_config(config_file: Optional[Union[str, Path]] = None) -> dict[str, Any]:
    """Load settings values from a YAML file.

    Args:
        config_file: Explicit path. When omitted the default locations are
            searched and a broken file only produces a warning.

    Returns:
        Mapping of setting names to values (empty when no file applies).

    Raises:
        ConfigurationError: If an explicitly given file is missing or invalid.
    """
    explicit = config_file is not None
    path = Path(config_file) if explicit else find_config_file()
    if path is None:
        return {}

    if explicit and not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        if explicit:
            raise ConfigurationError(f"Could not load YAML config from {path}: {e}") from e
        # Don't fail on a discovered file, continue with defaults/env vars
        logger.warning(f"Could not load YAML config from {path}: {e}")
        return {}

    if not config_data:
        return {}
    if not isinstance(config_data, dict):
        raise ConfigurationError(
            f"YAML config must be a mapping, got {type(config_data).__name__}",
            {"path": str(path)},
        )

    unknown = set(config_data) - set(CalendarUtilSettings.model_fields)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {path}: {sorted(unknown)}")

    logger.debug(f"Loaded YAML config from {path}")
    return {key: value for key, value in config_data.items() if key not in unknown}


def _strip_env_overrides(values: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Drop YAML values that an environment variable already sets."""
    env_keys = {
        name[len(ENV_PREFIX) :].lower()
        for name in os.environ
        if name.upper().startswith(ENV_PREFIX)
    }

    result: dict[str, Any] = {}
    for key, value in values.items():
        path = f"{prefix}{key}".lower()
        if path in env_keys:
            continue
        if isinstance(value, dict):
            value = _strip_env_overrides(value, f"{path}__")
        result[key] = value
    return result


# Global settings management
_settings_instance: Optional[CalendarUtilSettings] = None


def get_settings() -> CalendarUtilSettings:
    """Get the global settings instance, creating it lazily if needed."""
    # Access module-level variable without using 'global'
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = CalendarUtilSettings()
    return globals()["_settings_instance"]


def configure(**kwargs: Any) -> CalendarUtilSettings:
    """Replace the global settings instance.

    Keyword arguments are passed to CalendarUtilSettings (including
    ``config_file``). The timezone service is rebuilt on next use so it picks
    up the new backend and DST policy.
    """
    from calendarutil.timezone.service import reset_timezone_service  # noqa: PLC0415

    globals()["_settings_instance"] = CalendarUtilSettings(**kwargs)
    reset_timezone_service()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    from calendarutil.timezone.service import reset_timezone_service  # noqa: PLC0415

    globals()["_settings_instance"] = None
    reset_timezone_service()
