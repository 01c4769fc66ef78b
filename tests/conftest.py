"""Shared test configuration for calendarutil."""

import logging
import os
from collections.abc import Iterator
from datetime import datetime
from unittest.mock import patch

import pytest

from calendarutil.config import reset_settings
from calendarutil.timezone import DstPolicy, TimezoneService
from calendarutil.utils.logging import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests independent of the developer's environment and config files."""
    for name in list(os.environ):
        if name.upper().startswith("CALENDARUTIL_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))

    with patch("calendarutil.config.settings.find_config_file", return_value=None):
        reset_settings()
        yield
        reset_settings()


@pytest.fixture(params=["zoneinfo", "pytz"])
def backend(request: pytest.FixtureRequest) -> str:
    """Run a test once per timezone backend."""
    return request.param


@pytest.fixture
def service(backend: str) -> TimezoneService:
    """TimezoneService with the default DST policy, per backend."""
    return TimezoneService(backend=backend)


@pytest.fixture
def raising_service(backend: str) -> TimezoneService:
    """TimezoneService that refuses ambiguous and non-existent local times."""
    return TimezoneService(backend=backend, dst_policy=DstPolicy.RAISE)


@pytest.fixture(scope="session")
def compact_pattern() -> str:
    """Pattern used by most conversion tests."""
    return "%Y%m%d%H%M%S"


@pytest.fixture(scope="session")
def thursday() -> datetime:
    """1978-06-22 was a Thursday."""
    return datetime(1978, 6, 22, 0, 0, 0)


@pytest.fixture
def restore_package_logger() -> Iterator[logging.Logger]:
    """Restore the package logger after setup_logging() modifies it."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield package_logger
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = propagate
