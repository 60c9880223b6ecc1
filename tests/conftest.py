"""Pytest fixtures for charmretry tests."""

import logging
from pathlib import Path
from typing import Generator

import pytest
import structlog

from charmretry.core.config import RetryConfig
from charmretry.core.logging import clear_context

from tests.helpers import RecordingDispatcher, SleepRecorder


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset structlog, root handlers and handler context around each test."""
    structlog.reset_defaults()
    clear_context()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    structlog.reset_defaults()
    clear_context()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def sleeper() -> SleepRecorder:
    """Sleep replacement that records requested delays without waiting."""
    return SleepRecorder()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    """Dispatcher that records defer/fail_action calls."""
    return RecordingDispatcher()


@pytest.fixture
def three_attempts() -> RetryConfig:
    """max_attempts=3, base_delay=1s, exponential backoff with multiplier 2."""
    return RetryConfig(max_attempts=3, base_delay=1.0, multiplier=2.0)


@pytest.fixture
def profiles_yaml(tmp_path: Path) -> Path:
    """YAML file with two retry profiles."""
    path = tmp_path / "retry.yaml"
    path.write_text(
        "profiles:\n"
        "  workload:\n"
        "    max_attempts: 4\n"
        "    base_delay: 2\n"
        "  api:\n"
        "    max_attempts: 3\n"
        "    base_delay: 1\n"
        "    strategy: linear\n"
    )
    return path
