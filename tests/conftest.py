"""Shared pytest fixtures for benchlog tests.

Provides configuration objects that ignore the environment and ``.env``
files, plus a logger wired to an in-memory stream.
"""

from __future__ import annotations

import io
from typing import Callable

import pytest

from benchlog.config import LoggerConfig
from benchlog.logger import BenchLogger, create_logger


def _build_config(**overrides: object) -> LoggerConfig:
    return LoggerConfig(_env_file=None, **overrides)  # type: ignore[call-arg]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BENCHLOG_* variables from the host out of every test."""
    for name in ("BENCHLOG_VERBOSITY", "BENCHLOG_PERCENTILE", "BENCHLOG_HISTOGRAM"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_config() -> Callable[..., LoggerConfig]:
    """Return a factory for configs built only from defaults and overrides."""
    return _build_config


@pytest.fixture
def default_config() -> LoggerConfig:
    """Return a LoggerConfig with all default values."""
    return _build_config()


@pytest.fixture
def debug_config() -> LoggerConfig:
    """Return a config that lets every priority through."""
    return _build_config(verbosity=5)


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def bench_logger(default_config: LoggerConfig, stream: io.StringIO) -> BenchLogger:
    """Return an uninitialized logger with the built-in handlers registered."""
    return create_logger(default_config, stream)
