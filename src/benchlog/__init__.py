"""benchlog: pluggable message logging for benchmark tools.

Routes typed messages to chains of handlers. The built-in text handler
prints diagnostics with verbosity filtering and duplicate suppression; the
built-in operation handler owns the latency histogram and renders
percentile reports.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("benchlog")
except PackageNotFoundError:
    __version__ = "0.0.0"

from benchlog.config import LoggerConfig, resolve_config
from benchlog.exceptions import (
    BenchLogError,
    ConfigError,
    HandlerInitError,
    InvalidTypeError,
    LoggerStateError,
)
from benchlog.handlers import LogHandler, OperationHandler, TextHandler
from benchlog.histogram import LatencyHistogram
from benchlog.logger import BenchLogger, LoggerState, create_logger
from benchlog.messages import (
    LogMessage,
    MessageType,
    OperationAction,
    OperationMessage,
    Priority,
    TextFlag,
    TextMessage,
)
from benchlog.options import LogOption, OptionKind, OptionRegistry
from benchlog.registry import HandlerRegistry
from benchlog.report import format_percentiles_cumulative, format_percentiles_intermediate

__all__ = [
    "BenchLogError",
    "BenchLogger",
    "ConfigError",
    "HandlerInitError",
    "HandlerRegistry",
    "InvalidTypeError",
    "LatencyHistogram",
    "LogHandler",
    "LogMessage",
    "LogOption",
    "LoggerConfig",
    "LoggerState",
    "LoggerStateError",
    "MessageType",
    "OperationAction",
    "OperationHandler",
    "OperationMessage",
    "OptionKind",
    "OptionRegistry",
    "Priority",
    "TextFlag",
    "TextHandler",
    "TextMessage",
    "__version__",
    "create_logger",
    "format_percentiles_cumulative",
    "format_percentiles_intermediate",
    "resolve_config",
]
