"""The logger core: handler registration, lifecycle and message dispatch.

Typical use::

    log = create_logger()
    log.init({"verbosity": 5, "percentile": [50, 99]})
    log.text(Priority.INFO, "Threads started!")
    ...
    log.done()

Before ``init()`` succeeds (and after ``done()``) the text entry points print
straight to the output stream, so startup diagnostics work before the
configuration is loaded. ``init()`` and ``done()`` must run on a single
thread while no other thread is logging; ``dispatch()`` is safe to call
concurrently once the logger is initialized.
"""

from __future__ import annotations

import enum
import logging
import os
import sys
from typing import TYPE_CHECKING, Any, TextIO

from benchlog.config import LoggerConfig, resolve_config
from benchlog.exceptions import BenchLogError, HandlerInitError, LoggerStateError
from benchlog.handlers.operation import OperationHandler
from benchlog.handlers.text import TextHandler
from benchlog.messages import LogMessage, MessageType, OperationAction, Priority, TextFlag
from benchlog.options import OptionRegistry
from benchlog.registry import HandlerRegistry

if TYPE_CHECKING:
    from benchlog.histogram import LatencyHistogram
    from benchlog.options import LogOption

logger = logging.getLogger("benchlog")

# Longest text accepted from the formatting entry points.
MAX_TEXT_LENGTH = 4095


class LoggerState(enum.Enum):
    """Lifecycle of a :class:`BenchLogger`."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    SHUT_DOWN = "shut_down"


def _format(fmt: str, args: tuple[Any, ...]) -> str:
    text = fmt % args if args else fmt
    return text[:MAX_TEXT_LENGTH]


def _handler_name(handler: Any) -> str:
    return getattr(handler, "name", None) or type(handler).__name__


class BenchLogger:
    """Routes messages to the handlers registered for their type.

    Args:
        config: Base configuration. Defaults to ``LoggerConfig()`` (which
            reads ``BENCHLOG_*`` environment variables).
        stream: Output stream for the built-in text handler and the
            pre-initialization fallback. ``None`` means ``sys.stdout``.
    """

    def __init__(
        self,
        config: LoggerConfig | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self._base_config = config if config is not None else LoggerConfig()
        self._config = self._base_config
        self._stream = stream
        self._options = OptionRegistry()
        self._registry = HandlerRegistry(self._options)
        self._state = LoggerState.UNINITIALIZED
        self._text_handler: TextHandler | None = None
        self._operation_handler: OperationHandler | None = None

    # --- Accessors ---

    @property
    def state(self) -> LoggerState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is LoggerState.INITIALIZED

    @property
    def config(self) -> LoggerConfig:
        """Configuration used by the last ``init()`` call."""
        return self._config

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    @property
    def options(self) -> OptionRegistry:
        return self._options

    @property
    def text_handler(self) -> TextHandler | None:
        return self._text_handler

    @property
    def operation_handler(self) -> OperationHandler | None:
        return self._operation_handler

    @property
    def latency_histogram(self) -> LatencyHistogram:
        """Histogram owned by the built-in operation handler.

        Raises:
            LoggerStateError: If the built-in handlers are not registered.
        """
        if self._operation_handler is None:
            raise LoggerStateError("Built-in handlers are not registered")
        return self._operation_handler.histogram

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    # --- Registration ---

    def register_builtin_handlers(self) -> None:
        """Register the text and operation handlers, each at most once."""
        if self._text_handler is None:
            text_handler = TextHandler(self._stream)
            self.add_handler(MessageType.TEXT, text_handler)
            self._text_handler = text_handler
        if self._operation_handler is None:
            operation_handler = OperationHandler()
            self.add_handler(MessageType.OPERATION, operation_handler)
            self._operation_handler = operation_handler

    def add_handler(self, message_type: MessageType | int, handler: Any) -> None:
        """Append *handler* to the chain for *message_type*.

        Raises:
            InvalidTypeError: If *message_type* is out of range.
            LoggerStateError: If the logger is currently initialized.
        """
        if self._state is LoggerState.INITIALIZED:
            raise LoggerStateError("Cannot register handlers while the logger is running")
        self._registry.add(message_type, handler)

    def load_entry_point_handlers(self) -> list[str]:
        """Register third-party handlers from the ``benchlog.handlers`` group."""
        if self._state is LoggerState.INITIALIZED:
            raise LoggerStateError("Cannot register handlers while the logger is running")
        return self._registry.load_entry_points()

    # --- Lifecycle ---

    def init(self, overrides: dict[str, Any] | None = None) -> None:
        """Initialize every handler, in type order then registration order.

        The first failure aborts the sequence. Handlers initialized before it
        are left as they are. The error is printed at FATAL priority and then
        raised.

        Args:
            overrides: Option values applied on top of the base config.

        Raises:
            ConfigError: If an option value is invalid.
            HandlerInitError: If a handler fails with a non-benchlog error.
            LoggerStateError: If the logger is already initialized.
        """
        if self._state is LoggerState.INITIALIZED:
            raise LoggerStateError("Logger is already initialized")

        try:
            self._config = resolve_config(self._base_config, overrides)
            for handler in self._registry.iter_handlers():
                self._init_handler(handler)
        except BenchLogError as exc:
            self.text(Priority.FATAL, "%s", exc)
            raise

        self._state = LoggerState.INITIALIZED
        logger.debug("Logger initialized with %d handler(s)", len(self._registry))

    def _init_handler(self, handler: Any) -> None:
        init = getattr(handler, "init", None)
        if init is None:
            return
        try:
            init(self._config)
        except BenchLogError:
            raise
        except Exception as exc:
            raise HandlerInitError(
                f"Handler {_handler_name(handler)} failed to initialize: {exc}"
            ) from exc

    def done(self) -> None:
        """Shut down every handler.

        Handler failures are logged as warnings and never raised. The logger
        always ends in the SHUT_DOWN state.
        """
        try:
            for handler in self._registry.iter_handlers():
                done = getattr(handler, "done", None)
                if done is None:
                    continue
                try:
                    done()
                except Exception:  # Intentional: shutdown must complete
                    logger.warning(
                        "Handler %s failed to shut down",
                        _handler_name(handler),
                        exc_info=True,
                    )
        finally:
            self._state = LoggerState.SHUT_DOWN

    def __enter__(self) -> BenchLogger:
        self.init()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.done()

    # --- Dispatch ---

    def dispatch(self, message: LogMessage) -> None:
        """Deliver *message* to every handler registered for its type.

        Exceptions raised by a handler are logged and do not stop delivery
        to the handlers after it.

        Raises:
            LoggerStateError: If the logger is not initialized.
            InvalidTypeError: If the message type is out of range.
        """
        if self._state is not LoggerState.INITIALIZED:
            raise LoggerStateError(
                f"Cannot dispatch messages while the logger is {self._state.value}"
            )
        for handler in self._registry.chain(message.type):
            process = getattr(handler, "process", None)
            if process is None:
                continue
            try:
                result = process(message)
            except Exception:  # Intentional: one handler must not block the chain
                logger.error(
                    "Handler %s failed to process %s message",
                    _handler_name(handler),
                    message.type.name,
                    exc_info=True,
                )
                continue
            if result:
                logger.debug(
                    "Handler %s returned %r for %s message",
                    _handler_name(handler),
                    result,
                    message.type.name,
                )

    # --- Text entry points ---

    def _emit(self, priority: Priority, text: str, flags: TextFlag) -> None:
        if self._state is not LoggerState.INITIALIZED:
            stream = self.stream
            stream.write(f"{priority.prefix}{text}\n")
            stream.flush()
            return
        self.dispatch(LogMessage.text(priority, text, flags))

    def text(self, priority: Priority, fmt: str, *args: Any) -> None:
        """Log a ``%``-formatted text line."""
        self._emit(priority, _format(fmt, args), TextFlag.NONE)

    def timestamp(self, priority: Priority, seconds: float, fmt: str, *args: Any) -> None:
        """Log a text line prefixed with the elapsed time in whole seconds.

        Timestamped lines are never suppressed as duplicates.
        """
        text = _format(f"[ {seconds:.0f}s ] " + fmt, args)
        self._emit(priority, text, TextFlag.ALLOW_DUPLICATES)

    def error(
        self,
        priority: Priority,
        fmt: str,
        *args: Any,
        code: int | None = None,
    ) -> None:
        """Log a text line followed by a system error code and its message.

        Args:
            code: Error number to report. When omitted, taken from the
                ``OSError`` currently being handled, or 0 if there is none.
        """
        if code is None:
            current = sys.exc_info()[1]
            code = current.errno if isinstance(current, OSError) and current.errno else 0
        text = f"{_format(fmt, args)} errno = {code} ({os.strerror(code)})"
        self._emit(priority, text[:MAX_TEXT_LENGTH], TextFlag.NONE)

    # --- Operation entry points ---

    def operation(self, action: OperationAction, thread_id: int, value: float = 0.0) -> None:
        """Dispatch an operation start/stop event."""
        self.dispatch(LogMessage.operation(action, thread_id, value))

    # --- Help ---

    def print_help(self, stream: TextIO | None = None) -> None:
        """Print the options of every registered handler under ``Log options:``."""
        out = stream if stream is not None else self.stream
        # Every handler shares one description column.
        options: dict[str, LogOption] = {}
        for handler in self._registry.iter_handlers():
            for option in getattr(handler, "options", ()):
                options.setdefault(option.name, option)
        out.write("Log options:\n" + self._options.format_help(options.values()))


def create_logger(
    config: LoggerConfig | None = None,
    stream: TextIO | None = None,
) -> BenchLogger:
    """Return a logger with the built-in handlers registered."""
    log = BenchLogger(config, stream)
    log.register_builtin_handlers()
    return log
