"""Text message handler: verbosity filtering and duplicate suppression.

Lines are written to the output stream as ``<prefix><text>\\n``. A run of
identical consecutive lines is printed once; the number of suppressed
repeats is reported when a different line arrives, or when the handler is
shut down.
"""

from __future__ import annotations

import sys
import threading
from typing import TYPE_CHECKING, TextIO

from benchlog.exceptions import ConfigError
from benchlog.handlers.base import LogHandler
from benchlog.messages import Priority, TextMessage
from benchlog.options import LogOption, OptionKind

if TYPE_CHECKING:
    from benchlog.config import LoggerConfig
    from benchlog.messages import LogMessage

REPEAT_NOTICE = "(last message repeated %d times)\n"


class TextHandler(LogHandler):
    """Prints text messages that pass the verbosity threshold.

    ``process()`` may be called from many threads at once. The last-line
    comparison and the repeat counter are guarded by one lock; the write
    itself happens outside it.
    """

    options = (
        LogOption(
            name="verbosity",
            description="verbosity level {5 - debug, 0 - only critical messages}",
            default="3",
            kind=OptionKind.INT,
        ),
    )

    def __init__(self, stream: TextIO | None = None) -> None:
        """Create a handler writing to *stream*.

        Args:
            stream: Output stream. ``None`` resolves to ``sys.stdout`` on
                every write, so stream replacement (e.g. by pytest) is seen.
        """
        self._stream = stream
        self._lock = threading.Lock()
        self._verbosity = int(Priority.NOTICE)
        self._last_line: str | None = None
        self._repeat_count = 0

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def verbosity(self) -> int:
        return self._verbosity

    @property
    def last_line(self) -> str | None:
        with self._lock:
            return self._last_line

    @property
    def repeat_count(self) -> int:
        with self._lock:
            return self._repeat_count

    def init(self, config: LoggerConfig) -> None:
        """Read the verbosity threshold and reset duplicate tracking.

        Raises:
            ConfigError: If verbosity is outside ``0..Priority.DEBUG``.
        """
        verbosity = config.verbosity
        if not 0 <= verbosity <= Priority.DEBUG:
            raise ConfigError(f"Invalid value for verbosity: {verbosity}")

        self._verbosity = verbosity
        reconfigure = getattr(self.stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(line_buffering=True)
        with self._lock:
            self._last_line = None
            self._repeat_count = 0

    def accepts(self, priority: Priority) -> bool:
        """Return True if *priority* passes the verbosity threshold."""
        return priority <= self._verbosity

    def process(self, message: LogMessage) -> None:
        payload = message.payload
        if not isinstance(payload, TextMessage):
            return
        if not self.accepts(payload.priority):
            return

        notice = ""
        if not payload.allow_duplicates:
            with self._lock:
                if payload.text == self._last_line:
                    self._repeat_count += 1
                    return
                if self._repeat_count > 0:
                    notice = REPEAT_NOTICE % self._repeat_count
                self._repeat_count = 0
                self._last_line = payload.text

        self._write(f"{notice}{payload.priority.prefix}{payload.text}\n")

    def flush_repeats(self) -> None:
        """Report a pending run of suppressed duplicates, if any."""
        with self._lock:
            count = self._repeat_count
            self._repeat_count = 0
        if count > 0:
            self._write(REPEAT_NOTICE % count)

    def done(self) -> None:
        self.flush_repeats()
        with self._lock:
            self._last_line = None

    def _write(self, data: str) -> None:
        stream = self.stream
        stream.write(data)
        stream.flush()
