"""Base class for log handlers.

A handler may implement any subset of ``init()``, ``process()`` and
``done()``. The dispatcher looks each one up with ``getattr`` and skips the
ones that are missing, so third-party handlers do not have to inherit from
:class:`LogHandler`; subclassing only provides the no-op defaults.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from benchlog.config import LoggerConfig
    from benchlog.messages import LogMessage
    from benchlog.options import LogOption


class LogHandler:
    """Receives messages of the types it is registered under.

    Attributes:
        options: Options read by ``init()``, listed in the help output.
    """

    options: ClassVar[tuple[LogOption, ...]] = ()

    @property
    def name(self) -> str:
        """Human-readable handler identifier."""
        return type(self).__name__

    def init(self, config: LoggerConfig) -> None:
        """Prepare the handler. Raise to abort logger initialization."""

    def process(self, message: LogMessage) -> Any:
        """Handle one message.

        The return value is advisory; exceptions are logged by the
        dispatcher and do not stop delivery to later handlers.
        """

    def done(self) -> None:
        """Release resources. Failures are logged and otherwise ignored."""
