"""Message types routed by the dispatcher."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class MessageType(enum.IntEnum):
    """Selects the handler chain that receives a message.

    Value 0 is reserved and is never a valid type.
    """

    TEXT = 1
    OPERATION = 2

    @classmethod
    def is_valid(cls, value: object) -> bool:
        """Return True if *value* names a registered message type."""
        if isinstance(value, bool):
            return False
        if isinstance(value, cls):
            return True
        if not isinstance(value, int):
            return False
        try:
            cls(value)
        except ValueError:
            return False
        return True


class Priority(enum.IntEnum):
    """Text message priority. Lower values are more severe.

    A message is shown when its value does not exceed the configured
    verbosity.
    """

    FATAL = 0
    ALERT = 1
    WARNING = 2
    NOTICE = 3
    INFO = 4
    DEBUG = 5

    @property
    def prefix(self) -> str:
        """Line prefix printed in front of the message text."""
        return _PREFIXES.get(self, "")


_PREFIXES: dict[Priority, str] = {
    Priority.FATAL: "FATAL: ",
    Priority.ALERT: "ALERT: ",
    Priority.WARNING: "WARNING: ",
    Priority.DEBUG: "DEBUG: ",
}


class TextFlag(enum.Flag):
    """Per-message text options."""

    NONE = 0
    # Bypass consecutive duplicate suppression.
    ALLOW_DUPLICATES = enum.auto()


class OperationAction(enum.Enum):
    """Lifecycle event carried by an operation message."""

    START = "start"
    STOP = "stop"


@dataclass(frozen=True, slots=True)
class TextMessage:
    """Payload of a TEXT message.

    Attributes:
        priority: Severity, compared against the verbosity threshold.
        text: Line to print, without the trailing newline.
        flags: Delivery options.
    """

    priority: Priority
    text: str
    flags: TextFlag = TextFlag.NONE

    @property
    def allow_duplicates(self) -> bool:
        return bool(self.flags & TextFlag.ALLOW_DUPLICATES)


@dataclass(frozen=True, slots=True)
class OperationMessage:
    """Payload of an OPERATION message.

    Attributes:
        action: Whether the operation started or stopped.
        thread_id: Worker that executed the operation.
        value: Latency in seconds for STOP events, 0.0 for START.
    """

    action: OperationAction
    thread_id: int
    value: float = 0.0


@dataclass(frozen=True, slots=True)
class LogMessage:
    """A message together with the type that selects its handler chain."""

    type: MessageType
    payload: TextMessage | OperationMessage

    @classmethod
    def text(
        cls,
        priority: Priority,
        text: str,
        flags: TextFlag = TextFlag.NONE,
    ) -> LogMessage:
        return cls(MessageType.TEXT, TextMessage(priority, text, flags))

    @classmethod
    def operation(
        cls,
        action: OperationAction,
        thread_id: int,
        value: float = 0.0,
    ) -> LogMessage:
        return cls(MessageType.OPERATION, OperationMessage(action, thread_id, value))
