"""Tests for message types and priorities."""

from __future__ import annotations

import pytest

from benchlog.messages import (
    LogMessage,
    MessageType,
    OperationAction,
    OperationMessage,
    Priority,
    TextFlag,
    TextMessage,
)


class TestMessageType:
    def test_members_are_valid(self) -> None:
        assert MessageType.is_valid(MessageType.TEXT)
        assert MessageType.is_valid(MessageType.OPERATION)
        assert MessageType.is_valid(1)

    @pytest.mark.parametrize("value", [0, -1, 3, 99, "TEXT", None, 1.0, True])
    def test_invalid_values(self, value: object) -> None:
        assert not MessageType.is_valid(value)


class TestPriority:
    def test_ordering(self) -> None:
        """Lower numeric value means more severe."""
        assert Priority.FATAL < Priority.ALERT < Priority.WARNING
        assert Priority.WARNING < Priority.NOTICE < Priority.INFO < Priority.DEBUG
        assert int(Priority.FATAL) == 0
        assert int(Priority.DEBUG) == 5

    @pytest.mark.parametrize(
        ("priority", "prefix"),
        [
            (Priority.FATAL, "FATAL: "),
            (Priority.ALERT, "ALERT: "),
            (Priority.WARNING, "WARNING: "),
            (Priority.NOTICE, ""),
            (Priority.INFO, ""),
            (Priority.DEBUG, "DEBUG: "),
        ],
    )
    def test_prefix(self, priority: Priority, prefix: str) -> None:
        assert priority.prefix == prefix


class TestLogMessage:
    def test_text_constructor(self) -> None:
        msg = LogMessage.text(Priority.INFO, "hello")
        assert msg.type is MessageType.TEXT
        assert isinstance(msg.payload, TextMessage)
        assert msg.payload.text == "hello"
        assert msg.payload.flags is TextFlag.NONE
        assert not msg.payload.allow_duplicates

    def test_allow_duplicates_flag(self) -> None:
        msg = LogMessage.text(Priority.INFO, "tick", TextFlag.ALLOW_DUPLICATES)
        assert msg.payload.allow_duplicates

    def test_operation_constructor(self) -> None:
        msg = LogMessage.operation(OperationAction.STOP, thread_id=3, value=0.25)
        assert msg.type is MessageType.OPERATION
        assert msg.payload == OperationMessage(OperationAction.STOP, 3, 0.25)

    def test_frozen(self) -> None:
        msg = LogMessage.text(Priority.INFO, "hello")
        with pytest.raises(AttributeError):
            msg.type = MessageType.OPERATION  # type: ignore[misc]
