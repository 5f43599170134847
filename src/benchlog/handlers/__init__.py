"""Built-in log handlers and the handler base class."""

from benchlog.handlers.base import LogHandler
from benchlog.handlers.operation import OperationHandler
from benchlog.handlers.text import TextHandler

__all__ = [
    "LogHandler",
    "OperationHandler",
    "TextHandler",
]
