"""Handler registry with entry-point auto-discovery.

Holds one ordered chain of handlers per message type. Registration order is
delivery order. Third-party handlers from other packages can be pulled in
through the ``benchlog.handlers`` entry-point group.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING, Any

from benchlog.exceptions import InvalidTypeError
from benchlog.messages import MessageType
from benchlog.options import OptionRegistry

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("benchlog")

ENTRY_POINT_GROUP = "benchlog.handlers"


class HandlerRegistry:
    """Mapping from message type to an ordered chain of handlers.

    Handler options are forwarded to the :class:`OptionRegistry` at
    registration time so they show up in the help output even before the
    logger is initialized.
    """

    def __init__(self, options: OptionRegistry | None = None) -> None:
        self._options = options if options is not None else OptionRegistry()
        self._chains: dict[MessageType, list[Any]] = {t: [] for t in MessageType}

    @property
    def options(self) -> OptionRegistry:
        return self._options

    def add(self, message_type: MessageType | int, handler: Any) -> None:
        """Append *handler* to the chain of *message_type*.

        Args:
            message_type: Chain to register under.
            handler: Any object providing some of ``init``, ``process``
                and ``done``.

        Raises:
            InvalidTypeError: If *message_type* is not a :class:`MessageType`.
            ConfigError: If one of the handler's options is already registered.
        """
        if not MessageType.is_valid(message_type):
            raise InvalidTypeError(f"Invalid message type: {message_type!r}")
        chain = self._chains[MessageType(message_type)]

        options = getattr(handler, "options", ())
        if options:
            self._options.register_set(options)
        chain.append(handler)
        logger.debug(
            "Registered handler %s for %s messages",
            _handler_name(handler),
            MessageType(message_type).name,
        )

    def chain(self, message_type: MessageType | int) -> tuple[Any, ...]:
        """Return a snapshot of the handlers registered for *message_type*.

        Raises:
            InvalidTypeError: If *message_type* is not a :class:`MessageType`.
        """
        if not MessageType.is_valid(message_type):
            raise InvalidTypeError(f"Invalid message type: {message_type!r}")
        return tuple(self._chains[MessageType(message_type)])

    def iter_handlers(self) -> Iterator[Any]:
        """Yield every handler, in type order then registration order."""
        for message_type in MessageType:
            yield from self._chains[message_type]

    def __len__(self) -> int:
        return sum(len(chain) for chain in self._chains.values())

    def load_entry_points(self, group: str = ENTRY_POINT_GROUP) -> list[str]:
        """Instantiate and register handlers advertised by installed packages.

        Each entry point must resolve to a handler class (or zero-argument
        factory). Its ``message_type`` attribute selects the chain and
        defaults to TEXT. Errors during individual entry-point loading are
        logged as warnings but do not prevent other handlers from loading.

        Returns:
            Names of the entry points that were registered.
        """
        try:
            eps = importlib.metadata.entry_points(group=group)
        except Exception:  # Intentional: must not crash on broken metadata
            logger.warning("Failed to load entry points for %s", group, exc_info=True)
            return []

        loaded: list[str] = []
        for ep in eps:
            try:
                factory = ep.load()
                handler = factory()
                message_type = getattr(handler, "message_type", MessageType.TEXT)
                self.add(message_type, handler)
            except Exception:  # Intentional: one bad plugin must not block others
                logger.warning(
                    "Failed to load log handler entry point %r: %s",
                    ep.name,
                    ep.value,
                    exc_info=True,
                )
                continue
            loaded.append(ep.name)
        return loaded


def _handler_name(handler: Any) -> str:
    return getattr(handler, "name", None) or type(handler).__name__
