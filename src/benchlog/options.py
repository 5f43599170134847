"""Declarative option schemas contributed by log handlers.

Each handler declares the options it reads at ``init()`` time as a tuple of
:class:`LogOption`. The :class:`OptionRegistry` collects them when a handler
is registered so the application can list them under ``Log options:`` in its
usage text. Parsing the command line itself is the application's business.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from benchlog.exceptions import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_VALUE_TOKENS = {
    "INT": "N",
    "LIST": "[LIST,...]",
    "BOOL": "[on|off]",
}


class OptionKind(enum.Enum):
    """Value type of a log option."""

    INT = "INT"
    LIST = "LIST"
    BOOL = "BOOL"


@dataclass(frozen=True, slots=True)
class LogOption:
    """A single named option read by a log handler.

    Attributes:
        name: Option name without leading dashes (e.g. ``'verbosity'``).
        description: One-line help text.
        default: Default value as it would appear on the command line.
        kind: Value type.
    """

    name: str
    description: str
    default: str
    kind: OptionKind

    @property
    def usage(self) -> str:
        """Return the ``--name=VALUE`` token shown in help output."""
        return f"--{self.name}={_VALUE_TOKENS[self.kind.value]}"


class OptionRegistry:
    """Ordered collection of option sets registered by handlers."""

    def __init__(self) -> None:
        self._options: dict[str, LogOption] = {}

    def register_set(self, options: Iterable[LogOption]) -> None:
        """Register every option of a handler.

        Handlers read the same config, so an option identical to one already
        registered is shared rather than added twice. The whole set is
        validated before anything is added.

        Raises:
            ConfigError: If an option name is already registered, or repeated
                within the set, with a different definition.
        """
        pending: dict[str, LogOption] = {}
        for option in options:
            known = self._options.get(option.name, pending.get(option.name))
            if known is not None and known != option:
                raise ConfigError(
                    f"Log option '{option.name}' is already registered with a different definition"
                )
            pending.setdefault(option.name, option)
        for name, option in pending.items():
            self._options.setdefault(name, option)

    def get(self, name: str) -> LogOption:
        """Return the option registered under *name*.

        Raises:
            KeyError: If *name* is not registered.
        """
        if name not in self._options:
            available = ", ".join(self._options) or "(none)"
            raise KeyError(f"Unknown log option '{name}'. Available: {available}")
        return self._options[name]

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __iter__(self) -> Iterator[LogOption]:
        return iter(self._options.values())

    def __len__(self) -> int:
        return len(self._options)

    def defaults(self) -> dict[str, str]:
        """Return ``{name: default}`` for every registered option."""
        return {option.name: option.default for option in self._options.values()}

    def format_help(self, options: Iterable[LogOption] | None = None) -> str:
        """Render options as aligned help lines.

        Args:
            options: Options to render. Defaults to every registered option.

        Returns:
            One ``"  --name=VALUE  description [default]"`` line per option,
            or an empty string when there is nothing to show.
        """
        items = list(self._options.values() if options is None else options)
        if not items:
            return ""
        width = max(len(option.usage) for option in items) + 2
        lines = [
            f"  {option.usage:<{width}}{option.description} [{option.default}]\n"
            for option in items
        ]
        return "".join(lines)
