"""Tests for option schemas and help rendering."""

from __future__ import annotations

import pytest

from benchlog.exceptions import ConfigError
from benchlog.options import LogOption, OptionKind, OptionRegistry


def _opt(name: str, kind: OptionKind = OptionKind.INT, default: str = "1") -> LogOption:
    return LogOption(name=name, description=f"{name} help", default=default, kind=kind)


class TestOptionRegistry:
    def test_register_and_get(self) -> None:
        registry = OptionRegistry()
        option = _opt("threads")
        registry.register_set([option])
        assert registry.get("threads") is option
        assert "threads" in registry
        assert len(registry) == 1

    def test_registration_order_is_kept(self) -> None:
        registry = OptionRegistry()
        registry.register_set([_opt("b"), _opt("a")])
        registry.register_set([_opt("c")])
        assert [o.name for o in registry] == ["b", "a", "c"]

    def test_identical_option_is_shared(self) -> None:
        registry = OptionRegistry()
        registry.register_set([_opt("a")])
        registry.register_set([_opt("a"), _opt("b")])
        assert [o.name for o in registry] == ["a", "b"]

    def test_conflicting_definition_rejected_atomically(self) -> None:
        registry = OptionRegistry()
        registry.register_set([_opt("a")])
        with pytest.raises(ConfigError, match="different definition"):
            registry.register_set([_opt("b"), _opt("a", default="2")])
        assert "b" not in registry
        assert registry.get("a").default == "1"

    def test_identical_repeat_within_set(self) -> None:
        registry = OptionRegistry()
        registry.register_set([_opt("a"), _opt("a")])
        assert len(registry) == 1

    def test_conflict_within_set_rejected(self) -> None:
        registry = OptionRegistry()
        with pytest.raises(ConfigError):
            registry.register_set([_opt("a"), _opt("a", OptionKind.BOOL)])
        assert len(registry) == 0

    def test_get_unknown_raises_key_error(self) -> None:
        with pytest.raises(KeyError, match="nope"):
            OptionRegistry().get("nope")

    def test_defaults(self) -> None:
        registry = OptionRegistry()
        registry.register_set([_opt("a", default="3"), _opt("b", OptionKind.BOOL, "off")])
        assert registry.defaults() == {"a": "3", "b": "off"}


class TestFormatHelp:
    def test_empty(self) -> None:
        assert OptionRegistry().format_help() == ""

    def test_lines_are_aligned(self) -> None:
        registry = OptionRegistry()
        registry.register_set(
            [
                _opt("verbosity", OptionKind.INT, "3"),
                _opt("histogram", OptionKind.BOOL, "off"),
            ]
        )
        lines = registry.format_help().splitlines()
        assert lines[0].startswith("  --verbosity=N ")
        assert lines[0].endswith("verbosity help [3]")
        assert lines[1].startswith("  --histogram=[on|off] ")
        assert lines[1].endswith("histogram help [off]")
        assert lines[0].index("verbosity help") == lines[1].index("histogram help")

    def test_subset(self) -> None:
        registry = OptionRegistry()
        a, b = _opt("a"), _opt("b")
        registry.register_set([a, b])
        text = registry.format_help([b])
        assert "--b=N" in text
        assert "--a=N" not in text

    def test_list_usage_token(self) -> None:
        assert _opt("percentile", OptionKind.LIST).usage == "--percentile=[LIST,...]"
