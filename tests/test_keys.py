"""Tests for key specs, keystroke translation and layered resolution."""

import pytest
from blessed.keyboard import Keystroke

from mpdox.keys import (
    CommonAction,
    GlobalAction,
    Key,
    KeyResolver,
    LogsAction,
    Modifiers,
    QueueAction,
    Scope,
    build_key_config,
    format_key_spec,
    key_from_keystroke,
    parse_key_spec,
)
from mpdox.keys.resolver import resolution_chain


class TestKeySpecs:
    """Test the config key syntax."""

    @pytest.mark.parametrize(
        "spec, expected",
        [
            ("q", Key("q")),
            ("G", Key("G", Modifiers.SHIFT)),
            ("<Enter>", Key("Enter")),
            ("<Space>", Key(" ")),
            ("<C-d>", Key("d", Modifiers.CONTROL)),
            ("<A-x>", Key("x", Modifiers.ALT)),
            ("<S-Tab>", Key("Tab", Modifiers.SHIFT)),
            ("<C-A-Up>", Key("Up", Modifiers.CONTROL | Modifiers.ALT)),
            ("<pagedown>", Key("PageDown")),
        ],
    )
    def test_parse(self, spec: str, expected: Key) -> None:
        assert parse_key_spec(spec) == expected

    @pytest.mark.parametrize("spec", ["", "<>", "<Nope>", "ab", "<C-Nope>"])
    def test_invalid_specs(self, spec: str) -> None:
        with pytest.raises(ValueError):
            parse_key_spec(spec)

    def test_format_is_shortest_spelling(self) -> None:
        """Shift on an upper-case letter is implied and not written."""
        assert format_key_spec(Key("G", Modifiers.SHIFT)) == "G"
        assert format_key_spec(Key("d", Modifiers.CONTROL)) == "<C-d>"
        assert format_key_spec(Key(" ")) == "<Space>"
        assert str(Key("Esc")) == "<Esc>"


class TestKeystrokes:
    """Test blessed Keystroke translation."""

    def test_printable_character(self) -> None:
        assert key_from_keystroke(Keystroke("j")) == Key("j")
        assert key_from_keystroke(Keystroke("J")) == Key("J", Modifiers.SHIFT)

    def test_named_sequence(self) -> None:
        keystroke = Keystroke("\x1b[A", code=259, name="KEY_UP")
        assert key_from_keystroke(keystroke) == Key("Up")

    def test_control_characters(self) -> None:
        """Raw mode delivers Ctrl+letter as control bytes."""
        assert key_from_keystroke(Keystroke("\x04")) == Key("d", Modifiers.CONTROL)
        assert key_from_keystroke(Keystroke("\x03")) == Key("c", Modifiers.CONTROL)
        assert key_from_keystroke(Keystroke("\r")) == Key("Enter")
        assert key_from_keystroke(Keystroke("\x7f")) == Key("Backspace")

    def test_timeout_is_no_key(self) -> None:
        assert key_from_keystroke(Keystroke("")) is None


class TestResolution:
    """Test scope priority and user overrides."""

    def test_chain_order(self) -> None:
        assert resolution_chain(Scope.QUEUE) == (Scope.QUEUE, Scope.NAVIGATION, Scope.GLOBAL)
        assert resolution_chain(Scope.GLOBAL) == (Scope.GLOBAL,)

    def test_screen_binding_shadows_navigation(self) -> None:
        """Enter plays on the queue but confirms elsewhere."""
        resolver = KeyResolver(build_key_config())
        assert resolver.resolve(Scope.QUEUE, Key("Enter")).action is QueueAction.PLAY
        assert resolver.resolve(Scope.ALBUMS, Key("Enter")).action is CommonAction.CONFIRM

    def test_screen_binding_shadows_global(self) -> None:
        """A screen table wins over the global table for the same key."""
        config = build_key_config({Scope.LOGS: {LogsAction.CLEAR: [Key("q")]}})
        resolver = KeyResolver(config)
        resolved = resolver.resolve(Scope.LOGS, Key("q"))
        assert resolved.scope is Scope.LOGS
        assert resolved.action is LogsAction.CLEAR
        assert resolver.resolve(Scope.QUEUE, Key("q")).action is GlobalAction.QUIT

    def test_falls_through_to_global(self) -> None:
        resolver = KeyResolver(build_key_config())
        resolved = resolver.resolve(Scope.DIRECTORIES, Key("p"))
        assert resolved.scope is Scope.GLOBAL
        assert resolved.action is GlobalAction.TOGGLE_PAUSE

    def test_unbound_key(self) -> None:
        resolver = KeyResolver(build_key_config())
        assert resolver.resolve(Scope.ALBUMS, Key("F", Modifiers.SHIFT)) is None

    def test_user_override_replaces_exact_key_only(self) -> None:
        """Rebinding one key leaves the action's other keys and other scopes alone."""
        config = build_key_config({Scope.NAVIGATION: {CommonAction.TOP: [Key("k")]}})
        navigation = config.table(Scope.NAVIGATION)
        assert navigation[Key("k")] is CommonAction.TOP
        assert navigation[Key("Up")] is CommonAction.UP
        assert navigation[Key("g")] is CommonAction.TOP
        assert dict(config.table(Scope.GLOBAL)) == dict(build_key_config().table(Scope.GLOBAL))

    def test_distinct_scopes_distinct_actions(self) -> None:
        """Actions with the same name in different scopes are different actions."""
        assert QueueAction.DELETE != CommonAction.DELETE
