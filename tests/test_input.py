"""Tests for one-line text editing."""

from mpdox.keys import Key, Modifiers
from mpdox.ui.input import EditOutcome, edit_line


class TestEditLine:
    """Test key handling of the input line."""

    def test_typing_appends(self) -> None:
        assert edit_line("ab", Key("c")) == ("abc", EditOutcome.EDITING)
        assert edit_line("ab", Key("C", Modifiers.SHIFT)) == ("abC", EditOutcome.EDITING)
        assert edit_line("ab", Key(" ")) == ("ab ", EditOutcome.EDITING)

    def test_command_letters_are_text(self) -> None:
        """Keys bound to actions elsewhere are plain characters here."""
        assert edit_line("", Key("q")) == ("q", EditOutcome.EDITING)

    def test_backspace(self) -> None:
        assert edit_line("abc", Key("Backspace")) == ("ab", EditOutcome.EDITING)
        assert edit_line("abc", Key("h", Modifiers.CONTROL)) == ("ab", EditOutcome.EDITING)
        assert edit_line("", Key("Backspace")) == ("", EditOutcome.EDITING)

    def test_kill_line_and_word(self) -> None:
        assert edit_line("abc def", Key("u", Modifiers.CONTROL)) == ("", EditOutcome.EDITING)
        assert edit_line("abc def", Key("w", Modifiers.CONTROL)) == ("abc", EditOutcome.EDITING)
        assert edit_line("abc", Key("w", Modifiers.CONTROL)) == ("", EditOutcome.EDITING)

    def test_submit_and_cancel(self) -> None:
        assert edit_line("abc", Key("Enter")) == ("abc", EditOutcome.SUBMIT)
        assert edit_line("abc", Key("Esc")) == ("abc", EditOutcome.CANCEL)
        assert edit_line("abc", Key("c", Modifiers.CONTROL)) == ("abc", EditOutcome.CANCEL)

    def test_other_keys_ignored(self) -> None:
        assert edit_line("abc", Key("Up")) == ("abc", EditOutcome.EDITING)
        assert edit_line("abc", Key("x", Modifiers.ALT)) == ("abc", EditOutcome.EDITING)
