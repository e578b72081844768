"""One-line text input shared by the filter line and prompts.

Text input captures raw keys before key resolution: while a filter or prompt
is being edited, "q" is a letter, not quit.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from mpdox.keys import Key, Modifiers


class EditOutcome(Enum):
    EDITING = auto()
    SUBMIT = auto()
    CANCEL = auto()


def edit_line(text: str, key: Key) -> tuple[str, EditOutcome]:
    """Apply one keypress to ``text``. Returns (new_text, outcome)."""
    match key:
        case Key("Enter", _):
            return text, EditOutcome.SUBMIT
        case Key("Esc", _) | Key("c", Modifiers.CONTROL):
            return text, EditOutcome.CANCEL
        case Key("Backspace", _) | Key("h", Modifiers.CONTROL):
            return text[:-1], EditOutcome.EDITING
        case Key("u", Modifiers.CONTROL):
            return "", EditOutcome.EDITING
        case Key("w", Modifiers.CONTROL):
            return text.rstrip().rpartition(" ")[0], EditOutcome.EDITING
        case Key(code, modifiers) if len(code) == 1 and not (
            modifiers & (Modifiers.CONTROL | Modifiers.ALT)
        ):
            return text + code, EditOutcome.EDITING
    return text, EditOutcome.EDITING


@dataclass
class Prompt:
    """A pending question; ``on_submit`` receives the entered text on Enter."""

    label: str
    on_submit: Callable[[str], None]
    text: str = ""
