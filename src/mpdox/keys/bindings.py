"""Key bindings: the (key code, modifiers) pair, its config syntax and blessed translation.

Config syntax:
    "q"          plain character
    "G"          upper-case letters imply Shift
    "<Enter>"    named key (see NAMED_KEYS)
    "<Space>"    the space bar
    "<C-d>"      Ctrl+d; prefixes C- (Ctrl), A- (Alt), S- (Shift) can be stacked
"""

from enum import Flag, auto
from typing import NamedTuple, Optional

from blessed.keyboard import Keystroke


class Modifiers(Flag):
    NONE = 0
    SHIFT = auto()
    CONTROL = auto()
    ALT = auto()


class Key(NamedTuple):
    """A key code plus modifier mask.

    ``code`` is either a single character or one of NAMED_KEYS.
    """

    code: str
    modifiers: Modifiers = Modifiers.NONE

    def __str__(self) -> str:
        return format_key_spec(self)


# Canonical names of non-character keys
NAMED_KEYS = (
    "Enter",
    "Esc",
    "Backspace",
    "Delete",
    "Tab",
    "BackTab",
    "Up",
    "Down",
    "Left",
    "Right",
    "Home",
    "End",
    "PageUp",
    "PageDown",
    "Insert",
)
_NAMED_BY_LOWER = {name.lower(): name for name in NAMED_KEYS}

_MODIFIER_PREFIXES = {
    "C": Modifiers.CONTROL,
    "A": Modifiers.ALT,
    "S": Modifiers.SHIFT,
}

# blessed key names -> canonical names
_BLESSED_NAMES = {
    "KEY_ENTER": "Enter",
    "KEY_ESCAPE": "Esc",
    "KEY_BACKSPACE": "Backspace",
    "KEY_DELETE": "Delete",
    "KEY_TAB": "Tab",
    "KEY_BTAB": "BackTab",
    "KEY_UP": "Up",
    "KEY_DOWN": "Down",
    "KEY_LEFT": "Left",
    "KEY_RIGHT": "Right",
    "KEY_HOME": "Home",
    "KEY_END": "End",
    "KEY_PGUP": "PageUp",
    "KEY_PGDOWN": "PageDown",
    "KEY_INSERT": "Insert",
}

# Raw control characters that are keys in their own right, not Ctrl+letter
_RAW_NAMED = {
    "\r": "Enter",
    "\n": "Enter",
    "\t": "Tab",
    "\x1b": "Esc",
    "\x7f": "Backspace",
    "\x08": "Backspace",
}


def char_key(char: str, modifiers: Modifiers = Modifiers.NONE) -> Key:
    """Key for a typed character; upper-case letters carry Shift."""
    if char.isalpha() and char.isupper():
        modifiers |= Modifiers.SHIFT
    return Key(char, modifiers)


def parse_key_spec(spec: str) -> Key:
    """Parse the config syntax into a Key.

    Raises:
        ValueError: The spec names no known key
    """
    if len(spec) == 1:
        return char_key(spec)

    if not (spec.startswith("<") and spec.endswith(">") and len(spec) > 2):
        raise ValueError(f"Invalid key: {spec!r}")

    inner = spec[1:-1]
    modifiers = Modifiers.NONE
    while len(inner) > 2 and inner[1] == "-" and inner[0] in _MODIFIER_PREFIXES:
        modifiers |= _MODIFIER_PREFIXES[inner[0]]
        inner = inner[2:]

    if len(inner) == 1:
        return char_key(inner, modifiers)
    if inner.lower() == "space":
        return Key(" ", modifiers)
    if inner.lower() in _NAMED_BY_LOWER:
        return Key(_NAMED_BY_LOWER[inner.lower()], modifiers)
    raise ValueError(f"Unknown key name: {spec!r}")


def format_key_spec(key: Key) -> str:
    """Inverse of parse_key_spec, producing the shortest spelling."""
    modifiers = key.modifiers
    code = key.code

    if len(code) == 1 and code.isalpha() and code.isupper():
        modifiers &= ~Modifiers.SHIFT  # implied by the upper-case letter

    prefix = ""
    for letter, flag in _MODIFIER_PREFIXES.items():
        if modifiers & flag:
            prefix += f"{letter}-"

    if code == " ":
        return f"<{prefix}Space>"
    if len(code) == 1 and not prefix:
        return code
    return f"<{prefix}{code}>"


def key_from_keystroke(keystroke: Keystroke) -> Optional[Key]:
    """Translate a blessed Keystroke into a Key.

    Returns:
        The Key, or None for empty reads (timeouts) and sequences we don't bind
    """
    if not keystroke:
        return None

    if keystroke.is_sequence:
        name = _BLESSED_NAMES.get(keystroke.name or "")
        if name:
            return Key(name)
        text = str(keystroke)
        # Alt+char arrives as ESC followed by the character
        if len(text) == 2 and text[0] == "\x1b" and text[1].isprintable():
            return char_key(text[1], Modifiers.ALT)
        if text in _RAW_NAMED:
            return Key(_RAW_NAMED[text])
        return None

    char = str(keystroke)
    if char in _RAW_NAMED:
        return Key(_RAW_NAMED[char])
    if len(char) == 1 and "\x01" <= char <= "\x1a":
        return Key(chr(ord(char) + 96), Modifiers.CONTROL)
    if len(char) == 1 and char.isprintable():
        return char_key(char)
    return None
