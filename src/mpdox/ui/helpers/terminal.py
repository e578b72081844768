"""Positioned writes for the full-screen renderer."""

import sys

from blessed import Terminal


def write_at(term: Terminal, x: int, y: int, content: str, *, clear: bool = True) -> None:
    """Write ``content`` at column ``x``, row ``y``.

    With ``clear`` the rest of the row is erased first, so shorter text never
    leaves the tail of the previous frame behind. Columns drawn beside one
    another pass ``clear=False`` for all but the first.
    """
    prefix = term.move_xy(x, y)
    if clear:
        prefix += term.clear_eol
    sys.stdout.write(prefix + content)


def clear_rows(term: Terminal, y: int, count: int) -> None:
    """Blank ``count`` rows starting at ``y``."""
    for row in range(y, y + count):
        write_at(term, 0, row, "")


def fit(text: str, width: int) -> str:
    """Truncate or pad plain text to exactly ``width`` cells, marking cuts with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) > width:
        return text[: width - 1] + "…" if width > 1 else text[:1]
    return text.ljust(width)
