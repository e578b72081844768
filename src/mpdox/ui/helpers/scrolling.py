"""Pure helper functions for selection and viewport arithmetic in list views."""

from typing import Optional


def clamp_selection(selection: int, total_items: int) -> Optional[int]:
    """Clamp a selection index to [0, total_items - 1].

    Returns None for an empty list, the only state in which nothing is selected.

    Examples:
        >>> clamp_selection(15, 10)
        9
        >>> clamp_selection(-5, 10)
        0
        >>> clamp_selection(3, 0) is None
        True
    """
    if total_items <= 0:
        return None
    return max(0, min(selection, total_items - 1))


def calculate_scroll_offset(
    selected: Optional[int],
    current_offset: int,
    visible_items: int,
    total_items: int,
) -> int:
    """Adjust the viewport offset so the selected item stays visible.

    The viewport only moves when the selection leaves it, and never scrolls past
    the end of the list.

    Args:
        selected: Selected index, None when the list is empty
        current_offset: Index of the first visible item
        visible_items: Viewport height in items
        total_items: Length of the list

    Returns:
        New offset

    Examples:
        >>> calculate_scroll_offset(15, 0, 10, 20)  # below viewport
        6
        >>> calculate_scroll_offset(2, 10, 10, 20)  # above viewport
        2
        >>> calculate_scroll_offset(5, 0, 10, 20)   # already visible
        0
    """
    if selected is None or total_items <= 0:
        return 0

    visible_items = max(1, visible_items)
    offset = current_offset

    if selected >= offset + visible_items:
        offset = selected - visible_items + 1
    elif selected < offset:
        offset = selected

    max_offset = max(0, total_items - visible_items)
    return max(0, min(offset, max_offset))


def half_viewport(visible_items: int) -> int:
    """Step size for half-page movement (Ctrl+D / Ctrl+U)."""
    return max(1, visible_items // 2)
