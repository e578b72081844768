"""Blessed UI helper functions."""

from .scrolling import calculate_scroll_offset, clamp_selection, half_viewport
from .terminal import clear_rows, fit, write_at

__all__ = [
    "calculate_scroll_offset",
    "clamp_selection",
    "clear_rows",
    "fit",
    "half_viewport",
    "write_at",
]
