"""Navigation stack for hierarchical browsing.

A DirStack is a stack of levels from the root listing down to the current
depth. Only the top level is mutated by navigation. Every level keeps its own
selection, viewport offset, filter and preview slot, so popping back to a
parent restores exactly what the user left there.

The stack never performs I/O. The owning screen fetches entries before
``push`` and fills the preview slot through ``begin_preview`` /
``apply_preview``; a preview result whose ticket has been superseded is
dropped instead of being applied out of order.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from mpdox.mpd.types import Song

from .helpers.scrolling import calculate_scroll_offset, clamp_selection, half_viewport

DEFAULT_VIEWPORT_HEIGHT = 20


@dataclass(frozen=True)
class Container:
    """A browsable bucket: a tag value, a directory, a stored playlist.

    Attributes:
        name: Text shown to the user
        path: Server-side key when it differs from the name (directory path)
    """

    name: str
    path: str = ""

    @property
    def value(self) -> str:
        return self.path or self.name


@dataclass(frozen=True)
class Leaf:
    """A playable item."""

    song: Song


Entry = Container | Leaf

# Preview slot content: the children of the selected container, or the song itself
Preview = list[Entry] | Song


def display_text(entry: Entry) -> str:
    """Text an entry is shown and filtered by."""
    match entry:
        case Container(name=name):
            return name
        case Leaf(song=song):
            return song.display_title
    raise TypeError(f"Not an entry: {entry!r}")


@dataclass(eq=False)
class Level:
    """One depth of the browse hierarchy."""

    items: list[Entry]
    selected: Optional[int] = None
    offset: int = 0
    filter: Optional[str] = None
    preview: Optional[Preview] = None
    preview_serial: int = 0  # serial of the last preview ticket issued
    marked: set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.selected = clamp_selection(0, len(self.items))


class PreviewTicket(NamedTuple):
    level: Level
    serial: int


@dataclass
class DirStack:
    """Stack of navigation levels. Never empty."""

    levels: list[Level] = field(default_factory=lambda: [Level(items=[])])
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT
    _serial: int = field(default=0, repr=False)

    @classmethod
    def from_items(cls, items: list[Entry]) -> "DirStack":
        return cls(levels=[Level(items=list(items))])

    # ========================================================================
    # STRUCTURE
    # ========================================================================

    @property
    def depth(self) -> int:
        return len(self.levels)

    @property
    def top(self) -> Level:
        return self.levels[-1]

    @property
    def parent(self) -> Optional[Level]:
        return self.levels[-2] if len(self.levels) > 1 else None

    def push(self, items: list[Entry]) -> Level:
        """Add a level holding already-fetched entries; selects the first one."""
        level = Level(items=list(items))
        self.levels.append(level)
        return level

    def pop(self) -> Optional[Level]:
        """Drop the top level. The root level is never popped."""
        if len(self.levels) <= 1:
            return None
        return self.levels.pop()

    def reset(self, items: list[Entry]) -> None:
        """Discard every level and start over from a new root listing."""
        self.levels = [Level(items=list(items))]

    def replace_items(self, items: list[Entry]) -> None:
        """Swap the top level's entries in place, keeping the selection where possible."""
        level = self.top
        level.items = list(items)
        level.marked.clear()
        if level.selected is None:
            level.selected = clamp_selection(0, len(level.items))
        else:
            level.selected = clamp_selection(level.selected, len(level.items))
        self._follow_selection()

    def current(self) -> tuple[list[Entry], Optional[int]]:
        """Top level's full entry list and selection index."""
        return self.top.items, self.top.selected

    def selected_entry(self) -> Optional[Entry]:
        level = self.top
        if level.selected is None:
            return None
        return level.items[level.selected]

    # ========================================================================
    # MOVEMENT
    # ========================================================================

    def set_viewport_height(self, height: int) -> None:
        self.viewport_height = max(1, height)
        self._follow_selection()

    def _follow_selection(self) -> None:
        level = self.top
        level.offset = calculate_scroll_offset(
            level.selected, level.offset, self.viewport_height, len(level.items)
        )

    def select(self, index: int) -> None:
        """Select ``index``, clamped to the list."""
        level = self.top
        level.selected = clamp_selection(index, len(level.items))
        self._follow_selection()

    def move(self, delta: int) -> None:
        """Shift the selection by ``delta``, clamped to the ends."""
        selected = self.top.selected
        if selected is None:
            return
        self.select(selected + delta)

    def next(self) -> None:
        self.move(1)

    def prev(self) -> None:
        self.move(-1)

    def first(self) -> None:
        self.select(0)

    def last(self) -> None:
        self.select(len(self.top.items) - 1)

    def next_half_viewport(self) -> None:
        self.move(half_viewport(self.viewport_height))

    def prev_half_viewport(self) -> None:
        self.move(-half_viewport(self.viewport_height))

    # ========================================================================
    # MARKS
    # ========================================================================

    def toggle_mark(self) -> None:
        """Mark or unmark the selected entry of the top level."""
        level = self.top
        if level.selected is None:
            return
        level.marked.symmetric_difference_update({level.selected})

    def marked_entries(self) -> list[Entry]:
        level = self.top
        return [entry for index, entry in enumerate(level.items) if index in level.marked]

    def clear_marks(self) -> None:
        self.top.marked.clear()

    # ========================================================================
    # FILTER
    # ========================================================================

    @property
    def filter(self) -> Optional[str]:
        return self.top.filter

    def set_filter(self, text: Optional[str]) -> None:
        self.top.filter = text

    def clear_filter(self) -> None:
        self.top.filter = None

    def push_filter_char(self, char: str) -> None:
        self.top.filter = (self.top.filter or "") + char

    def pop_filter_char(self) -> None:
        if self.top.filter:
            self.top.filter = self.top.filter[:-1]

    def matches(self, entry: Entry) -> bool:
        """Case-sensitive substring match against the active filter."""
        text = self.top.filter
        return text is None or text in display_text(entry)

    def visible(self) -> list[Entry]:
        """Entries passing the filter, in list order. The level itself is untouched."""
        return [entry for entry in self.top.items if self.matches(entry)]

    def visible_indices(self) -> list[int]:
        """Indices of the top level's entries that pass the filter."""
        return [index for index, entry in enumerate(self.top.items) if self.matches(entry)]

    def commit_filter(self) -> None:
        """Select the first matching entry (selection unchanged if nothing matches)."""
        if not self.top.filter:
            return
        for index, entry in enumerate(self.top.items):
            if self.matches(entry):
                self.select(index)
                return

    def _jump(self, direction: int) -> None:
        level = self.top
        if not level.filter or not level.items:
            return
        total = len(level.items)
        start = level.selected if level.selected is not None else -direction
        for step in range(1, total + 1):
            index = (start + direction * step) % total
            if self.matches(level.items[index]):
                self.select(index)
                return

    def jump_forward(self) -> None:
        """Select the next match after the selection, wrapping past the end."""
        self._jump(1)

    def jump_back(self) -> None:
        """Select the previous match before the selection, wrapping past the start."""
        self._jump(-1)

    # ========================================================================
    # PREVIEW SLOT
    # ========================================================================

    @property
    def preview(self) -> Optional[Preview]:
        return self.top.preview

    def begin_preview(self) -> PreviewTicket:
        """Issue a ticket for a preview fetch on the top level, superseding older ones."""
        self._serial += 1
        level = self.top
        level.preview_serial = self._serial
        return PreviewTicket(level, self._serial)

    def apply_preview(self, ticket: PreviewTicket, content: Optional[Preview]) -> bool:
        """Store a fetched preview unless the ticket is stale.

        Returns:
            True if applied, False if a newer ticket exists or the level was popped
        """
        level = ticket.level
        if not any(candidate is level for candidate in self.levels):
            return False
        if level.preview_serial != ticket.serial:
            return False
        level.preview = content
        return True
