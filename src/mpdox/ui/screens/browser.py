"""Shared behaviour of every screen built on a navigation stack.

Subclasses own a position cursor (a small tagged union handled with
``match``) and implement the position-dependent hooks: ``fetch_root``,
``fetch_preview``, ``descend``, ``ascend`` and ``add_entries``. Everything
else (movement, filtering, marks, prompts, preview scheduling) lives here.
"""

from abc import abstractmethod
from enum import Enum
from typing import Callable, Iterable, Optional

from loguru import logger

from mpdox.keys import CommonAction, Key
from mpdox.mpd import Song

from ..dirstack import Container, DirStack, Entry, Leaf, Preview, PreviewTicket
from ..input import EditOutcome, Prompt, edit_line
from ..state import KeyHandleResult
from .base import NoSelectionError, Screen


def song_entries(songs: Iterable[Song]) -> list[Entry]:
    return [Leaf(song) for song in songs]


def describe(entries: list[Entry]) -> str:
    """Short human description of what an action applied to."""
    if len(entries) != 1:
        return f"{len(entries)} items"
    match entries[0]:
        case Container(name=name):
            return f"'{name}'"
        case Leaf(song=song):
            return f"'{song.display_title}'"
    return "1 item"


class BrowserScreen(Screen):
    """A screen whose content is a DirStack."""

    def __init__(self, ctx):
        super().__init__(ctx)
        self.stack = DirStack()
        self.filter_editing = False
        self.prompt: Optional[Prompt] = None
        self._pending_preview: Optional[tuple[PreviewTicket, Entry]] = None

    # ========================================================================
    # HOOKS
    # ========================================================================

    @abstractmethod
    def fetch_root(self) -> list[Entry]:
        """Entries of the shallowest position."""

    def reset_position(self) -> None:
        """Return the position cursor to its initial state."""

    def fetch_preview(self, entry: Entry) -> Optional[Preview]:
        """Children of a container. Only called for containers."""
        return None

    @abstractmethod
    def descend(self, entry: Entry) -> None: ...

    @abstractmethod
    def ascend(self) -> None: ...

    @abstractmethod
    def add_entries(self, entries: list[Entry]) -> None:
        """Append the given entries to the queue."""

    def delete_entry(self, entry: Entry) -> KeyHandleResult:
        return KeyHandleResult.UNHANDLED

    def rename_entry(self, entry: Entry) -> KeyHandleResult:
        return KeyHandleResult.UNHANDLED

    def move_entry(self, entry: Entry, delta: int) -> KeyHandleResult:
        return KeyHandleResult.UNHANDLED

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    def reload(self) -> None:
        with self.reporting(f"Cannot load {self.title.lower()}"):
            items = self.fetch_root()
            self.reset_position()
            self.stack.reset(items)
            self.loaded = True
            self.request_preview()

    def resize(self, height: int) -> None:
        self.stack.set_viewport_height(height)

    def require_selection(self) -> Entry:
        entry = self.stack.selected_entry()
        if entry is None:
            raise NoSelectionError(f"Nothing selected in {self.title}")
        return entry

    # ========================================================================
    # PREVIEW
    # ========================================================================

    def request_preview(self) -> None:
        """Schedule a preview of the selected entry, superseding any pending one.

        Songs preview as themselves right away; containers are fetched by
        ``run_pending`` once input goes idle.
        """
        ticket = self.stack.begin_preview()
        entry = self.stack.selected_entry()
        self._pending_preview = None
        match entry:
            case None:
                self.stack.apply_preview(ticket, None)
            case Leaf(song=song):
                self.stack.apply_preview(ticket, song)
            case Container():
                self.stack.apply_preview(ticket, None)
                self._pending_preview = (ticket, entry)

    def run_pending(self) -> None:
        pending, self._pending_preview = self._pending_preview, None
        if pending is None:
            return
        ticket, entry = pending
        with self.reporting("Cannot load preview"):
            content = self.fetch_preview(entry)
            if not self.stack.apply_preview(ticket, content):
                logger.debug(f"Dropped stale preview for {entry}")

    # ========================================================================
    # TEXT INPUT
    # ========================================================================

    @property
    def capturing_input(self) -> bool:
        return self.filter_editing or self.prompt is not None

    @property
    def hiding_unmatched(self) -> bool:
        """True while a filter is active and the config hides entries that fail it."""
        return self.ctx.config.ui.hide_unmatched and bool(self.stack.filter)

    def ask(self, label: str, on_submit: Callable[[str], None], initial: str = "") -> None:
        self.prompt = Prompt(label=label, on_submit=on_submit, text=initial)

    def capture_key(self, key: Key) -> None:
        if self.prompt is not None:
            text, outcome = edit_line(self.prompt.text, key)
            match outcome:
                case EditOutcome.SUBMIT:
                    prompt, self.prompt = self.prompt, None
                    prompt.on_submit(text)
                case EditOutcome.CANCEL:
                    self.prompt = None
                case EditOutcome.EDITING:
                    self.prompt.text = text
            return

        text, outcome = edit_line(self.stack.filter or "", key)
        match outcome:
            case EditOutcome.SUBMIT:
                self.filter_editing = False
                if text:
                    self.stack.commit_filter()
                    self.request_preview()
                else:
                    self.stack.clear_filter()
            case EditOutcome.CANCEL:
                self.filter_editing = False
                self.stack.clear_filter()
            case EditOutcome.EDITING:
                self.stack.set_filter(text)

    # ========================================================================
    # ACTIONS
    # ========================================================================

    def _selection_key(self) -> tuple[int, Optional[int]]:
        return id(self.stack.top), self.stack.top.selected

    def handle_action(self, action: Enum) -> KeyHandleResult:
        before = self._selection_key()
        result = self._dispatch(action)
        if self._selection_key() != before:
            self.request_preview()
        return result

    def _dispatch(self, action: Enum) -> KeyHandleResult:
        stack = self.stack
        match action:
            case CommonAction.UP if self.hiding_unmatched:
                stack.jump_back()
            case CommonAction.DOWN if self.hiding_unmatched:
                stack.jump_forward()
            case CommonAction.UP:
                stack.prev()
            case CommonAction.DOWN:
                stack.next()
            case CommonAction.TOP:
                stack.first()
            case CommonAction.BOTTOM:
                stack.last()
            case CommonAction.DOWN_HALF:
                stack.next_half_viewport()
            case CommonAction.UP_HALF:
                stack.prev_half_viewport()
            case CommonAction.RIGHT | CommonAction.CONFIRM:
                self.descend(self.require_selection())
            case CommonAction.LEFT:
                self.ascend()
            case CommonAction.ENTER_SEARCH:
                stack.set_filter("")
                self.filter_editing = True
            case CommonAction.FOCUS_INPUT:
                if stack.filter is None:
                    stack.set_filter("")
                self.filter_editing = True
            case CommonAction.NEXT_RESULT:
                stack.jump_forward()
            case CommonAction.PREVIOUS_RESULT:
                stack.jump_back()
            case CommonAction.CLOSE:
                stack.clear_filter()
                stack.clear_marks()
            case CommonAction.SELECT:
                stack.toggle_mark()
                stack.next()
            case CommonAction.ADD:
                entries = stack.marked_entries() or [self.require_selection()]
                self.add_entries(entries)
                stack.clear_marks()
            case CommonAction.DELETE:
                return self.delete_entry(self.require_selection())
            case CommonAction.RENAME:
                return self.rename_entry(self.require_selection())
            case CommonAction.MOVE_UP:
                return self.move_entry(self.require_selection(), -1)
            case CommonAction.MOVE_DOWN:
                return self.move_entry(self.require_selection(), 1)
            case _:
                return KeyHandleResult.UNHANDLED
        return KeyHandleResult.HANDLED
