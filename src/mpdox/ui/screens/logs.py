"""Logs tab: recent log lines from the in-memory sink."""

from enum import Enum

from mpdox.core.output import LogBuffer
from mpdox.keys import CommonAction, LogsAction, Scope

from ..helpers.scrolling import calculate_scroll_offset, clamp_selection, half_viewport
from ..state import KeyHandleResult
from .base import Screen, ScreenContext


class LogsScreen(Screen):
    """Scrollable view of a LogBuffer. Follows new lines while the cursor is on the last one."""

    title = "Logs"
    scope = Scope.LOGS

    def __init__(self, ctx: ScreenContext, buffer: LogBuffer):
        super().__init__(ctx)
        self.buffer = buffer
        self.lines: list[str] = []
        self.selected: int | None = None
        self.offset = 0
        self.height = 20
        self._seen_version = -1

    def reload(self) -> None:
        self.sync()
        self.loaded = True

    def activate(self) -> None:
        self.reload()

    def sync(self) -> None:
        """Pick up lines written since the last sync."""
        if self.buffer.version == self._seen_version:
            return
        following = self.selected is None or self.selected >= len(self.lines) - 1
        self.lines = self.buffer.lines()
        self._seen_version = self.buffer.version
        if following:
            self._select(len(self.lines) - 1)
        else:
            self._select(self.selected or 0)

    def resize(self, height: int) -> None:
        self.height = max(1, height)
        self._select(self.selected or 0)

    def run_pending(self) -> None:
        self.sync()

    def _select(self, index: int) -> None:
        self.selected = clamp_selection(index, len(self.lines))
        self.offset = calculate_scroll_offset(
            self.selected, self.offset, self.height, len(self.lines)
        )

    def handle_action(self, action: Enum) -> KeyHandleResult:
        current = self.selected or 0
        match action:
            case LogsAction.CLEAR:
                self.buffer.clear()
                self.sync()
            case CommonAction.UP:
                self._select(current - 1)
            case CommonAction.DOWN:
                self._select(current + 1)
            case CommonAction.TOP:
                self._select(0)
            case CommonAction.BOTTOM:
                self._select(len(self.lines) - 1)
            case CommonAction.DOWN_HALF:
                self._select(current + half_viewport(self.height))
            case CommonAction.UP_HALF:
                self._select(current - half_viewport(self.height))
            case _:
                return KeyHandleResult.UNHANDLED
        return KeyHandleResult.HANDLED
