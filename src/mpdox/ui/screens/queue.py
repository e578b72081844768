"""Queue tab: the songs of the play queue."""

from enum import Enum

from loguru import logger

from mpdox.keys import QueueAction, Scope
from mpdox.mpd import Song, Status

from ..dirstack import Entry, Leaf
from ..state import KeyHandleResult
from .base import NoSelectionError
from .browser import BrowserScreen, song_entries


class QueueScreen(BrowserScreen):
    """Single-level browser over ``playlistinfo``, reloaded whenever the queue version changes."""

    title = "Queue"
    scope = Scope.QUEUE

    def fetch_root(self) -> list[Entry]:
        return song_entries(self.client.playlist_info())

    def _refresh(self, select: int | None = None) -> None:
        self.stack.replace_items(self.fetch_root())
        if select is not None:
            self.stack.select(select)
        self.request_preview()

    def on_status(self, previous: Status, status: Status) -> None:
        if self.loaded and status.playlist != previous.playlist:
            logger.debug(f"Queue version {previous.playlist} -> {status.playlist}, reloading")
            with self.reporting("Cannot reload the queue"):
                self._refresh()

    def _targets(self) -> list[Song]:
        """Marked songs, or the selected one when nothing is marked."""
        entries = self.stack.marked_entries() or [self.require_selection()]
        return [entry.song for entry in entries if isinstance(entry, Leaf)]

    # ========================================================================
    # NAVIGATION HOOKS
    # ========================================================================

    def descend(self, entry: Entry) -> None:
        if isinstance(entry, Leaf):
            self._play(entry.song)

    def ascend(self) -> None:
        pass

    def add_entries(self, entries: list[Entry]) -> None:
        self.ui.info("Already in the queue")

    def move_entry(self, entry: Entry, delta: int) -> KeyHandleResult:
        if not isinstance(entry, Leaf):
            return KeyHandleResult.UNHANDLED
        song = entry.song
        target = song.pos + delta
        if target < 0 or target >= len(self.stack.top.items):
            return KeyHandleResult.HANDLED
        with self.reporting(f"Cannot move '{song.display_title}'"):
            self.client.move_id(song.id, target)
            self._refresh(select=target)
        return KeyHandleResult.HANDLED

    # ========================================================================
    # QUEUE ACTIONS
    # ========================================================================

    def _play(self, song: Song) -> None:
        with self.reporting(f"Cannot play '{song.display_title}'"):
            self.client.play_id(song.id)

    def _delete(self) -> None:
        songs = self._targets()
        with self.reporting("Cannot remove from the queue"):
            for song in songs:
                self.client.delete_id(song.id)
            self._refresh()
            self.ui.info(f"Removed {len(songs)} song(s) from the queue")

    def _clear(self) -> None:
        with self.reporting("Cannot clear the queue"):
            self.client.clear()
            self._refresh()
            self.ui.info("Queue cleared")

    def _save(self, name: str) -> None:
        name = name.strip()
        if not name:
            return
        with self.reporting(f"Cannot save playlist '{name}'"):
            self.client.save_playlist(name)
            self.ui.info(f"Saved the queue as '{name}'")

    def _add_to_playlist(self, songs: list[Song], name: str) -> None:
        name = name.strip()
        if not name:
            return
        with self.reporting(f"Cannot add to playlist '{name}'"):
            for song in songs:
                self.client.playlist_add(name, song.file)
            self.stack.clear_marks()
            self.ui.info(f"Added {len(songs)} song(s) to '{name}'")

    def handle_action(self, action: Enum) -> KeyHandleResult:
        match action:
            case QueueAction.PLAY:
                entry = self.require_selection()
                self.descend(entry)
            case QueueAction.DELETE:
                self._delete()
            case QueueAction.DELETE_ALL:
                self._clear()
            case QueueAction.SAVE:
                self.ask("Save queue as", self._save)
            case QueueAction.ADD_TO_PLAYLIST:
                songs = self._targets()
                if not songs:
                    raise NoSelectionError("Nothing selected in Queue")
                self.ask("Add to playlist", lambda name: self._add_to_playlist(songs, name))
            case _:
                return super().handle_action(action)
        return KeyHandleResult.HANDLED
