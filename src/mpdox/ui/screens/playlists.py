"""Playlists tab: stored playlists, then the songs of one playlist."""

from dataclasses import dataclass
from typing import Optional

from mpdox.keys import Scope

from ..dirstack import Container, Entry, Leaf, Preview
from ..state import KeyHandleResult
from .browser import BrowserScreen, describe, song_entries


@dataclass(frozen=True)
class PlaylistScope:
    pass


@dataclass(frozen=True)
class SongScope:
    playlist: str


PlaylistsPosition = PlaylistScope | SongScope


class PlaylistsScreen(BrowserScreen):
    title = "Playlists"
    scope = Scope.PLAYLISTS

    def __init__(self, ctx):
        super().__init__(ctx)
        self.position: PlaylistsPosition = PlaylistScope()

    def reset_position(self) -> None:
        self.position = PlaylistScope()

    def fetch_root(self) -> list[Entry]:
        return [Container(name) for name in sorted(self.client.list_playlists())]

    def fetch_preview(self, entry: Entry) -> Optional[Preview]:
        match self.position, entry:
            case PlaylistScope(), Container(name=name):
                return song_entries(self.client.list_playlist_info(name))
        return None

    def descend(self, entry: Entry) -> None:
        match self.position, entry:
            case PlaylistScope(), Container(name=name):
                with self.reporting(f"Cannot open playlist '{name}'"):
                    self.stack.push(song_entries(self.client.list_playlist_info(name)))
                    self.position = SongScope(name)
            case SongScope(), Leaf():
                self.add_entries([entry])

    def ascend(self) -> None:
        match self.position:
            case SongScope():
                self.stack.pop()
                self.position = PlaylistScope()

    def add_entries(self, entries: list[Entry]) -> None:
        with self.reporting("Cannot add to the queue"):
            uris = []
            for entry in entries:
                match entry:
                    case Container(name=name):
                        self.client.load_playlist(name)
                    case Leaf(song=song):
                        uris.append(song.file)
            if uris:
                self.client.add_many(uris)
            self.ui.info(f"Added {describe(entries)} to the queue")

    # ========================================================================
    # PLAYLIST MANAGEMENT
    # ========================================================================

    def _refresh_playlists(self, select: Optional[str] = None) -> None:
        names = sorted(self.client.list_playlists())
        self.stack.replace_items([Container(name) for name in names])
        if select in names:
            self.stack.select(names.index(select))
        self.request_preview()

    def rename_entry(self, entry: Entry) -> KeyHandleResult:
        match self.position, entry:
            case PlaylistScope(), Container(name=old_name):
                pass
            case _:
                return KeyHandleResult.UNHANDLED

        def rename(new_name: str) -> None:
            new_name = new_name.strip()
            if not new_name or new_name == old_name:
                return
            with self.reporting(f"Cannot rename '{old_name}'"):
                self.client.rename_playlist(old_name, new_name)
                self._refresh_playlists(select=new_name)
                self.ui.info(f"Renamed '{old_name}' to '{new_name}'")

        self.ask("Rename to", rename, initial=old_name)
        return KeyHandleResult.HANDLED

    def delete_entry(self, entry: Entry) -> KeyHandleResult:
        match self.position, entry:
            case PlaylistScope(), Container(name=name):
                pass
            case _:
                return KeyHandleResult.UNHANDLED

        def delete(answer: str) -> None:
            if answer.strip().lower() not in ("y", "yes"):
                return
            with self.reporting(f"Cannot delete '{name}'"):
                self.client.delete_playlist(name)
                self._refresh_playlists()
                self.ui.info(f"Deleted playlist '{name}'")

        self.ask(f"Delete playlist '{name}'? [y/N]", delete)
        return KeyHandleResult.HANDLED
