"""Albums tab: every album, then the songs of one album."""

from dataclasses import dataclass
from typing import Optional

from mpdox.keys import Scope
from mpdox.mpd import Filter, Song

from ..dirstack import Container, Entry, Leaf, Preview
from .browser import BrowserScreen, describe, song_entries


@dataclass(frozen=True)
class AlbumScope:
    """Listing all albums."""


@dataclass(frozen=True)
class SongScope:
    album: str


AlbumsPosition = AlbumScope | SongScope


class AlbumsScreen(BrowserScreen):
    title = "Albums"
    scope = Scope.ALBUMS

    def __init__(self, ctx):
        super().__init__(ctx)
        self.position: AlbumsPosition = AlbumScope()

    def _songs(self, album: str) -> list[Song]:
        return self.client.find([Filter("Album", album)])

    def reset_position(self) -> None:
        self.position = AlbumScope()

    def fetch_root(self) -> list[Entry]:
        return [Container(album) for album in self.client.list_tag("Album") if album]

    def fetch_preview(self, entry: Entry) -> Optional[Preview]:
        match self.position, entry:
            case AlbumScope(), Container(name=album):
                return song_entries(self._songs(album))
        return None

    def descend(self, entry: Entry) -> None:
        match self.position, entry:
            case AlbumScope(), Container(name=album):
                with self.reporting(f"Cannot list songs of '{album}'"):
                    self.stack.push(song_entries(self._songs(album)))
                    self.position = SongScope(album)
            case SongScope(), Leaf():
                self.add_entries([entry])

    def ascend(self) -> None:
        match self.position:
            case SongScope():
                self.stack.pop()
                self.position = AlbumScope()

    def add_entries(self, entries: list[Entry]) -> None:
        with self.reporting("Cannot add to the queue"):
            uris = []
            for entry in entries:
                match entry:
                    case Container(name=album):
                        self.client.find_add([Filter("Album", album)])
                    case Leaf(song=song):
                        uris.append(song.file)
            if uris:
                self.client.add_many(uris)
            self.ui.info(f"Added {describe(entries)} to the queue")
