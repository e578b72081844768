"""Artists tab: artist, then their albums, then the songs of one album."""

from dataclasses import dataclass
from typing import Optional

from mpdox.keys import Scope
from mpdox.mpd import Filter

from ..dirstack import Container, Entry, Leaf, Preview
from .browser import BrowserScreen, describe, song_entries


@dataclass(frozen=True)
class ArtistScope:
    pass


@dataclass(frozen=True)
class AlbumScope:
    artist: str


@dataclass(frozen=True)
class SongScope:
    artist: str
    album: str


ArtistsPosition = ArtistScope | AlbumScope | SongScope


def album_filters(artist: str, album: str) -> list[Filter]:
    return [Filter("Artist", artist), Filter("Album", album)]


class ArtistsScreen(BrowserScreen):
    title = "Artists"
    scope = Scope.ARTISTS

    def __init__(self, ctx):
        super().__init__(ctx)
        self.position: ArtistsPosition = ArtistScope()

    def _albums(self, artist: str) -> list[Entry]:
        albums = self.client.list_tag("Album", [Filter("Artist", artist)])
        return [Container(album) for album in albums]

    def reset_position(self) -> None:
        self.position = ArtistScope()

    def fetch_root(self) -> list[Entry]:
        return [Container(artist) for artist in self.client.list_tag("Artist") if artist]

    def fetch_preview(self, entry: Entry) -> Optional[Preview]:
        match self.position, entry:
            case ArtistScope(), Container(name=artist):
                return self._albums(artist)
            case AlbumScope(artist=artist), Container(name=album):
                return song_entries(self.client.find(album_filters(artist, album)))
        return None

    def descend(self, entry: Entry) -> None:
        match self.position, entry:
            case ArtistScope(), Container(name=artist):
                with self.reporting(f"Cannot list albums of '{artist}'"):
                    self.stack.push(self._albums(artist))
                    self.position = AlbumScope(artist)
            case AlbumScope(artist=artist), Container(name=album):
                with self.reporting(f"Cannot list songs of '{album}'"):
                    songs = self.client.find(album_filters(artist, album))
                    self.stack.push(song_entries(songs))
                    self.position = SongScope(artist, album)
            case SongScope(), Leaf():
                self.add_entries([entry])

    def ascend(self) -> None:
        match self.position:
            case AlbumScope():
                self.stack.pop()
                self.position = ArtistScope()
            case SongScope(artist=artist):
                self.stack.pop()
                self.position = AlbumScope(artist)

    def add_entries(self, entries: list[Entry]) -> None:
        with self.reporting("Cannot add to the queue"):
            uris = []
            for entry in entries:
                match self.position, entry:
                    case ArtistScope(), Container(name=artist):
                        self.client.find_add([Filter("Artist", artist)])
                    case AlbumScope(artist=artist), Container(name=album):
                        self.client.find_add(album_filters(artist, album))
                    case _, Leaf(song=song):
                        uris.append(song.file)
            if uris:
                self.client.add_many(uris)
            self.ui.info(f"Added {describe(entries)} to the queue")
