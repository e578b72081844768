"""Directories tab: the music directory tree as the server sees it."""

from typing import Optional

from mpdox.keys import Scope
from mpdox.mpd import Directory, Song

from ..dirstack import Container, Entry, Leaf, Preview
from .browser import BrowserScreen, describe


def listing_entries(listing: list[Directory | Song]) -> list[Entry]:
    entries: list[Entry] = []
    for item in listing:
        match item:
            case Directory(path=path):
                entries.append(Container(item.name, path=path))
            case Song():
                entries.append(Leaf(item))
    return entries


class DirectoriesScreen(BrowserScreen):
    """Path-based browsing: the position is the path of the top level."""

    title = "Directories"
    scope = Scope.DIRECTORIES

    def __init__(self, ctx):
        super().__init__(ctx)
        self.path: list[str] = []

    def reset_position(self) -> None:
        self.path = []

    def fetch_root(self) -> list[Entry]:
        return listing_entries(self.client.lsinfo())

    def fetch_preview(self, entry: Entry) -> Optional[Preview]:
        match entry:
            case Container(path=path):
                return listing_entries(self.client.lsinfo(path))
        return None

    def descend(self, entry: Entry) -> None:
        match entry:
            case Container(path=path):
                with self.reporting(f"Cannot open '{path}'"):
                    self.stack.push(listing_entries(self.client.lsinfo(path)))
                    self.path.append(path)
            case Leaf():
                self.add_entries([entry])

    def ascend(self) -> None:
        if self.path:
            self.stack.pop()
            self.path.pop()

    def add_entries(self, entries: list[Entry]) -> None:
        uris = []
        for entry in entries:
            match entry:
                case Container() as container:
                    uris.append(container.value)
                case Leaf(song=song):
                    uris.append(song.file)
        with self.reporting("Cannot add to the queue"):
            self.client.add_many(uris)
            self.ui.info(f"Added {describe(entries)} to the queue")
