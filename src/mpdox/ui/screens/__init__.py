"""Screens, one per tab."""

from .albums import AlbumsScreen
from .artists import ArtistsScreen
from .base import NoSelectionError, Screen, ScreenContext
from .browser import BrowserScreen
from .directories import DirectoriesScreen
from .logs import LogsScreen
from .playlists import PlaylistsScreen
from .queue import QueueScreen

__all__ = [
    "AlbumsScreen",
    "ArtistsScreen",
    "BrowserScreen",
    "DirectoriesScreen",
    "LogsScreen",
    "NoSelectionError",
    "PlaylistsScreen",
    "QueueScreen",
    "Screen",
    "ScreenContext",
]
