"""Semantic actions, grouped by the keybinding scope they belong to.

Enum values double as the action names used in the ``[keybinds.<scope>]``
tables of config.toml.
"""

from enum import Enum


class Scope(Enum):
    """A keybinding namespace."""

    GLOBAL = "global"
    NAVIGATION = "navigation"
    QUEUE = "queue"
    DIRECTORIES = "directories"
    ARTISTS = "artists"
    ALBUMS = "albums"
    PLAYLISTS = "playlists"
    LOGS = "logs"


class GlobalAction(Enum):
    QUIT = "quit"
    NEXT_TRACK = "next_track"
    PREVIOUS_TRACK = "previous_track"
    STOP = "stop"
    TOGGLE_REPEAT = "toggle_repeat"
    TOGGLE_RANDOM = "toggle_random"
    TOGGLE_SINGLE = "toggle_single"
    TOGGLE_CONSUME = "toggle_consume"
    TOGGLE_PAUSE = "toggle_pause"
    SEEK_FORWARD = "seek_forward"
    SEEK_BACK = "seek_back"
    VOLUME_DOWN = "volume_down"
    VOLUME_UP = "volume_up"
    NEXT_TAB = "next_tab"
    PREVIOUS_TAB = "previous_tab"


class CommonAction(Enum):
    """Navigation actions shared by every browsing screen."""

    UP = "up"
    DOWN = "down"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    RIGHT = "right"
    LEFT = "left"
    DOWN_HALF = "down_half"
    UP_HALF = "up_half"
    BOTTOM = "bottom"
    TOP = "top"
    ENTER_SEARCH = "enter_search"
    NEXT_RESULT = "next_result"
    PREVIOUS_RESULT = "previous_result"
    SELECT = "select"
    ADD = "add"
    DELETE = "delete"
    RENAME = "rename"
    CLOSE = "close"
    CONFIRM = "confirm"
    FOCUS_INPUT = "focus_input"


class QueueAction(Enum):
    DELETE = "delete"
    DELETE_ALL = "delete_all"
    PLAY = "play"
    SAVE = "save"
    ADD_TO_PLAYLIST = "add_to_playlist"


class LogsAction(Enum):
    CLEAR = "clear"


class AlbumsAction(Enum):
    """No album-specific actions yet; the scope exists so users can bind some later."""


class ArtistsAction(Enum):
    pass


class DirectoriesAction(Enum):
    pass


class PlaylistsAction(Enum):
    pass


# Action enum accepted in each scope's table
SCOPE_ACTIONS: dict[Scope, type[Enum]] = {
    Scope.GLOBAL: GlobalAction,
    Scope.NAVIGATION: CommonAction,
    Scope.QUEUE: QueueAction,
    Scope.DIRECTORIES: DirectoriesAction,
    Scope.ARTISTS: ArtistsAction,
    Scope.ALBUMS: AlbumsAction,
    Scope.PLAYLISTS: PlaylistsAction,
    Scope.LOGS: LogsAction,
}
