"""Keybindings and key resolution."""

from .actions import (
    SCOPE_ACTIONS,
    AlbumsAction,
    ArtistsAction,
    CommonAction,
    DirectoriesAction,
    GlobalAction,
    LogsAction,
    PlaylistsAction,
    QueueAction,
    Scope,
)
from .bindings import Key, Modifiers, format_key_spec, key_from_keystroke, parse_key_spec
from .resolver import KeyConfig, KeyResolver, ResolvedAction, build_key_config

__all__ = [
    "SCOPE_ACTIONS",
    "AlbumsAction",
    "ArtistsAction",
    "CommonAction",
    "DirectoriesAction",
    "GlobalAction",
    "Key",
    "KeyConfig",
    "KeyResolver",
    "LogsAction",
    "Modifiers",
    "PlaylistsAction",
    "QueueAction",
    "ResolvedAction",
    "Scope",
    "build_key_config",
    "format_key_spec",
    "key_from_keystroke",
    "parse_key_spec",
]
