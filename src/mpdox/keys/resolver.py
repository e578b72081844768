"""Layered key resolution.

Each scope has one read-only table Key -> action. A keypress on a screen is
looked up in the screen's table, then in the navigation table, then in the
global table; the first hit wins.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Optional

from loguru import logger

from .actions import Scope
from .bindings import Key
from .defaults import DEFAULT_KEYBINDS

# Table lookup order, highest priority first
_CHAINS: dict[Scope, tuple[Scope, ...]] = {
    Scope.GLOBAL: (Scope.GLOBAL,),
    Scope.NAVIGATION: (Scope.NAVIGATION, Scope.GLOBAL),
}


def resolution_chain(scope: Scope) -> tuple[Scope, ...]:
    """Scopes consulted for a keypress in ``scope``, in priority order."""
    return _CHAINS.get(scope, (scope, Scope.NAVIGATION, Scope.GLOBAL))


class ResolvedAction(NamedTuple):
    scope: Scope
    action: Enum


@dataclass(frozen=True)
class KeyConfig:
    """Immutable per-scope keybinding tables."""

    tables: Mapping[Scope, Mapping[Key, Enum]]

    def table(self, scope: Scope) -> Mapping[Key, Enum]:
        return self.tables.get(scope, MappingProxyType({}))


def invert_bindings(bindings: Mapping[Enum, Iterable[Key]]) -> dict[Key, Enum]:
    """action -> keys  becomes  key -> action. Later registrations win."""
    table: dict[Key, Enum] = {}
    for action, keys in bindings.items():
        for key in keys:
            table[key] = action
    return table


def build_key_config(
    user_bindings: Optional[Mapping[Scope, Mapping[Enum, Iterable[Key]]]] = None,
) -> KeyConfig:
    """Merge user bindings over the defaults.

    A user binding replaces the default entry for that exact (key, modifiers)
    pair within the same scope. Other default keys of the same action, and
    every other scope, are left alone.
    """
    user_bindings = user_bindings or {}
    tables: dict[Scope, Mapping[Key, Enum]] = {}

    for scope in Scope:
        table = invert_bindings(DEFAULT_KEYBINDS.get(scope, {}))
        for key, action in invert_bindings(user_bindings.get(scope, {})).items():
            previous = table.get(key)
            if previous is not None and previous != action:
                logger.debug(
                    f"Keybind {key} in '{scope.value}' rebound: {previous.value} -> {action.value}"
                )
            table[key] = action
        tables[scope] = MappingProxyType(table)

    return KeyConfig(tables=MappingProxyType(tables))


class KeyResolver:
    """Resolve a keypress to an action through the scope chain."""

    def __init__(self, key_config: KeyConfig):
        self.key_config = key_config

    def resolve(self, scope: Scope, key: Key) -> Optional[ResolvedAction]:
        """Return the winning (scope, action), or None when no table binds ``key``."""
        for candidate in resolution_chain(scope):
            action = self.key_config.table(candidate).get(key)
            if action is not None:
                return ResolvedAction(candidate, action)
        return None
