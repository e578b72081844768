"""Screen base class and the context every screen is built with."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from loguru import logger

from mpdox.core.config import Config
from mpdox.keys import Key, Scope
from mpdox.mpd import MpdAckError, MpdClient, MpdDecodeError, Status

from ..state import KeyHandleResult, SharedUiState


class NoSelectionError(Exception):
    """An action needs a selected entry but the list is empty."""


@dataclass
class ScreenContext:
    client: MpdClient
    config: Config
    ui: SharedUiState


class Screen(ABC):
    """One tab of the interface.

    The app resolves keys in ``scope`` and hands screen and navigation actions
    to ``handle_action``; keys no table binds go to ``handle_key``.
    """

    title: str = ""
    scope: Scope = Scope.NAVIGATION

    def __init__(self, ctx: ScreenContext):
        self.ctx = ctx
        self.loaded = False

    @property
    def client(self) -> MpdClient:
        return self.ctx.client

    @property
    def ui(self) -> SharedUiState:
        return self.ctx.ui

    def activate(self) -> None:
        """Called whenever the screen becomes the visible tab."""
        if not self.loaded:
            self.reload()

    def reload(self) -> None:
        """Fetch the screen's root content from the server."""
        self.loaded = True

    @property
    def capturing_input(self) -> bool:
        """True while a text field takes raw keys ahead of key resolution."""
        return False

    def capture_key(self, key: Key) -> None:
        pass

    @abstractmethod
    def handle_action(self, action: Enum) -> KeyHandleResult: ...

    def handle_key(self, key: Key) -> KeyHandleResult:
        return KeyHandleResult.UNHANDLED

    def on_status(self, previous: Status, status: Status) -> None:
        """Called after every status refresh."""

    def resize(self, height: int) -> None:
        """Body height available to the screen, in rows."""

    def run_pending(self) -> None:
        """Deferred work (previews), run once no key is waiting."""

    @contextmanager
    def reporting(self, context: str) -> Iterator[None]:
        """Turn a rejected or garbled request into a status-line error prefixed with ``context``.

        Connection loss propagates so the app can reconnect.
        """
        try:
            yield
        except (MpdAckError, MpdDecodeError) as e:
            logger.warning(f"{context}: {e}")
            self.ui.error(f"{context}: {e}")
