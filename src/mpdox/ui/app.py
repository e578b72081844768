"""Main interactive loop: keys in, protocol calls out, redraw."""

from contextlib import contextmanager
from enum import Enum
from time import monotonic
from typing import Iterator, Optional

from blessed import Terminal
from loguru import logger

from mpdox.core.config import Config
from mpdox.core.output import LogBuffer
from mpdox.keys import GlobalAction, Key, KeyResolver, Scope, key_from_keystroke
from mpdox.mpd import MpdAckError, MpdClient, MpdConnectionError, MpdDecodeError, Status

from .render import render, viewport_height
from .screens import (
    AlbumsScreen,
    ArtistsScreen,
    DirectoriesScreen,
    LogsScreen,
    NoSelectionError,
    PlaylistsScreen,
    QueueScreen,
    Screen,
    ScreenContext,
)
from .state import KeyHandleResult, SharedUiState

SEEK_STEP = 5.0  # seconds
MAX_RECONNECT_ATTEMPTS = 5
RECONNECT_INTERVAL = 2.0  # seconds between reconnect attempts
IDLE_TIMEOUT = 1.0  # redraw interval when status polling is off


class App:
    """Owns the screens and the loop. Single-threaded: key handling and status ticks alternate."""

    def __init__(self, client: MpdClient, config: Config, log_buffer: LogBuffer):
        self.client = client
        self.config = config
        self.ui = SharedUiState()
        self.resolver = KeyResolver(config.keybinds)

        ctx = ScreenContext(client=client, config=config, ui=self.ui)
        self.screens: list[Screen] = [
            QueueScreen(ctx),
            DirectoriesScreen(ctx),
            ArtistsScreen(ctx),
            AlbumsScreen(ctx),
            PlaylistsScreen(ctx),
            LogsScreen(ctx, log_buffer),
        ]
        self.active = 0
        self.running = True

        interval_ms = config.status_update_interval_ms
        self.status_interval: Optional[float] = interval_ms / 1000 if interval_ms > 0 else None
        self._next_status = 0.0
        self.reconnect_attempts = 0
        self._next_reconnect = 0.0

    @property
    def screen(self) -> Screen:
        return self.screens[self.active]

    # ========================================================================
    # LOOP
    # ========================================================================

    def run(self, term: Optional[Terminal] = None) -> None:
        term = term or Terminal()
        with term.fullscreen(), term.raw(), term.hidden_cursor():
            self.main_loop(term)

    def main_loop(self, term: Terminal) -> None:
        logger.info("UI started")
        self.refresh_status()
        with self.guarded():
            self.screen.resize(viewport_height(term, self.screen))
            self.screen.activate()

        while self.running:
            self.screen.resize(viewport_height(term, self.screen))
            render(term, self.screens, self.active, self.ui, self.config.ui)

            keystroke = term.inkey(timeout=self._wait_timeout())
            key = key_from_keystroke(keystroke)
            if key is not None:
                self.dispatch(key)

            if not term.kbhit(timeout=0):
                with self.guarded():
                    self.screen.run_pending()

            self.tick()

        logger.info("UI stopped")

    def _wait_timeout(self) -> float:
        if self.status_interval is None:
            return IDLE_TIMEOUT
        return max(0.0, min(IDLE_TIMEOUT, self._next_status - monotonic()))

    def tick(self) -> None:
        """Periodic work: reconnect when disconnected, otherwise poll status when due."""
        now = monotonic()
        if not self.client.connected:
            if now >= self._next_reconnect:
                self.try_reconnect()
            return
        if self.status_interval is not None and now >= self._next_status:
            self.refresh_status()

    # ========================================================================
    # ERRORS AND CONNECTION
    # ========================================================================

    @contextmanager
    def guarded(self) -> Iterator[None]:
        """Recover from per-action failures; only setup failures are fatal."""
        try:
            yield
        except NoSelectionError as e:
            self.ui.error(str(e))
        except MpdConnectionError as e:
            self.connection_lost(e)
        except (MpdAckError, MpdDecodeError) as e:
            self.ui.error(str(e))

    def connection_lost(self, error: MpdConnectionError) -> None:
        logger.error(f"Connection lost: {error}")
        self.ui.connected = False
        self.ui.error(f"Connection lost: {error}")
        self._next_reconnect = monotonic() + RECONNECT_INTERVAL

    def try_reconnect(self) -> None:
        """One bounded reconnect attempt."""
        if self.reconnect_attempts >= MAX_RECONNECT_ATTEMPTS:
            return
        self.reconnect_attempts += 1
        self._next_reconnect = monotonic() + RECONNECT_INTERVAL
        logger.info(f"Reconnect attempt {self.reconnect_attempts}/{MAX_RECONNECT_ATTEMPTS}")
        try:
            self.client.reconnect()
        except MpdConnectionError as e:
            logger.warning(f"Reconnect failed: {e}")
            if self.reconnect_attempts >= MAX_RECONNECT_ATTEMPTS:
                self.ui.error(
                    f"Giving up after {MAX_RECONNECT_ATTEMPTS} reconnect attempts", timeout=3600
                )
            return

        self.reconnect_attempts = 0
        self.ui.connected = True
        self.ui.info("Reconnected")
        self.refresh_status()
        for screen in self.screens:
            screen.loaded = False
        with self.guarded():
            self.screen.activate()

    def refresh_status(self) -> None:
        if self.status_interval is not None:
            self._next_status = monotonic() + self.status_interval
        if not self.client.connected:
            return
        previous = self.ui.status
        with self.guarded():
            status, song = self.client.refresh()
            self.ui.status = status
            self.ui.current_song = song
            if status.error and status.error != previous.error:
                self.ui.error(f"Player error: {status.error}")
            for screen in self.screens:
                screen.on_status(previous, status)

    # ========================================================================
    # KEYS
    # ========================================================================

    def dispatch(self, key: Key) -> None:
        screen = self.screen
        with self.guarded():
            if screen.capturing_input:
                screen.capture_key(key)
                return

            resolved = self.resolver.resolve(screen.scope, key)
            if resolved is None:
                if screen.handle_key(key) is KeyHandleResult.UNHANDLED:
                    logger.debug(f"Unbound key {key} on {screen.title}")
                return

            if resolved.scope is Scope.GLOBAL:
                try:
                    self.handle_global(resolved.action)
                except MpdAckError as e:
                    action = resolved.action.value.replace("_", " ")
                    self.ui.error(f"Cannot {action}: {e.ack.message}")
            elif screen.handle_action(resolved.action) is KeyHandleResult.UNHANDLED:
                logger.debug(f"{resolved.action} not handled on {screen.title}")

    def switch_tab(self, delta: int) -> None:
        self.active = (self.active + delta) % len(self.screens)
        self.screen.activate()

    def handle_global(self, action: Enum) -> None:
        client = self.client
        status: Status = self.ui.status
        match action:
            case GlobalAction.QUIT:
                self.running = False
                return
            case GlobalAction.NEXT_TAB:
                self.switch_tab(1)
                return
            case GlobalAction.PREVIOUS_TAB:
                self.switch_tab(-1)
                return
            case GlobalAction.NEXT_TRACK:
                client.next()
            case GlobalAction.PREVIOUS_TRACK:
                client.previous()
            case GlobalAction.STOP:
                client.stop()
            case GlobalAction.TOGGLE_PAUSE:
                client.toggle_pause()
            case GlobalAction.TOGGLE_REPEAT:
                client.set_repeat(not status.repeat)
            case GlobalAction.TOGGLE_RANDOM:
                client.set_random(not status.random)
            case GlobalAction.TOGGLE_SINGLE:
                client.set_single(not status.single_enabled)
            case GlobalAction.TOGGLE_CONSUME:
                client.set_consume(not status.consume)
            case GlobalAction.SEEK_FORWARD:
                client.seek_current(SEEK_STEP)
            case GlobalAction.SEEK_BACK:
                client.seek_current(-SEEK_STEP)
            case GlobalAction.VOLUME_UP | GlobalAction.VOLUME_DOWN:
                if status.volume < 0:
                    self.ui.error("Volume control is not available")
                    return
                step = self.config.volume_step
                if action is GlobalAction.VOLUME_DOWN:
                    step = -step
                client.set_volume(status.volume + step)
            case _:
                return
        self.refresh_status()


def run_interactive_ui(client: MpdClient, config: Config, log_buffer: LogBuffer) -> None:
    """Run the main interactive UI until the user quits."""
    App(client, config, log_buffer).run()
