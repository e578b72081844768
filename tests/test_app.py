"""Tests for key dispatch, global actions and connection recovery in the app loop."""

import pytest

from mpdox.core.config import Config
from mpdox.core.output import LogBuffer
from mpdox.keys import Key
from mpdox.mpd import MpdClient
from mpdox.ui.app import MAX_RECONNECT_ATTEMPTS, App
from mpdox.ui.screens import DirectoriesScreen, LogsScreen, QueueScreen
from mpdox.ui.state import MessageLevel


@pytest.fixture
def app(client: MpdClient) -> App:
    return App(client, Config(), LogBuffer())


def lose_connection(mpd_server, app: App) -> None:
    mpd_server.hangup_on.add("ping")
    with app.guarded():
        app.client.ping()
    mpd_server.hangup_on.clear()


class TestDispatch:
    """Test how keys reach the app and the screens."""

    def test_quit(self, app: App) -> None:
        app.dispatch(Key("q"))
        assert not app.running

    def test_filter_input_captures_command_keys(self, app: App) -> None:
        """While the filter line is open, 'q' is filter text rather than quit."""
        app.dispatch(Key("/"))
        app.dispatch(Key("q"))
        assert app.running
        assert isinstance(app.screen, QueueScreen)
        assert app.screen.stack.filter == "q"
        app.dispatch(Key("Esc"))
        app.dispatch(Key("q"))
        assert not app.running

    def test_tab_switching_wraps(self, mpd_server, app: App) -> None:
        app.dispatch(Key("Right"))
        assert isinstance(app.screen, DirectoriesScreen)
        assert "lsinfo" in mpd_server.received
        app.dispatch(Key("Left"))
        app.dispatch(Key("Left"))
        assert isinstance(app.screen, LogsScreen)

    def test_unbound_key_is_ignored(self, mpd_server, app: App) -> None:
        before = list(mpd_server.received)
        app.dispatch(Key("F8"))
        assert app.running
        assert mpd_server.received == before


class TestGlobalActions:
    """Test playback actions and their error reporting."""

    def test_toggle_repeat(self, mpd_server, app: App) -> None:
        """Mode toggles send the inverse of the last known state, then refresh."""
        app.dispatch(Key("z"))
        assert "repeat 1" in mpd_server.received
        assert mpd_server.received[-1] == "command_list_end"

    def test_toggle_uses_current_state(self, mpd_server, app: App) -> None:
        mpd_server.responses["status"] = "repeat: 1\nrandom: 1\n"
        app.refresh_status()
        app.dispatch(Key("z"))
        app.dispatch(Key("x"))
        assert "repeat 0" in mpd_server.received
        assert "random 0" in mpd_server.received

    def test_rejected_action_message(self, mpd_server, app: App) -> None:
        mpd_server.responses["next"] = "ACK [55@0] {next} Not playing"
        app.dispatch(Key(">"))
        assert app.ui.message.level is MessageLevel.ERROR
        assert app.ui.message.text == "Cannot next track: Not playing"
        assert app.client.connected

    def test_volume_steps(self, mpd_server, app: App) -> None:
        mpd_server.responses["status"] = "volume: 50\n"
        app.refresh_status()
        app.dispatch(Key("."))
        assert "setvol 55" in mpd_server.received

    def test_volume_without_mixer(self, mpd_server, app: App) -> None:
        app.refresh_status()
        app.dispatch(Key("."))
        assert not any(line.startswith("setvol") for line in mpd_server.received)
        assert app.ui.message.text == "Volume control is not available"

    def test_player_error_surfaces(self, mpd_server, app: App) -> None:
        mpd_server.responses["status"] = "error: Failed to decode a.mp3\n"
        app.refresh_status()
        assert app.ui.message.text == "Player error: Failed to decode a.mp3"


class TestConnection:
    """Test loss detection and bounded reconnect."""

    def test_lost_connection_marks_disconnected(self, mpd_server, app: App) -> None:
        lose_connection(mpd_server, app)
        assert not app.ui.connected
        assert app.ui.message.text.startswith("Connection lost")

    def test_reconnect_restores_state(self, mpd_server, app: App) -> None:
        """After a reconnect every screen reloads from the server."""
        app.screen.activate()
        lose_connection(mpd_server, app)
        app._next_reconnect = 0.0
        app.tick()
        assert app.client.connected
        assert app.ui.connected
        assert app.reconnect_attempts == 0
        assert mpd_server.connections == 2
        assert mpd_server.received[-1] == "playlistinfo"

    def test_reconnect_gives_up(self, mpd_server, app: App) -> None:
        lose_connection(mpd_server, app)
        mpd_server.stop()
        for _ in range(MAX_RECONNECT_ATTEMPTS + 2):
            app.try_reconnect()
        assert app.reconnect_attempts == MAX_RECONNECT_ATTEMPTS
        assert not app.client.connected
        assert app.ui.message.text.startswith("Giving up")
