"""Tests for the rows the renderer draws."""

from unittest.mock import patch

import pytest
from blessed import Terminal

from mpdox.core.config import Config, UIConfig
from mpdox.mpd import MpdClient, Song
from mpdox.ui.dirstack import Container, DirStack, Leaf
from mpdox.ui.render import render_browser, render_queue, visible_rows
from mpdox.ui.screens import AlbumsScreen, QueueScreen, ScreenContext
from mpdox.ui.state import SharedUiState


@pytest.fixture
def term() -> Terminal:
    # no styling: formatting calls return plain text
    return Terminal(force_styling=None)


def make_ctx(config: Config = Config()) -> ScreenContext:
    return ScreenContext(client=MpdClient("127.0.0.1:6600"), config=config, ui=SharedUiState())


def written(write_at) -> dict[int, str]:
    """Last content written to each row."""
    return {call.args[2]: call.args[3] for call in write_at.call_args_list}


class TestVisibleRows:
    """Test which entries fill the viewport."""

    def test_highlight_mode_keeps_every_entry(self) -> None:
        stack = DirStack.from_items([Container("Alpha"), Container("Beta")])
        stack.set_filter("lpha")
        assert visible_rows(stack, 10, hide_unmatched=False) == [
            (0, Container("Alpha")),
            (1, Container("Beta")),
        ]

    def test_hidden_mode_keeps_original_indices(self) -> None:
        stack = DirStack.from_items(
            [Container("Alpha"), Container("Beta"), Container("Gamma alpha")]
        )
        stack.set_filter("lpha")
        assert visible_rows(stack, 10, hide_unmatched=True) == [
            (0, Container("Alpha")),
            (2, Container("Gamma alpha")),
        ]

    def test_hidden_mode_scrolls_to_selection(self) -> None:
        stack = DirStack.from_items(
            [Container("Alpha"), Container("Beta"), Container("Gamma alpha")]
        )
        stack.set_filter("lpha")
        stack.select(2)
        assert visible_rows(stack, 1, hide_unmatched=True) == [(2, Container("Gamma alpha"))]

    def test_empty_filter_hides_nothing(self) -> None:
        stack = DirStack.from_items([Container("Alpha"), Container("Beta")])
        stack.set_filter("")
        assert len(visible_rows(stack, 10, hide_unmatched=True)) == 2


class TestRenderBrowser:
    """Test the middle column under a filter."""

    def make_screen(self, config: Config) -> AlbumsScreen:
        screen = AlbumsScreen(make_ctx(config))
        screen.stack = DirStack.from_items(
            [Container("Alpha"), Container("Beta"), Container("Gamma alpha")]
        )
        screen.stack.set_filter("lpha")
        return screen

    def test_unmatched_entries_hidden(self, term: Terminal) -> None:
        config = Config(ui=UIConfig(hide_unmatched=True))
        with patch("mpdox.ui.render.write_at") as write_at:
            render_browser(term, self.make_screen(config), 0, 5, config.ui)
        text = "".join(written(write_at).values())
        assert "Alpha" in text
        assert "Gamma alpha" in text
        assert "Beta" not in text

    def test_unmatched_entries_shown_by_default(self, term: Terminal) -> None:
        config = Config()
        with patch("mpdox.ui.render.write_at") as write_at:
            render_browser(term, self.make_screen(config), 0, 5, config.ui)
        assert "Beta" in "".join(written(write_at).values())


class TestRenderQueue:
    """Test queue table rows."""

    def test_rows_without_a_song_are_blanked(self, term: Terminal) -> None:
        """A row that holds no song is cleared, so the previous frame never shows through."""
        screen = QueueScreen(make_ctx())
        screen.stack = DirStack.from_items(
            [
                Leaf(Song(file="a.mp3", title="A")),
                Container("stray"),
                Leaf(Song(file="b.mp3", title="B")),
            ]
        )
        with patch("mpdox.ui.render.write_at") as write_at:
            render_queue(term, screen, SharedUiState(), 0, 5, UIConfig())
        rows = written(write_at)
        assert "A" in rows[1]
        assert rows[2] == ""
        assert "B" in rows[3]
        assert rows[4] == ""
