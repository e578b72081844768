"""Rendering: draws the app state with blessed. Reads screens, never mutates them."""

import sys
from typing import Optional, Sequence

from blessed import Terminal

from mpdox.core.config import SymbolsConfig, UIConfig
from mpdox.mpd import Song

from .dirstack import Container, DirStack, Entry, Leaf, Level, display_text
from .helpers import calculate_scroll_offset, clear_rows, fit, write_at
from .screens import BrowserScreen, LogsScreen, QueueScreen, Screen
from .state import MessageLevel, SharedUiState

# Layout constants
HEADER_LINES = 4  # tabs + now playing + progress + separator
FOOTER_LINES = 2  # input + status message

STATE_ICONS = {"play": "▶", "pause": "⏸", "stop": "■"}


def body_height(term: Terminal) -> int:
    return max(1, term.height - HEADER_LINES - FOOTER_LINES)


def viewport_height(term: Terminal, screen: Screen) -> int:
    """Rows of list content the screen shows; the queue spends one on its table header."""
    height = body_height(term)
    if isinstance(screen, QueueScreen):
        return max(1, height - 1)
    return height


def format_time(seconds: float) -> str:
    """Format seconds as M:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def entry_label(entry: Entry, symbols: SymbolsConfig) -> str:
    match entry:
        case Container(name=name):
            return f"{symbols.dir} {name}"
        case Leaf(song=song):
            return f"{symbols.song} {song.display_title}"
    return str(entry)


def column_widths(total: int, percents: Sequence[int]) -> list[int]:
    """Split ``total`` cells by percentages; the last column takes the rounding remainder."""
    scale = sum(percents) or 1
    widths = [total * p // scale for p in percents[:-1]]
    widths.append(total - sum(widths))
    return widths


# ============================================================================
# HEADER
# ============================================================================


def render_tabs(term: Terminal, screens: Sequence[Screen], active: int, y: int) -> None:
    parts = []
    for index, screen in enumerate(screens):
        label = f" {screen.title} "
        parts.append(term.black_on_cyan(label) if index == active else term.cyan(label))
    write_at(term, 0, y, "".join(parts))


def render_now_playing(term: Terminal, ui: SharedUiState, y: int) -> None:
    status = ui.status
    icon = STATE_ICONS.get(status.state, "?")

    if not ui.connected:
        write_at(term, 0, y, term.bold_red("Disconnected"))
    elif ui.current_song is None or status.state == "stop":
        write_at(term, 0, y, term.white(f"{icon} Stopped"))
    else:
        song = ui.current_song
        artist = song.display_artist
        title = f"{artist} - {song.display_title}" if artist else song.display_title
        line = fit(f"{icon} {title}", max(1, term.width - 1)).rstrip()
        write_at(term, 0, y, term.bold_white(line))

    flags = "".join(
        letter if enabled else "-"
        for letter, enabled in (
            ("r", status.repeat),
            ("z", status.random),
            ("s", status.single_enabled),
            ("c", status.consume),
        )
    )
    volume = f"{status.volume}%" if status.volume >= 0 else "n/a"
    timing = f"{format_time(status.elapsed)}/{format_time(status.duration)}"

    bar_width = max(0, term.width - len(timing) - len(volume) - len(flags) - 12)
    filled = 0
    if status.duration > 0:
        filled = min(bar_width, int(bar_width * status.elapsed / status.duration))
    bar = term.cyan("━" * filled) + term.bright_black("─" * (bar_width - filled))
    write_at(term, 0, y + 1, f"{timing} {bar} vol {volume} [{flags}]")


# ============================================================================
# BODY
# ============================================================================


def visible_rows(stack: DirStack, height: int, hide_unmatched: bool) -> list[tuple[int, Entry]]:
    """The (index, entry) pairs shown in the top level's viewport.

    With ``hide_unmatched`` and a non-empty filter only matching entries are
    listed, scrolled so the selection stays in view when it matches. Indices
    always refer to the unfiltered level.
    """
    top = stack.top
    if not (hide_unmatched and top.filter):
        end = min(len(top.items), top.offset + height)
        return [(index, top.items[index]) for index in range(top.offset, end)]
    indices = stack.visible_indices()
    row = indices.index(top.selected) if top.selected in indices else None
    offset = calculate_scroll_offset(row, 0, height, len(indices))
    return [(index, top.items[index]) for index in indices[offset : offset + height]]


def _render_entries(
    term: Terminal,
    x: int,
    y: int,
    width: int,
    rows: Sequence[tuple[int, Entry]],
    selected: Optional[int],
    symbols: SymbolsConfig,
    active: bool,
    marked: frozenset[int] = frozenset(),
    highlight: Optional[str] = None,
) -> None:
    for row, (index, entry) in enumerate(rows):
        marker = symbols.marker if index in marked else " "
        text = fit(f"{marker}{entry_label(entry, symbols)}", width - 1) + " "
        if index == selected:
            text = term.reverse(text) if active else term.bold(text)
        elif highlight and highlight in display_text(entry):
            text = term.yellow(text)
        write_at(term, x, y + row, text, clear=False)


def _render_level(
    term: Terminal, level: Level, x: int, y: int, width: int, height: int, symbols: SymbolsConfig
) -> None:
    offset = calculate_scroll_offset(level.selected, level.offset, height, len(level.items))
    rows = list(enumerate(level.items))[offset : offset + height]
    _render_entries(term, x, y, width, rows, level.selected, symbols, active=False)


def _render_song_tags(
    term: Terminal, song: Song, x: int, y: int, width: int, height: int
) -> None:
    lines = [f"{key}: {value}" for key, value in song.tags] or [f"file: {song.file}"]
    for row, line in enumerate(lines[:height]):
        write_at(term, x, y + row, term.white(fit(line, width)), clear=False)


def render_browser(
    term: Terminal, screen: BrowserScreen, y: int, height: int, ui_config: UIConfig
) -> None:
    """Three columns: parent level, current level, preview."""
    stack: DirStack = screen.stack
    symbols = ui_config.symbols
    left, middle, right = column_widths(term.width, ui_config.column_widths)

    clear_rows(term, y, height)

    parent = stack.parent
    if parent is not None and left > 0:
        _render_level(term, parent, 0, y, left, height, symbols)

    top = stack.top
    rows = visible_rows(stack, height, ui_config.hide_unmatched)
    if not rows:
        label = " (no matches)" if top.items else " (empty)"
        write_at(term, left, y, term.bright_black(fit(label, middle)), clear=False)
    _render_entries(
        term,
        left,
        y,
        middle,
        rows,
        top.selected,
        symbols,
        active=True,
        marked=frozenset(top.marked),
        highlight=None if ui_config.hide_unmatched else top.filter,
    )

    x = left + middle
    match stack.preview:
        case Song() as song:
            _render_song_tags(term, song, x, y, right, height)
        case list() as entries if right > 0:
            rows = list(enumerate(entries))[:height]
            _render_entries(term, x, y, right, rows, None, symbols, active=False)


def render_queue(
    term: Terminal, screen: QueueScreen, ui: SharedUiState, y: int, height: int, ui_config: UIConfig
) -> None:
    """Queue as a table: position, artist, title, album, duration."""
    symbols = ui_config.symbols
    top = screen.stack.top
    duration_width = 6
    artist_w, title_w, album_w = column_widths(max(3, term.width - duration_width - 7), (30, 40, 30))

    header = f"  {'#':>3} {fit('Artist', artist_w)}{fit('Title', title_w)}{fit('Album', album_w)}{'Time':>{duration_width}}"
    write_at(term, 0, y, term.bold_underline(fit(header, term.width)))

    rows = visible_rows(screen.stack, height - 1, ui_config.hide_unmatched)
    for row in range(height - 1):
        # past the end, or a row that is not a song: blank it
        if row >= len(rows) or not isinstance(rows[row][1], Leaf):
            write_at(term, 0, y + 1 + row, "")
            continue
        index, entry = rows[row]
        song = entry.song
        playing = "▶" if song.id == ui.status.song_id and ui.status.state != "stop" else " "
        marker = symbols.marker if index in top.marked else " "
        text = (
            f"{playing}{marker}{index + 1:>3} "
            f"{fit(song.display_artist, artist_w)}"
            f"{fit(song.display_title, title_w)}"
            f"{fit(song.album, album_w)}"
            f"{format_time(song.duration):>{duration_width}}"
        )
        text = fit(text, term.width)
        if index == top.selected:
            text = term.reverse(text)
        elif top.filter and not ui_config.hide_unmatched and top.filter in song.display_title:
            text = term.yellow(text)
        elif playing != " ":
            text = term.bold_cyan(text)
        write_at(term, 0, y + 1 + row, text)


def render_logs(term: Terminal, screen: LogsScreen, y: int, height: int) -> None:
    for row in range(height):
        index = screen.offset + row
        if index >= len(screen.lines):
            write_at(term, 0, y + row, "")
            continue
        text = fit(screen.lines[index], term.width)
        if index == screen.selected:
            text = term.reverse(text)
        elif "| ERROR" in text or "| CRITICAL" in text:
            text = term.red(text)
        elif "| WARNING" in text:
            text = term.yellow(text)
        write_at(term, 0, y + row, text)


# ============================================================================
# FOOTER
# ============================================================================


def render_input(term: Terminal, screen: Screen, y: int) -> None:
    if not isinstance(screen, BrowserScreen):
        write_at(term, 0, y, "")
        return
    cursor = term.bold_white("█")
    if screen.prompt is not None:
        write_at(term, 0, y, term.green(f"{screen.prompt.label}: ") + screen.prompt.text + cursor)
    elif screen.filter_editing:
        write_at(term, 0, y, term.green("/") + (screen.stack.filter or "") + cursor)
    elif screen.stack.filter:
        write_at(term, 0, y, term.bright_black(f"/{screen.stack.filter}"))
    else:
        write_at(term, 0, y, "")


def render_message(term: Terminal, ui: SharedUiState, y: int) -> None:
    message = ui.visible_message()
    if message is None:
        write_at(term, 0, y, "")
        return
    text = fit(message.text, term.width - 1)
    style = term.red if message.level is MessageLevel.ERROR else term.green
    write_at(term, 0, y, style(text))


def render(
    term: Terminal,
    screens: Sequence[Screen],
    active: int,
    ui: SharedUiState,
    ui_config: UIConfig,
) -> None:
    """Draw one full frame."""
    screen = screens[active]
    height = body_height(term)
    body_y = HEADER_LINES

    render_tabs(term, screens, active, 0)
    render_now_playing(term, ui, 1)
    write_at(term, 0, 3, term.bright_black("─" * term.width))

    match screen:
        case QueueScreen():
            render_queue(term, screen, ui, body_y, height, ui_config)
        case BrowserScreen():
            render_browser(term, screen, body_y, height, ui_config)
        case LogsScreen():
            render_logs(term, screen, body_y, height)

    render_input(term, screen, body_y + height)
    render_message(term, ui, body_y + height + 1)
    sys.stdout.flush()
