"""MPD protocol data types.

Frozen dataclasses for outbound commands and decoded responses.
Everything here is plain data; parsing lives in ``protocol`` and I/O in ``client``.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

# A decoded response line: (field name, value)
Pair = tuple[str, str]

# Verbs whose arguments are masked when a command is rendered for logs
_SECRET_VERBS = frozenset({"password"})


class Filter(NamedTuple):
    """Exact-match tag filter. Several filters are ANDed by the server."""

    tag: str
    value: str


@dataclass(frozen=True)
class Command:
    """An outbound request: verb plus ordered string arguments."""

    verb: str
    args: tuple[str, ...] = ()

    @classmethod
    def with_filters(
        cls, verb: str, filters: tuple[Filter, ...] | list[Filter], *leading: str
    ) -> "Command":
        """Build a command whose arguments end with flattened tag/value pairs.

        Example:
            Command.with_filters("list", [Filter("album", "A")], "title")
            -> list title album "A"
        """
        args = list(leading)
        for tag, value in filters:
            args.extend((tag, value))
        return cls(verb, tuple(args))

    def __str__(self) -> str:
        if self.verb in _SECRET_VERBS:
            return " ".join((self.verb, *("***" for _ in self.args)))
        return " ".join((self.verb, *self.args))


@dataclass(frozen=True)
class Ack:
    """A server-side failure parsed from an ``ACK [code@index] {verb} message`` line.

    Attributes:
        code: MPD error code (e.g. 50 = no such file)
        index: Position of the failing command inside a batch, 0 otherwise
        command: Verb the server was executing when it failed
        message: Human-readable description
    """

    code: int
    index: int
    command: str
    message: str

    def __str__(self) -> str:
        return f"[{self.code}@{self.index}] {{{self.command}}} {self.message}"


def _as_int(value: Optional[str], default: int = -1) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value.split("/", 1)[0])
    except ValueError:
        return default


def _as_float(value: Optional[str], default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Song:
    """A song record as returned by find, playlistinfo, lsinfo and friends.

    Attributes:
        file: Path relative to the music directory (or a stream URL)
        title: Title tag
        artist: Artist tag
        album: Album tag
        album_artist: AlbumArtist tag
        duration: Duration in seconds
        track: Track number as written in the tags (e.g. "3" or "3/12")
        date: Date tag
        genre: Genre tag
        pos: Position in the queue, -1 when not queued
        id: Queue song id, -1 when not queued
        tags: Every (field, value) pair of the record, in server order
    """

    file: str
    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    duration: float = 0.0
    track: str = ""
    date: str = ""
    genre: str = ""
    pos: int = -1
    id: int = -1
    tags: tuple[Pair, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def from_pairs(cls, pairs: list[Pair]) -> "Song":
        """Build a Song from one record. The first value of a repeated tag wins."""
        first: dict[str, str] = {}
        for key, value in pairs:
            first.setdefault(key, value)

        duration = first.get("duration")
        if duration is None:
            duration = first.get("Time")

        return cls(
            file=first.get("file", ""),
            title=first.get("Title", ""),
            artist=first.get("Artist", ""),
            album=first.get("Album", ""),
            album_artist=first.get("AlbumArtist", ""),
            duration=_as_float(duration),
            track=first.get("Track", ""),
            date=first.get("Date", ""),
            genre=first.get("Genre", ""),
            pos=_as_int(first.get("Pos")),
            id=_as_int(first.get("Id")),
            tags=tuple(pairs),
        )

    @property
    def display_title(self) -> str:
        """Title for display, falling back to the file name without extension."""
        if self.title:
            return self.title
        name = self.file.rsplit("/", 1)[-1]
        if "." in name:
            name = name.rsplit(".", 1)[0]
        return name

    @property
    def display_artist(self) -> str:
        return self.artist or self.album_artist


@dataclass(frozen=True)
class Directory:
    """A directory line of an lsinfo listing."""

    path: str
    last_modified: str = ""

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Status:
    """Player status.

    Attributes:
        state: "play", "pause" or "stop"
        volume: 0-100, or -1 when the server has no mixer
        repeat, random, consume: Mode switches
        single: "0", "1" or "oneshot"
        song: Queue position of the current song, -1 if none
        song_id: Queue id of the current song, -1 if none
        elapsed: Elapsed time of the current song in seconds
        duration: Duration of the current song in seconds
        playlist: Queue version, changes whenever the queue changes
        playlist_length: Number of songs in the queue
        error: Last player error, empty if none
    """

    state: str = "stop"
    volume: int = -1
    repeat: bool = False
    random: bool = False
    single: str = "0"
    consume: bool = False
    song: int = -1
    song_id: int = -1
    elapsed: float = 0.0
    duration: float = 0.0
    playlist: int = -1
    playlist_length: int = 0
    error: str = ""

    @classmethod
    def from_pairs(cls, pairs: list[Pair]) -> "Status":
        data = dict(pairs)
        return cls(
            state=data.get("state", "stop"),
            volume=_as_int(data.get("volume")),
            repeat=data.get("repeat") == "1",
            random=data.get("random") == "1",
            single=data.get("single", "0"),
            consume=data.get("consume") == "1",
            song=_as_int(data.get("song")),
            song_id=_as_int(data.get("songid")),
            elapsed=_as_float(data.get("elapsed")),
            duration=_as_float(data.get("duration")),
            playlist=_as_int(data.get("playlist")),
            playlist_length=_as_int(data.get("playlistlength"), 0),
            error=data.get("error", ""),
        )

    @property
    def is_playing(self) -> bool:
        return self.state == "play"

    @property
    def single_enabled(self) -> bool:
        return self.single != "0"
