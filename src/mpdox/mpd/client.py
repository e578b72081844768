"""MPD protocol client over a single TCP (or Unix) socket.

One connection, one outstanding request at a time. Every exchange writes the
encoded command(s), then reads the whole response up to its terminator before
decoding, so replies are always paired with requests in send order.

Failure policy:
    - transport errors drop the connection and raise MpdConnectionError
    - ACK replies are data: ``send``/``send_batch`` return them, the typed
      helpers raise MpdAckError, and the connection stays usable
    - malformed replies raise MpdDecodeError after the response was consumed
"""

import socket
import threading
from dataclasses import dataclass
from typing import BinaryIO, Optional, Sequence

from loguru import logger

from . import protocol
from .errors import MpdAckError, MpdConnectionError, MpdDecodeError
from .types import Ack, Command, Directory, Filter, Pair, Song, Status

DEFAULT_PORT = 6600
DEFAULT_TIMEOUT = 5.0  # seconds, applies to connect and to every read


def parse_address(address: str) -> tuple[str, int | None]:
    """Split an address string into (host, port).

    Accepts ``host``, ``host:port``, ``[v6]:port`` and absolute Unix socket
    paths (returned with port None).

    Examples:
        >>> parse_address("127.0.0.1:6600")
        ('127.0.0.1', 6600)
        >>> parse_address("/run/mpd/socket")
        ('/run/mpd/socket', None)
    """
    if address.startswith("/"):
        return address, None

    if address.startswith("["):
        host, _, rest = address[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, _, port = address.partition(":")
    else:
        host, port = address, ""

    if not host:
        raise ValueError(f"Invalid server address: {address!r}")
    try:
        return host, int(port) if port else DEFAULT_PORT
    except ValueError:
        raise ValueError(f"Invalid port in server address: {address!r}") from None


@dataclass
class Connection:
    """A live session. ``sent``/``received`` count exchanges and must stay equal between calls."""

    sock: socket.socket
    reader: BinaryIO
    version: str
    sent: int = 0
    received: int = 0


class MpdClient:
    """Synchronous MPD client.

    Args:
        address: ``host:port`` or a Unix socket path
        password: Sent with the ``password`` command right after the handshake
        timeout: Socket timeout in seconds
    """

    def __init__(
        self,
        address: str,
        password: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.address = address
        self.password = password
        self.timeout = timeout
        self.connection: Optional[Connection] = None
        self._lock = threading.Lock()

    # ========================================================================
    # CONNECTION LIFECYCLE
    # ========================================================================

    @property
    def connected(self) -> bool:
        return self.connection is not None

    @property
    def version(self) -> Optional[str]:
        return self.connection.version if self.connection else None

    def connect(self) -> Connection:
        """Open the socket, read the greeting and authenticate if configured."""
        if self.connection is not None:
            return self.connection

        try:
            host, port = parse_address(self.address)
        except ValueError as e:
            raise MpdConnectionError(str(e)) from e

        logger.info(f"Connecting to MPD at {self.address}")
        try:
            if port is None:
                sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
                sock.settimeout(self.timeout)
                sock.connect(host)
            else:
                sock = socket.create_connection((host, port), timeout=self.timeout)
        except OSError as e:
            logger.error(f"Cannot connect to {self.address}: {e}")
            raise MpdConnectionError(f"Cannot connect to {self.address}: {e}") from e

        reader = sock.makefile("rb")
        try:
            greeting = self._decode_line(self._read_raw(reader))
            version = protocol.parse_greeting(greeting)
        except (MpdConnectionError, MpdDecodeError, OSError) as e:
            reader.close()
            sock.close()
            raise MpdConnectionError(f"Handshake with {self.address} failed: {e}") from e

        self.connection = Connection(sock=sock, reader=reader, version=version)
        logger.info(f"Connected to MPD {version}")

        if self.password:
            try:
                self._call(Command("password", (self.password,)))
            except MpdAckError as e:
                self._drop()
                raise MpdConnectionError(f"Authentication failed: {e.ack.message}") from e
            except MpdDecodeError as e:
                self._drop()
                raise MpdConnectionError(f"Authentication failed: {e}") from e

        return self.connection

    def close(self) -> None:
        """Close the connection. Safe to call when already closed."""
        connection, self.connection = self.connection, None
        if connection is None:
            return
        try:
            connection.sock.sendall(b"close\n")
        except OSError:
            pass  # Server already gone
        for closable in (connection.reader, connection.sock):
            try:
                closable.close()
            except OSError as e:
                logger.debug(f"Error while closing connection: {e}")
        logger.info("Disconnected from MPD")

    def reconnect(self) -> Connection:
        self._drop()
        return self.connect()

    def _drop(self) -> None:
        """Discard the connection without the polite close handshake."""
        connection, self.connection = self.connection, None
        if connection is None:
            return
        for closable in (connection.reader, connection.sock):
            try:
                closable.close()
            except OSError:
                pass

    # ========================================================================
    # RAW EXCHANGE
    # ========================================================================

    @staticmethod
    def _read_raw(reader: BinaryIO) -> bytes:
        raw = reader.readline()
        if not raw:
            raise MpdConnectionError("Connection closed by server")
        if not raw.endswith(b"\n"):
            raise MpdConnectionError("Connection closed in the middle of a line")
        return raw[:-1]

    @staticmethod
    def _decode_line(raw: bytes) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            text = raw.decode("utf-8", errors="replace")
            raise MpdDecodeError(f"Invalid UTF-8 in response line: {e}", line=text) from e

    def _exchange(self, payload: str) -> list[str]:
        """Write one request and read its complete response."""
        connection = self.connection
        if connection is None:
            raise MpdConnectionError("Not connected")

        with self._lock:
            try:
                connection.sock.sendall(payload.encode("utf-8"))
                connection.sent += 1

                raw_lines: list[bytes] = []
                while True:
                    raw = self._read_raw(connection.reader)
                    raw_lines.append(raw)
                    # terminators are ASCII, so latin-1 finds them even in a bad line
                    if protocol.is_terminator(raw.decode("latin-1")):
                        break
                connection.received += 1
            except (OSError, MpdConnectionError) as e:
                logger.warning(f"Connection to {self.address} lost: {e}")
                self._drop()
                raise MpdConnectionError(f"Connection lost: {e}") from e

        try:
            lines = [self._decode_line(raw) for raw in raw_lines]
        except MpdDecodeError as e:
            logger.error(f"Dropping undecodable response: {e}")
            raise
        logger.debug(f"<- {lines[-1]} ({len(lines) - 1} lines)")
        return lines

    def send(self, command: Command) -> list[Pair] | Ack:
        """Send one command.

        Returns:
            The decoded (field, value) pairs, or the server's Ack

        Raises:
            MpdConnectionError: Transport failure, connection dropped
            MpdDecodeError: The response was malformed and has been discarded
        """
        logger.debug(f"-> {command}")
        lines = self._exchange(protocol.encode_command(command))
        try:
            reply = protocol.decode_response(lines)
        except MpdDecodeError as e:
            logger.error(f"Dropping malformed response to '{command.verb}': {e}")
            raise
        if isinstance(reply, Ack):
            logger.warning(f"MPD rejected '{command}': {reply}")
        return reply

    def send_batch(self, commands: Sequence[Command]) -> list[list[Pair]] | Ack:
        """Send commands as one command list.

        Returns:
            One pair list per command in order, or the Ack of the failing command.
            The Ack's ``index`` is the position of that command in ``commands``.
        """
        if not commands:
            return []
        logger.debug(f"-> batch [{'; '.join(str(c) for c in commands)}]")
        lines = self._exchange(protocol.encode_batch(commands))
        try:
            reply = protocol.decode_batch(lines, len(commands))
        except MpdDecodeError as e:
            logger.error(f"Dropping malformed batch response: {e}")
            raise
        if isinstance(reply, Ack):
            logger.warning(f"MPD rejected batch at command {reply.index}: {reply}")
        return reply

    def _call(self, command: Command) -> list[Pair]:
        reply = self.send(command)
        if isinstance(reply, Ack):
            raise MpdAckError(reply)
        return reply

    def _call_batch(self, commands: Sequence[Command]) -> list[list[Pair]]:
        reply = self.send_batch(commands)
        if isinstance(reply, Ack):
            raise MpdAckError(reply)
        return reply

    @staticmethod
    def _songs(pairs: list[Pair]) -> list[Song]:
        return [
            Song.from_pairs(record)
            for record in protocol.split_records(pairs, delimiters=("file",))
        ]

    # ========================================================================
    # STATUS
    # ========================================================================

    def ping(self) -> None:
        self._call(Command("ping"))

    def status(self) -> Status:
        return Status.from_pairs(self._call(Command("status")))

    def current_song(self) -> Optional[Song]:
        pairs = self._call(Command("currentsong"))
        return Song.from_pairs(pairs) if pairs else None

    def refresh(self) -> tuple[Status, Optional[Song]]:
        """Fetch status and current song in a single command list."""
        status_pairs, song_pairs = self._call_batch(
            [Command("status"), Command("currentsong")]
        )
        song = Song.from_pairs(song_pairs) if song_pairs else None
        return Status.from_pairs(status_pairs), song

    # ========================================================================
    # LIBRARY
    # ========================================================================

    def list_tag(self, tag: str, filters: Sequence[Filter] = ()) -> list[str]:
        """Distinct values of ``tag``, optionally restricted by exact-match filters."""
        pairs = self._call(Command.with_filters("list", tuple(filters), tag))
        return protocol.values_of(pairs, tag)

    def find(self, filters: Sequence[Filter]) -> list[Song]:
        return self._songs(self._call(Command.with_filters("find", tuple(filters))))

    def find_add(self, filters: Sequence[Filter]) -> None:
        """Append every song matching ``filters`` to the queue."""
        self._call(Command.with_filters("findadd", tuple(filters)))

    def lsinfo(self, path: str = "") -> list[Directory | Song]:
        """Directories and songs directly under ``path``. Playlist files are skipped."""
        command = Command("lsinfo", (path,) if path else ())
        records = protocol.split_records(
            self._call(command), delimiters=("directory", "file", "playlist")
        )
        entries: list[Directory | Song] = []
        for record in records:
            kind, value = record[0]
            if kind == "directory":
                modified = dict(record).get("Last-Modified", "")
                entries.append(Directory(path=value, last_modified=modified))
            elif kind == "file":
                entries.append(Song.from_pairs(record))
        return entries

    # ========================================================================
    # QUEUE
    # ========================================================================

    def playlist_info(self) -> list[Song]:
        return self._songs(self._call(Command("playlistinfo")))

    def add(self, uri: str) -> None:
        self._call(Command("add", (uri,)))

    def add_many(self, uris: Sequence[str]) -> None:
        """Add several URIs in one command list; the server stops at the first bad one."""
        self._call_batch([Command("add", (uri,)) for uri in uris])

    def delete_id(self, song_id: int) -> None:
        self._call(Command("deleteid", (str(song_id),)))

    def clear(self) -> None:
        self._call(Command("clear"))

    def move_id(self, song_id: int, to: int) -> None:
        self._call(Command("moveid", (str(song_id), str(to))))

    def play_id(self, song_id: int) -> None:
        self._call(Command("playid", (str(song_id),)))

    # ========================================================================
    # STORED PLAYLISTS
    # ========================================================================

    def list_playlists(self) -> list[str]:
        return protocol.values_of(self._call(Command("listplaylists")), "playlist")

    def list_playlist_info(self, name: str) -> list[Song]:
        return self._songs(self._call(Command("listplaylistinfo", (name,))))

    def load_playlist(self, name: str) -> None:
        self._call(Command("load", (name,)))

    def save_playlist(self, name: str) -> None:
        self._call(Command("save", (name,)))

    def rename_playlist(self, name: str, new_name: str) -> None:
        self._call(Command("rename", (name, new_name)))

    def delete_playlist(self, name: str) -> None:
        self._call(Command("rm", (name,)))

    def playlist_add(self, name: str, uri: str) -> None:
        self._call(Command("playlistadd", (name, uri)))

    # ========================================================================
    # PLAYBACK
    # ========================================================================

    def next(self) -> None:
        self._call(Command("next"))

    def previous(self) -> None:
        self._call(Command("previous"))

    def stop(self) -> None:
        self._call(Command("stop"))

    def toggle_pause(self) -> None:
        self._call(Command("pause"))

    def set_repeat(self, enabled: bool) -> None:
        self._call(Command("repeat", ("1" if enabled else "0",)))

    def set_random(self, enabled: bool) -> None:
        self._call(Command("random", ("1" if enabled else "0",)))

    def set_single(self, enabled: bool) -> None:
        self._call(Command("single", ("1" if enabled else "0",)))

    def set_consume(self, enabled: bool) -> None:
        self._call(Command("consume", ("1" if enabled else "0",)))

    def seek_current(self, delta: float) -> None:
        """Seek relative to the current position (negative = backwards)."""
        self._call(Command("seekcur", (f"{delta:+g}",)))

    def set_volume(self, volume: int) -> None:
        self._call(Command("setvol", (str(max(0, min(100, volume))),)))
