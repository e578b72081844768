"""Shared fixtures: a scripted fake MPD server on a loopback socket."""

import re
import socket
import threading
from typing import Optional

import pytest

from mpdox.mpd import MpdClient

_ACK_INDEX = re.compile(r"@\d+\]")


class FakeMpdServer:
    """Answers MPD protocol lines from a script.

    ``responses`` maps an exact command line (as the client sends it) to the
    response body without the terminator, e.g. ``"Album: A\\nAlbum: B\\n"``.
    A bytes body is sent as is, for replies that are not valid UTF-8.
    A body starting with ``ACK`` is sent as the failure line instead. Unscripted
    commands answer a bare OK. Commands in ``hangup_on`` make the server drop
    the connection without answering.
    """

    def __init__(self, greeting: str = "OK MPD 0.23.5"):
        self.greeting = greeting
        self.responses: dict[str, str | bytes] = {}
        self.hangup_on: set[str] = set()
        self.received: list[str] = []
        self.connections = 0
        self._sock = socket.create_server(("127.0.0.1", 0))
        self._sock.settimeout(0.1)
        self.port = self._sock.getsockname()[1]
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def address(self) -> str:
        return f"127.0.0.1:{self.port}"

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        self._thread.join(timeout=2)
        self._sock.close()

    def _serve(self) -> None:
        while not self._stopped.is_set():
            try:
                conn, _ = self._sock.accept()
            except TimeoutError:
                continue
            except OSError:
                return
            self.connections += 1
            conn.settimeout(5)
            try:
                self._handle(conn)
            except OSError:
                pass
            finally:
                conn.close()

    def _body(self, line: str) -> str | bytes:
        return self.responses.get(line, "")

    def _reply(self, line: str) -> bytes:
        body = self._body(line)
        if isinstance(body, bytes):
            return body + b"OK\n"
        if body.startswith("ACK"):
            return (body.rstrip("\n") + "\n").encode()
        return (body + "OK\n").encode()

    def _reply_batch(self, lines: list[str]) -> str:
        out = []
        for index, line in enumerate(lines):
            body = self._body(line)
            if body.startswith("ACK"):
                out.append(_ACK_INDEX.sub(f"@{index}]", body.rstrip("\n"), count=1) + "\n")
                return "".join(out)
            out.append(body + "list_OK\n")
        out.append("OK\n")
        return "".join(out)

    def _handle(self, conn: socket.socket) -> None:
        conn.sendall(f"{self.greeting}\n".encode())
        batch: Optional[list[str]] = None
        with conn.makefile("rb") as reader:
            for raw in reader:
                line = raw.decode("utf-8").rstrip("\n")
                self.received.append(line)
                if line == "close" or self._stopped.is_set():
                    return
                if line in self.hangup_on:
                    return
                if line == "command_list_ok_begin":
                    batch = []
                elif line == "command_list_end":
                    conn.sendall(self._reply_batch(batch or []).encode())
                    batch = None
                elif batch is not None:
                    batch.append(line)
                else:
                    conn.sendall(self._reply(line))


@pytest.fixture
def mpd_server():
    """A running fake server; script it through ``responses``."""
    server = FakeMpdServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def client(mpd_server: FakeMpdServer):
    """A client connected to ``mpd_server``."""
    mpd_client = MpdClient(mpd_server.address, timeout=2.0)
    mpd_client.connect()
    yield mpd_client
    mpd_client.close()
