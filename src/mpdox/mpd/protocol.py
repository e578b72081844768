"""MPD reply grammar: command encoding and response decoding.

Pure functions only. The client reads every line of a response up to its
terminator first and then hands the lines to this module, so a decode error
never leaves the connection out of sync.

Grammar:
    response  := pair* ("OK" | ack)
    pair      := field ": " value
    ack       := "ACK [" code "@" index "] {" verb "} " message
    batch     := (pair* "list_OK")* ("OK" | ack)
"""

import re
from typing import Iterable, Optional, Sequence

from .errors import MpdDecodeError
from .types import Ack, Command, Pair

OK = "OK"
LIST_OK = "list_OK"
ACK_PREFIX = "ACK "
GREETING_PREFIX = "OK MPD "

BATCH_BEGIN = "command_list_ok_begin"
BATCH_END = "command_list_end"

_ACK_RE = re.compile(r"^ACK \[(\d+)@(\d+)\] \{([^}]*)\}\s?(.*)$")
_NEEDS_QUOTING = re.compile(r'[\s"\\\']')


def quote_arg(arg: str) -> str:
    """Quote an argument if the server would otherwise split or misread it."""
    if arg and not _NEEDS_QUOTING.search(arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def encode_command(command: Command) -> str:
    """Serialize one command as a protocol line, including the newline."""
    if not command.verb or any(c.isspace() for c in command.verb):
        raise ValueError(f"Invalid command verb: {command.verb!r}")
    parts = [command.verb, *(quote_arg(arg) for arg in command.args)]
    return " ".join(parts) + "\n"


def encode_batch(commands: Sequence[Command]) -> str:
    """Wrap commands in a command list so the server runs them as one unit."""
    body = "".join(encode_command(command) for command in commands)
    return f"{BATCH_BEGIN}\n{body}{BATCH_END}\n"


def parse_greeting(line: str) -> str:
    """Return the protocol version from the ``OK MPD <version>`` greeting."""
    if not line.startswith(GREETING_PREFIX):
        raise MpdDecodeError(f"Unexpected greeting: {line!r}", line)
    return line[len(GREETING_PREFIX):].strip()


def is_terminator(line: str) -> bool:
    """True for the line that ends a response."""
    return line == OK or line.startswith(ACK_PREFIX)


def parse_ack(line: str) -> Ack:
    """Parse an ACK line into its code, batch index, verb and message."""
    match = _ACK_RE.match(line)
    if not match:
        raise MpdDecodeError(f"Malformed ACK line: {line!r}", line)
    code, index, verb, message = match.groups()
    return Ack(code=int(code), index=int(index), command=verb, message=message)


def parse_pair(line: str) -> Pair:
    """Split a ``field: value`` line. Anything else is a decode error."""
    key, sep, value = line.partition(": ")
    if not sep or not key or " " in key:
        raise MpdDecodeError(f"Malformed response line: {line!r}", line)
    return key, value


def _check_terminated(lines: Sequence[str]) -> str:
    if not lines or not is_terminator(lines[-1]):
        raise MpdDecodeError("Response is not terminated by OK or ACK")
    return lines[-1]


def decode_response(lines: Sequence[str]) -> list[Pair] | Ack:
    """Decode a single command's response.

    Args:
        lines: Every line of the response, terminator included, newlines stripped

    Returns:
        The (field, value) pairs in server order, or the Ack if the command failed

    Raises:
        MpdDecodeError: A body line is malformed or the terminator is missing
    """
    terminator = _check_terminated(lines)
    if terminator != OK:
        return parse_ack(terminator)
    return [parse_pair(line) for line in lines[:-1]]


def decode_batch(lines: Sequence[str], count: int) -> list[list[Pair]] | Ack:
    """Decode the response to a ``command_list_ok_begin`` batch of ``count`` commands.

    Each successful command's output ends with ``list_OK``. If command k fails the
    server stops there and sends an ACK carrying index k; in that case only the
    Ack is returned so no later command can be mistaken for a success.
    """
    terminator = _check_terminated(lines)
    if terminator != OK:
        return parse_ack(terminator)

    results: list[list[Pair]] = []
    current: list[Pair] = []
    for line in lines[:-1]:
        if line == LIST_OK:
            results.append(current)
            current = []
        else:
            current.append(parse_pair(line))

    if current or len(results) != count:
        raise MpdDecodeError(
            f"Batch of {count} commands answered with {len(results)} results"
        )
    return results


def split_records(
    pairs: Iterable[Pair], delimiters: Optional[Iterable[str]] = None
) -> list[list[Pair]]:
    """Group a flat pair stream into records.

    Without delimiters a new record starts whenever a field repeats one already
    seen in the current record. With delimiters (e.g. ``file`` for song lists) a
    new record starts at every delimiter field instead, which keeps multi-valued
    tags such as several Artist lines inside one song.
    """
    delimiter_set = set(delimiters) if delimiters is not None else None
    records: list[list[Pair]] = []
    current: list[Pair] = []
    seen: set[str] = set()

    for key, value in pairs:
        if delimiter_set is not None:
            boundary = key in delimiter_set
        else:
            boundary = key in seen
        if boundary and current:
            records.append(current)
            current = []
            seen = set()
        current.append((key, value))
        seen.add(key)

    if current:
        records.append(current)
    return records


def values_of(pairs: Iterable[Pair], field_name: str) -> list[str]:
    """Values of one field, matched case-insensitively (``list album`` answers ``Album:``)."""
    wanted = field_name.lower()
    return [value for key, value in pairs if key.lower() == wanted]
