"""MPD protocol layer.

This package handles:
- Command encoding and response decoding (``protocol``)
- The single-connection client (``client``)
- Typed records: Song, Status, Directory, Ack (``types``)
"""

from .client import Connection, MpdClient, parse_address
from .errors import MpdAckError, MpdConnectionError, MpdDecodeError, MpdError
from .types import Ack, Command, Directory, Filter, Song, Status

__all__ = [
    "Ack",
    "Command",
    "Connection",
    "Directory",
    "Filter",
    "MpdAckError",
    "MpdClient",
    "MpdConnectionError",
    "MpdDecodeError",
    "MpdError",
    "Song",
    "Status",
    "parse_address",
]
