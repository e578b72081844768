"""Exception hierarchy for the MPD protocol client."""

from typing import Optional

from .types import Ack


class MpdError(Exception):
    """Base class for everything the protocol client raises."""


class MpdConnectionError(MpdError):
    """Transport failure. The connection is gone and must be re-established."""


class MpdDecodeError(MpdError):
    """The server sent output that does not follow the reply grammar."""

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class MpdAckError(MpdError):
    """The server rejected a command with an ACK line."""

    def __init__(self, ack: Ack):
        super().__init__(str(ack))
        self.ack = ack
