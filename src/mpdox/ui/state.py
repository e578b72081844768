"""UI state shared between the app loop and the screens."""

from dataclasses import dataclass, field
from enum import Enum, auto
from time import monotonic
from typing import Optional

from mpdox.mpd import Song, Status

# Seconds a status message stays on screen
MESSAGE_TIMEOUT = 4.0


class KeyHandleResult(Enum):
    HANDLED = auto()
    UNHANDLED = auto()


class MessageLevel(Enum):
    INFO = auto()
    ERROR = auto()


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: MessageLevel
    expires_at: float


@dataclass
class SharedUiState:
    """Player state and the status line, read by every screen and the renderer."""

    status: Status = field(default_factory=Status)
    current_song: Optional[Song] = None
    connected: bool = True
    message: Optional[StatusMessage] = None

    def info(self, text: str, timeout: float = MESSAGE_TIMEOUT) -> None:
        self.message = StatusMessage(text, MessageLevel.INFO, monotonic() + timeout)

    def error(self, text: str, timeout: float = MESSAGE_TIMEOUT) -> None:
        self.message = StatusMessage(text, MessageLevel.ERROR, monotonic() + timeout)

    def visible_message(self, now: Optional[float] = None) -> Optional[StatusMessage]:
        """The current message, or None once it has expired."""
        if self.message is None:
            return None
        if (now if now is not None else monotonic()) >= self.message.expires_at:
            self.message = None
        return self.message
