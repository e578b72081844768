"""
Logging setup using Loguru.
File output for post-mortem debugging, plus an in-memory buffer for the Logs screen.
"""

import threading
from collections import deque
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"
BUFFER_FORMAT = "{time:HH:mm:ss} | {level: <8} | {message}"


class LogBuffer:
    """Bounded in-memory loguru sink.

    Keeps the most recent formatted lines; older lines fall off the front.
    """

    def __init__(self, capacity: int = 1000):
        self._lines: deque[str] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self.version = 0  # bumped on every change so views know when to refresh

    def write(self, message: str) -> None:
        with self._lock:
            self._lines.append(message.rstrip("\n"))
            self.version += 1

    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
            self.version += 1

    def __len__(self) -> int:
        return len(self._lines)


def setup_loguru(
    log_file: Path, level: str = "INFO", buffer: Optional[LogBuffer] = None
) -> None:
    """
    Configure loguru for file logging (the blessed UI owns the console).

    Args:
        log_file: Path to log file
        level: Minimum level (TRACE, DEBUG, INFO, WARNING, ERROR)
        buffer: Optional in-memory sink receiving the same records
    """
    # Remove default stderr handler
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,  # Keep 5 backup files
        level=level,
        format=LOG_FORMAT,
        enqueue=False,
    )

    if buffer is not None:
        logger.add(buffer.write, level=level, format=BUFFER_FORMAT, colorize=False)

    logger.info(f"Loguru initialized: {log_file} (level={level})")
