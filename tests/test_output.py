"""Tests for logging setup and the in-memory log buffer."""

from pathlib import Path

import pytest
from loguru import logger

from mpdox.core.output import LogBuffer, setup_loguru


@pytest.fixture
def restore_logger():
    yield
    logger.remove()


class TestLogBuffer:
    """Test the bounded sink."""

    def test_keeps_most_recent_lines(self) -> None:
        buffer = LogBuffer(capacity=3)
        for n in range(5):
            buffer.write(f"line {n}\n")
        assert buffer.lines() == ["line 2", "line 3", "line 4"]
        assert len(buffer) == 3

    def test_version_changes_on_write_and_clear(self) -> None:
        buffer = LogBuffer()
        start = buffer.version
        buffer.write("x")
        assert buffer.version == start + 1
        buffer.clear()
        assert buffer.version == start + 2
        assert buffer.lines() == []


class TestSetup:
    """Test loguru sink configuration."""

    def test_file_and_buffer_receive_records(self, tmp_path: Path, restore_logger) -> None:
        log_file = tmp_path / "logs" / "mpdox.log"
        buffer = LogBuffer()
        setup_loguru(log_file, level="DEBUG", buffer=buffer)

        logger.debug("queue version 3 -> 4")

        assert log_file.exists()
        assert "queue version 3 -> 4" in log_file.read_text()
        assert any("queue version 3 -> 4" in line for line in buffer.lines())

    def test_level_filters_records(self, tmp_path: Path, restore_logger) -> None:
        buffer = LogBuffer()
        setup_loguru(tmp_path / "mpdox.log", level="WARNING", buffer=buffer)

        logger.info("routine")
        logger.warning("unusual")

        lines = buffer.lines()
        assert not any("routine" in line for line in lines)
        assert any("unusual" in line for line in lines)
