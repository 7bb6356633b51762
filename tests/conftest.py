"""Pytest configuration and fixtures for seymour_client tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from seymour_client.errors import SeymourConnectionClosed


class ScriptedReader:
    """Line reader replaying a fixed server script.

    Raises SeymourConnectionClosed once the script is exhausted, the way a
    real reader does when the server hangs up.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)
        self.reads = 0

    async def receive_line(self) -> str:
        if self.reads >= len(self._lines):
            raise SeymourConnectionClosed("no line from server")
        line = self._lines[self.reads]
        self.reads += 1
        return line


class RecordingWriter:
    """Line writer recording every sent line without its terminator."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False

    async def send_line(self, data: bytes) -> None:
        assert data.endswith(b"\r\n")
        self.sent.append(data[:-2].decode("utf-8"))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def writer() -> RecordingWriter:
    """Create a writer that records sent commands."""
    return RecordingWriter()


@pytest.fixture
def script() -> Callable[..., ScriptedReader]:
    """Build a scripted reader from server response lines.

    Returns:
        Factory taking the response lines in the order the server sends them
    """

    def _make(*lines: str) -> ScriptedReader:
        return ScriptedReader(lines)

    return _make


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML config file and return its path."""

    def _write(text: str, name: str = "config.yaml"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
