"""Client error types for seymour feed aggregator interactions."""

from __future__ import annotations

from typing import Any


class SeymourClientError(Exception):
    """Base error for seymour client failures.

    Attributes:
        records: Records an interrupted listing had collected before failing.
    """

    def __init__(self, *args: Any) -> None:
        super().__init__(*args)
        self.records: list[Any] = []


class SeymourConfigError(SeymourClientError):
    """Configuration file is missing, unreadable or invalid."""


class SeymourAddressResolutionError(SeymourClientError):
    """Server address did not resolve to any candidate."""


class SeymourConnectionError(SeymourClientError):
    """Network connection to the server failed."""


class SeymourConnectionClosed(SeymourClientError):
    """Server closed the stream before a full line was available."""


class SeymourTimeout(SeymourClientError):
    """Timeout while communicating with the server."""


class SeymourParseError(SeymourClientError):
    """A received line does not match any known grammar."""

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


class SeymourProtocolViolation(SeymourClientError):
    """A valid response arrived that the current exchange did not expect."""

    def __init__(
        self,
        message: str,
        *,
        expected: tuple[str, ...] = (),
        received: Any = None,
        records: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received
        if records is not None:
            self.records = records


class SeymourStateError(SeymourClientError):
    """Session operation invoked from a state that does not allow it."""
