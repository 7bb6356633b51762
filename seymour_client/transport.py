"""TCP line transport for the seymour protocol."""

from __future__ import annotations

import asyncio
import logging
import socket

from .errors import (
    SeymourAddressResolutionError,
    SeymourConnectionClosed,
    SeymourConnectionError,
    SeymourParseError,
    SeymourTimeout,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
CLOSE_TIMEOUT = 2.0


def split_host_port(host_port: str) -> tuple[str, int]:
    """Split ``host:port`` or ``[ipv6]:port`` into its parts.

    Raises:
        SeymourAddressResolutionError: If the value is not a host/port pair.
    """
    if host_port.startswith("["):
        host, sep, port = host_port[1:].partition("]:")
    else:
        host, sep, port = host_port.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise SeymourAddressResolutionError(
            f"invalid server address {host_port!r}, expected host:port"
        )
    port_number = int(port)
    if not 0 < port_number < 65536:
        raise SeymourAddressResolutionError(f"port out of range in {host_port!r}")
    return host, port_number


async def resolve(host_port: str) -> tuple[str, int]:
    """Resolve ``host_port`` to the first stream socket address candidate."""
    host, port = split_host_port(host_port)
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as err:
        raise SeymourAddressResolutionError(f"failed to resolve {host_port}") from err
    if not infos:
        raise SeymourAddressResolutionError(f"missing server address for {host_port}")
    sockaddr = infos[0][4]
    return sockaddr[0], sockaddr[1]


class SeymourLineReader:
    """Read half of a connection, yielding one text line at a time."""

    def __init__(self, reader: asyncio.StreamReader, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._reader = reader
        self._timeout = timeout

    async def receive_line(self) -> str:
        """Read one CRLF- or LF-terminated line and strip the terminator.

        Raises:
            SeymourConnectionClosed: If the stream ends before a full line.
            SeymourParseError: If the line is not UTF-8 or is too long.
            SeymourTimeout: If no line arrives within the timeout.
        """
        try:
            raw = await asyncio.wait_for(self._reader.readline(), timeout=self._timeout)
        except TimeoutError as err:
            raise SeymourTimeout("timed out waiting for a line from server") from err
        except ValueError as err:
            # StreamReader reports a line above its buffer limit as ValueError
            raise SeymourParseError("line from server exceeds buffer limit") from err
        except OSError as err:
            raise SeymourConnectionError("failed to read from server") from err

        if not raw.endswith(b"\n"):
            raise SeymourConnectionClosed("no line from server")

        raw = raw[:-2] if raw.endswith(b"\r\n") else raw[:-1]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as err:
            raise SeymourParseError(
                "line from server is not valid UTF-8", raw.decode("utf-8", "replace")
            ) from err


class SeymourLineWriter:
    """Write half of a connection."""

    def __init__(self, writer: asyncio.StreamWriter, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._writer = writer
        self._timeout = timeout

    async def send_line(self, data: bytes) -> None:
        """Write one already-terminated line and flush it."""
        try:
            self._writer.write(data)
            await asyncio.wait_for(self._writer.drain(), timeout=self._timeout)
        except TimeoutError as err:
            raise SeymourTimeout("timed out writing to server") from err
        except OSError as err:
            raise SeymourConnectionError("failed to write to server") from err

    async def close(self) -> None:
        """Release the connection."""
        self._writer.close()
        try:
            await asyncio.wait_for(self._writer.wait_closed(), timeout=CLOSE_TIMEOUT)
        except TimeoutError:
            _LOGGER.warning("Connection close timed out")
        except OSError as err:
            _LOGGER.debug("Connection closed with error: %s", err)


async def open_connection(
    host_port: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[SeymourLineReader, SeymourLineWriter]:
    """Connect to a seymour server.

    Args:
        host_port: Server address as ``host:port``
        timeout: Bound for the connect attempt and every later read/write

    Returns:
        Independent read and write halves of the same stream
    """
    try:
        host, port = await asyncio.wait_for(resolve(host_port), timeout=timeout)
    except TimeoutError as err:
        raise SeymourTimeout(f"resolving {host_port} timed out") from err

    _LOGGER.info("Connecting to %s (%s:%s)", host_port, host, port)
    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise SeymourTimeout(f"connection to {host_port} timed out") from err
    except OSError as err:
        raise SeymourConnectionError(f"failed to connect to {host_port}") from err

    return (
        SeymourLineReader(reader, timeout=timeout),
        SeymourLineWriter(writer, timeout=timeout),
    )
