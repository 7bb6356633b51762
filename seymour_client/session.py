"""Request/reply session with a seymour server.

A session drives one operation over one connection:

    INIT -> AUTHENTICATED -> LISTING -> (ITEM_ACK) -> DONE

Exactly one command is in flight at a time; its response is consumed before
anything else is sent. Any failure moves the session to FAILED, which accepts
no further operations.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from .errors import SeymourClientError, SeymourProtocolViolation, SeymourStateError
from .protocol import (
    AckMarkRead,
    AckUser,
    Command,
    EndList,
    EntryResponse,
    Error,
    ListSubscriptions,
    ListUnread,
    MarkRead,
    Response,
    StartEntryList,
    StartSubscriptionList,
    SubscriptionResponse,
    User,
    decode_response,
    encode_command,
    format_command,
)
from .transport import SeymourLineReader, SeymourLineWriter, open_connection

if TYPE_CHECKING:
    from .config import SeymourConfig

_LOGGER = logging.getLogger(__name__)

_R = TypeVar("_R")
_T = TypeVar("_T")


class SessionState(Enum):
    """Protocol states of a session."""

    INIT = "init"
    AUTHENTICATED = "authenticated"
    LISTING = "listing"
    ITEM_ACK = "item_ack"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.INIT: frozenset({SessionState.AUTHENTICATED}),
    SessionState.AUTHENTICATED: frozenset({SessionState.LISTING}),
    SessionState.LISTING: frozenset({SessionState.ITEM_ACK, SessionState.DONE}),
    SessionState.ITEM_ACK: frozenset({SessionState.DONE}),
    SessionState.DONE: frozenset(),
    SessionState.FAILED: frozenset(),
}


@dataclass(frozen=True)
class Entry:
    """An unread feed entry as presented to the user."""

    id: int
    full_url: str
    title: str

    @classmethod
    def from_response(cls, response: EntryResponse) -> Entry:
        return cls(
            id=response.id,
            full_url=f"{response.feed_url}/{response.url}",
            title=response.title,
        )


@dataclass(frozen=True)
class Subscription:
    """A subscribed feed."""

    id: int
    url: str

    @classmethod
    def from_response(cls, response: SubscriptionResponse) -> Subscription:
        return cls(id=response.id, url=response.url)


class SeymourSession:
    """One authenticated command/response exchange with a seymour server.

    Usage:
        reader, writer = await open_connection("feeds.example.org:2001")
        session = SeymourSession(reader, writer, "alice")
        entries = await session.list_unread(mark_read=False)
        await writer.close()
    """

    def __init__(
        self,
        reader: SeymourLineReader,
        writer: SeymourLineWriter,
        username: str,
    ) -> None:
        self.username = username
        self._reader = reader
        self._writer = writer
        self._state = SessionState.INIT

    @property
    def state(self) -> SessionState:
        """Current protocol state."""
        return self._state

    # -------------------------------------------------------------------------
    # Public API: Operations
    # -------------------------------------------------------------------------

    async def authenticate(self) -> int:
        """Send USER and require ACK_USER.

        Returns:
            Server-side user id
        """
        self._require(SessionState.INIT, "authenticate")
        with self._exchange():
            command = User(username=self.username)
            await self._send(command)
            ack = await self._expect(command, AckUser)
            self._transition(SessionState.AUTHENTICATED)
        _LOGGER.info("[%s] Authenticated (user id %d)", self.username, ack.id)
        return ack.id

    async def list_unread(self, *, mark_read: bool = True) -> list[Entry]:
        """List unread entries, then mark each as read unless suppressed.

        Entries are marked one at a time in the order received, waiting for
        ACK_MARK_READ before the next MARK_READ is sent.
        """
        await self._ensure_authenticated("list unread entries")
        entries: list[Entry] = []
        with self._exchange(entries):
            await self._list(
                ListUnread(), StartEntryList, EntryResponse, Entry.from_response, entries
            )
            _LOGGER.debug("[%s] Received %d unread entries", self.username, len(entries))

            if entries and mark_read:
                self._transition(SessionState.ITEM_ACK)
                for entry in entries:
                    mark = MarkRead(id=entry.id)
                    await self._send(mark)
                    await self._expect(mark, AckMarkRead)
                _LOGGER.info("[%s] Marked %d entries as read", self.username, len(entries))

            self._transition(SessionState.DONE)
        return entries

    async def list_subscriptions(self) -> list[Subscription]:
        """List the user's subscriptions."""
        await self._ensure_authenticated("list subscriptions")
        subscriptions: list[Subscription] = []
        with self._exchange(subscriptions):
            await self._list(
                ListSubscriptions(),
                StartSubscriptionList,
                SubscriptionResponse,
                Subscription.from_response,
                subscriptions,
            )
            self._transition(SessionState.DONE)
        return subscriptions

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _ensure_authenticated(self, action: str) -> None:
        if self._state is SessionState.INIT:
            await self.authenticate()
        self._require(SessionState.AUTHENTICATED, action)

    async def _list(
        self,
        command: Command,
        start: type[Response],
        item: type[_R],
        build: Callable[[_R], _T],
        into: list[_T],
    ) -> None:
        """Send a list command and append built records up to END_LIST."""
        await self._send(command)
        await self._expect(command, start)
        self._transition(SessionState.LISTING)

        while True:
            response = await self._expect(command, item, EndList)
            if isinstance(response, EndList):
                return
            into.append(build(response))

    async def _send(self, command: Command) -> None:
        data = encode_command(command)
        _LOGGER.debug("[%s] -> %r", self.username, command)
        await self._writer.send_line(data)

    async def _expect(self, command: Command, *variants: type[Any]) -> Any:
        """Receive one response and require it to be one of ``variants``."""
        line = await self._reader.receive_line()
        _LOGGER.debug("[%s] <- %s", self.username, line)
        response = decode_response(line)
        if isinstance(response, variants):
            return response

        expected = tuple(v.__name__ for v in variants)
        message = (
            f"unexpected response to {format_command(command)} "
            f"(expected {' or '.join(expected)}): {line}"
        )
        if isinstance(response, Error):
            message = f"{message} (server error: {response.message})"
        raise SeymourProtocolViolation(
            message,
            expected=expected,
            received=response,
        )

    def _require(self, state: SessionState, action: str) -> None:
        if self._state is not state:
            raise SeymourStateError(
                f"cannot {action} in session state {self._state.value!r}"
            )

    def _transition(self, new_state: SessionState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise SeymourStateError(
                f"illegal session transition {self._state.value} -> {new_state.value}"
            )
        _LOGGER.debug(
            "[%s] State: %s -> %s", self.username, self._state.value, new_state.value
        )
        self._state = new_state

    @contextmanager
    def _exchange(self, records: list[Any] | None = None) -> Iterator[None]:
        """Move to FAILED on any error raised inside the block."""
        try:
            yield
        except BaseException as err:
            _LOGGER.debug(
                "[%s] Session failed in state %s: %s",
                self.username,
                self._state.value,
                err,
            )
            self._state = SessionState.FAILED
            if isinstance(err, SeymourClientError) and records is not None:
                err.records = list(records)
            raise


async def fetch_unread(config: SeymourConfig, *, mark_read: bool = True) -> list[Entry]:
    """Connect, list unread entries and release the connection."""
    reader, writer = await open_connection(config.host_port, timeout=config.timeout)
    try:
        session = SeymourSession(reader, writer, config.user)
        return await session.list_unread(mark_read=mark_read)
    finally:
        await writer.close()


async def fetch_subscriptions(config: SeymourConfig) -> list[Subscription]:
    """Connect, list subscriptions and release the connection."""
    reader, writer = await open_connection(config.host_port, timeout=config.timeout)
    try:
        session = SeymourSession(reader, writer, config.user)
        return await session.list_subscriptions()
    finally:
        await writer.close()
