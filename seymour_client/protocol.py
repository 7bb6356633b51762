"""Wire vocabulary and line codec for the seymour protocol.

Every message is one UTF-8 text line. Commands travel client -> server,
responses server -> client:

    USER <username>                      ACK_USER <id>
    LIST_UNREAD                          START_ENTRY_LIST
    LIST_SUBSCRIPTIONS                   ENTRY <id> <feed_id> <feed_url> <url> <title...>
    MARK_READ <id>                       START_SUBSCRIPTION_LIST
                                         SUBSCRIPTION <id> <url>
                                         END_LIST
                                         ACK_MARK_READ
                                         ERROR <message...>

Tokens are separated by a single space. The trailing free-text field of
ENTRY and ERROR takes the rest of the line and may contain spaces or be
empty. Formatting and parsing are kept symmetric so a server built on this
module speaks the same grammar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from .errors import SeymourParseError

LINE_TERMINATOR = b"\r\n"


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class User:
    """Authenticate as ``username``."""

    username: str


@dataclass(frozen=True)
class ListUnread:
    """Request the unread entries of the authenticated user."""


@dataclass(frozen=True)
class ListSubscriptions:
    """Request the subscriptions of the authenticated user."""


@dataclass(frozen=True)
class MarkRead:
    """Mark a single entry as read."""

    id: int


Command = User | ListUnread | ListSubscriptions | MarkRead


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AckUser:
    """Authentication accepted."""

    id: int


@dataclass(frozen=True)
class StartEntryList:
    """Opens a list of Entry responses."""


@dataclass(frozen=True)
class StartSubscriptionList:
    """Opens a list of Subscription responses."""


@dataclass(frozen=True)
class EndList:
    """Closes the list opened by the preceding start delimiter."""


@dataclass(frozen=True)
class EntryResponse:
    """One unread feed entry."""

    id: int
    feed_id: int
    feed_url: str
    url: str
    title: str


@dataclass(frozen=True)
class SubscriptionResponse:
    """One subscribed feed."""

    id: int
    url: str


@dataclass(frozen=True)
class AckMarkRead:
    """Entry marked as read."""


@dataclass(frozen=True)
class Error:
    """Server-reported failure."""

    message: str


Response = (
    AckUser
    | StartEntryList
    | StartSubscriptionList
    | EndList
    | EntryResponse
    | SubscriptionResponse
    | AckMarkRead
    | Error
)


# -----------------------------------------------------------------------------
# Formatting
# -----------------------------------------------------------------------------


def is_token(value: str) -> bool:
    """Return True when ``value`` is a non-empty, whitespace-free token."""
    return bool(value) and not any(ch.isspace() for ch in value)


def _token(value: str, field: str) -> str:
    """Validate a single whitespace-free token."""
    if not is_token(value):
        raise ValueError(f"{field} must be a non-empty token without whitespace: {value!r}")
    return value


def _text(value: str, field: str) -> str:
    """Validate a trailing free-text field."""
    if "\r" in value or "\n" in value:
        raise ValueError(f"{field} must not contain line breaks: {value!r}")
    return value


def format_command(command: Command) -> str:
    """Render a command to its wire text, without terminator."""
    if isinstance(command, User):
        return f"USER {_token(command.username, 'username')}"
    if isinstance(command, ListUnread):
        return "LIST_UNREAD"
    if isinstance(command, ListSubscriptions):
        return "LIST_SUBSCRIPTIONS"
    if isinstance(command, MarkRead):
        return f"MARK_READ {command.id}"
    assert_never(command)


def encode_command(command: Command) -> bytes:
    """Render a command to a CRLF-terminated wire line."""
    return format_command(command).encode("utf-8") + LINE_TERMINATOR


def format_response(response: Response) -> str:
    """Render a response to its wire text, without terminator."""
    if isinstance(response, AckUser):
        return f"ACK_USER {response.id}"
    if isinstance(response, StartEntryList):
        return "START_ENTRY_LIST"
    if isinstance(response, StartSubscriptionList):
        return "START_SUBSCRIPTION_LIST"
    if isinstance(response, EndList):
        return "END_LIST"
    if isinstance(response, EntryResponse):
        return (
            f"ENTRY {response.id} {response.feed_id} "
            f"{_token(response.feed_url, 'feed_url')} {_token(response.url, 'url')} "
            f"{_text(response.title, 'title')}"
        )
    if isinstance(response, SubscriptionResponse):
        return f"SUBSCRIPTION {response.id} {_token(response.url, 'url')}"
    if isinstance(response, AckMarkRead):
        return "ACK_MARK_READ"
    if isinstance(response, Error):
        return f"ERROR {_text(response.message, 'message')}"
    assert_never(response)


def encode_response(response: Response) -> bytes:
    """Render a response to a CRLF-terminated wire line."""
    return format_response(response).encode("utf-8") + LINE_TERMINATOR


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------


def _int(value: str, field: str, line: str) -> int:
    # int() alone would accept "+1", " 1" and "1_0"
    digits = value[1:] if value.startswith("-") else value
    if not digits.isascii() or not digits.isdigit():
        raise SeymourParseError(f"invalid {field} {value!r} in line {line!r}", line)
    return int(value)


def _parsed_token(value: str, field: str, line: str) -> str:
    if not is_token(value):
        raise SeymourParseError(f"invalid {field} {value!r} in line {line!r}", line)
    return value


def _fields(rest: str, count: int, keyword: str, line: str) -> list[str]:
    """Split ``rest`` into exactly ``count`` fields; the last takes the remainder."""
    parts = rest.split(" ", count - 1) if count > 1 else [rest]
    if len(parts) != count:
        raise SeymourParseError(
            f"{keyword} expects {count} field(s), got {len(parts)} in line {line!r}", line
        )
    for part in parts[: count - 1]:
        if not part:
            raise SeymourParseError(f"empty field in line {line!r}", line)
    return parts


def _split(line: str) -> tuple[str, str | None]:
    keyword, sep, rest = line.partition(" ")
    return keyword, (rest if sep else None)


def _no_args(keyword: str, rest: str | None, line: str) -> None:
    if rest is not None:
        raise SeymourParseError(f"{keyword} takes no arguments: {line!r}", line)


def _need_args(keyword: str, rest: str | None, line: str) -> str:
    if rest is None:
        raise SeymourParseError(f"{keyword} is missing arguments: {line!r}", line)
    return rest


def parse_command(line: str) -> Command:
    """Parse a terminator-stripped wire line into a Command."""
    keyword, rest = _split(line)
    if keyword == "USER":
        (username,) = _fields(_need_args(keyword, rest, line), 1, keyword, line)
        _parsed_token(username, "username", line)
        return User(username=username)
    if keyword == "LIST_UNREAD":
        _no_args(keyword, rest, line)
        return ListUnread()
    if keyword == "LIST_SUBSCRIPTIONS":
        _no_args(keyword, rest, line)
        return ListSubscriptions()
    if keyword == "MARK_READ":
        (entry_id,) = _fields(_need_args(keyword, rest, line), 1, keyword, line)
        return MarkRead(id=_int(entry_id, "id", line))
    raise SeymourParseError(f"unknown command: {line!r}", line)


def decode_response(line: str) -> Response:
    """Parse a terminator-stripped wire line into a Response.

    Raises:
        SeymourParseError: If the line matches no response grammar.
    """
    keyword, rest = _split(line)
    if keyword == "ACK_USER":
        (user_id,) = _fields(_need_args(keyword, rest, line), 1, keyword, line)
        return AckUser(id=_int(user_id, "id", line))
    if keyword == "START_ENTRY_LIST":
        _no_args(keyword, rest, line)
        return StartEntryList()
    if keyword == "START_SUBSCRIPTION_LIST":
        _no_args(keyword, rest, line)
        return StartSubscriptionList()
    if keyword == "END_LIST":
        _no_args(keyword, rest, line)
        return EndList()
    if keyword == "ENTRY":
        entry_id, feed_id, feed_url, url, title = _fields(
            _need_args(keyword, rest, line), 5, keyword, line
        )
        return EntryResponse(
            id=_int(entry_id, "id", line),
            feed_id=_int(feed_id, "feed_id", line),
            feed_url=_parsed_token(feed_url, "feed_url", line),
            url=_parsed_token(url, "url", line),
            title=title,
        )
    if keyword == "SUBSCRIPTION":
        sub_id, url = _fields(_need_args(keyword, rest, line), 2, keyword, line)
        return SubscriptionResponse(
            id=_int(sub_id, "id", line), url=_parsed_token(url, "url", line)
        )
    if keyword == "ACK_MARK_READ":
        _no_args(keyword, rest, line)
        return AckMarkRead()
    if keyword == "ERROR":
        return Error(message=rest or "")
    raise SeymourParseError(f"unknown response: {line!r}", line)
