"""Client for the seymour feed aggregator line protocol."""

__version__ = "0.1.0"

from .config import SeymourConfig, load_config
from .errors import (
    SeymourAddressResolutionError,
    SeymourClientError,
    SeymourConfigError,
    SeymourConnectionClosed,
    SeymourConnectionError,
    SeymourParseError,
    SeymourProtocolViolation,
    SeymourStateError,
    SeymourTimeout,
)
from .session import (
    Entry,
    SeymourSession,
    SessionState,
    Subscription,
    fetch_subscriptions,
    fetch_unread,
)
from .transport import SeymourLineReader, SeymourLineWriter, open_connection

__all__ = [
    "Entry",
    "SeymourAddressResolutionError",
    "SeymourClientError",
    "SeymourConfig",
    "SeymourConfigError",
    "SeymourConnectionClosed",
    "SeymourConnectionError",
    "SeymourLineReader",
    "SeymourLineWriter",
    "SeymourParseError",
    "SeymourProtocolViolation",
    "SeymourSession",
    "SeymourStateError",
    "SeymourTimeout",
    "SessionState",
    "Subscription",
    "__version__",
    "fetch_subscriptions",
    "fetch_unread",
    "load_config",
    "open_connection",
]
