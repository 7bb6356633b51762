"""Plain-text rendering of listing results."""

from __future__ import annotations

from collections.abc import Sequence

from .session import Entry, Subscription

NO_ENTRIES_MESSAGE = "No new items"
NO_SUBSCRIPTIONS_MESSAGE = "No subscriptions"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render a borderless table with a rule under the header row."""
    widths = [len(header) for header in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))

    def _line(cells: Sequence[str]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [_line(headers), "-+-".join("-" * width for width in widths)]
    lines.extend(_line(row) for row in rows)
    return "\n".join(lines)


def render_entries(entries: Sequence[Entry], *, marked_read: bool) -> str:
    """Render unread entries, or the no-items message when there are none."""
    if not entries:
        return NO_ENTRIES_MESSAGE

    summary = f"{len(entries)} new item(s)"
    if marked_read:
        summary += " (marked as read)"
    table = render_table(("url", "title"), [(e.full_url, e.title) for e in entries])
    return f"{summary}\n{table}"


def render_subscriptions(subscriptions: Sequence[Subscription]) -> str:
    """Render subscriptions, or the no-subscriptions message when there are none."""
    if not subscriptions:
        return NO_SUBSCRIPTIONS_MESSAGE
    return render_table(("url",), [(s.url,) for s in subscriptions])
