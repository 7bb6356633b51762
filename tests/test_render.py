"""Tests for result rendering."""

from seymour_client.render import (
    NO_ENTRIES_MESSAGE,
    NO_SUBSCRIPTIONS_MESSAGE,
    render_entries,
    render_subscriptions,
    render_table,
)
from seymour_client.session import Entry, Subscription


def test_render_table_aligns_columns():
    """Test columns are padded to their widest cell."""
    table = render_table(("url", "title"), [("gemini://a/b", "x"), ("g", "longer")])
    assert table.splitlines() == [
        "url          | title",
        "-------------+-------",
        "gemini://a/b | x",
        "g            | longer",
    ]


def test_render_entries():
    """Test entries render a count line followed by the table."""
    entries = [Entry(id=1, full_url="gemini://a/1", title="One")]
    lines = render_entries(entries, marked_read=False).splitlines()
    assert lines[0] == "1 new item(s)"
    assert lines[1].split() == ["url", "|", "title"]
    assert lines[3].split() == ["gemini://a/1", "|", "One"]


def test_render_entries_marked_read():
    """Test the summary notes when entries were marked as read."""
    entries = [Entry(id=1, full_url="u", title="t"), Entry(id=2, full_url="v", title="w")]
    assert render_entries(entries, marked_read=True).startswith("2 new item(s) (marked as read)")


def test_render_no_entries():
    """Test an empty listing renders the message and no table."""
    assert render_entries([], marked_read=True) == NO_ENTRIES_MESSAGE == "No new items"


def test_render_subscriptions():
    """Test subscriptions render a single url column."""
    subscriptions = [Subscription(id=1, url="gemini://a/feed")]
    assert render_subscriptions(subscriptions).splitlines() == [
        "url",
        "---------------",
        "gemini://a/feed",
    ]


def test_render_no_subscriptions():
    """Test an empty subscription list renders the message only."""
    assert render_subscriptions([]) == NO_SUBSCRIPTIONS_MESSAGE == "No subscriptions"
