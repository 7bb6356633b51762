"""
Unit tests for the seymour-cli commands.
"""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from seymour_client.cli import app, format_error_chain
from seymour_client.errors import (
    SeymourConnectionError,
    SeymourProtocolViolation,
)
from seymour_client.session import Entry, Subscription

runner = CliRunner()


@pytest.fixture
def config_file(write_config):
    return write_config("host_port: localhost:2001\nuser: alice\n")


class TestCLIRoot:
    def test_help_shows_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "unread" in result.output
        assert "list-subscriptions" in result.output


class TestUnread:
    """Test the `seymour-cli unread` command."""

    @patch("seymour_client.cli.fetch_unread", new_callable=AsyncMock)
    def test_unread_marks_read_by_default(self, mock_fetch, config_file):
        mock_fetch.return_value = [Entry(id=1, full_url="gemini://a/1", title="One")]
        result = runner.invoke(app, ["--config-file", str(config_file), "unread"])
        assert result.exit_code == 0
        assert "1 new item(s) (marked as read)" in result.output
        assert "gemini://a/1" in result.output
        config = mock_fetch.call_args.args[0]
        assert config.user == "alice"
        assert mock_fetch.call_args.kwargs == {"mark_read": True}

    @patch("seymour_client.cli.fetch_unread", new_callable=AsyncMock)
    def test_unread_no_mark_read(self, mock_fetch, config_file):
        mock_fetch.return_value = []
        result = runner.invoke(
            app, ["--config-file", str(config_file), "unread", "--no-mark-read"]
        )
        assert result.exit_code == 0
        assert "No new items" in result.output
        assert mock_fetch.call_args.kwargs == {"mark_read": False}

    @patch("seymour_client.cli.fetch_unread", new_callable=AsyncMock)
    def test_timeout_override(self, mock_fetch, config_file):
        mock_fetch.return_value = []
        result = runner.invoke(
            app, ["--config-file", str(config_file), "--timeout", "2.5", "unread"]
        )
        assert result.exit_code == 0
        assert mock_fetch.call_args.args[0].timeout == 2.5

    @patch("seymour_client.cli.fetch_unread", new_callable=AsyncMock)
    def test_protocol_violation_exits_nonzero(self, mock_fetch, config_file):
        mock_fetch.side_effect = SeymourProtocolViolation(
            "unexpected response to MARK_READ 2 (expected AckMarkRead): END_LIST",
            records=[Entry(id=1, full_url="gemini://a/1", title="One")],
        )
        result = runner.invoke(app, ["--config-file", str(config_file), "unread"])
        assert result.exit_code == 1
        assert "unexpected response to MARK_READ 2" in result.output
        assert "gemini://a/1" not in result.output

    @patch("seymour_client.cli.fetch_unread", new_callable=AsyncMock)
    def test_missing_config_never_connects(self, mock_fetch, tmp_path):
        result = runner.invoke(
            app, ["--config-file", str(tmp_path / "absent.yaml"), "unread"]
        )
        assert result.exit_code == 1
        assert "failed to read config file" in result.output
        mock_fetch.assert_not_called()


    def test_username_with_whitespace_never_connects(self, write_config):
        config_file = write_config("host_port: localhost:2001\nuser: alice smith\n")
        with patch(
            "seymour_client.session.open_connection", new_callable=AsyncMock
        ) as mock_open:
            result = runner.invoke(app, ["--config-file", str(config_file), "unread"])
        assert result.exit_code == 1
        assert "Error: 'user' must not contain whitespace" in result.output
        assert not isinstance(result.exception, ValueError)
        mock_open.assert_not_called()


class TestListSubscriptions:
    """Test the `seymour-cli list-subscriptions` command."""

    @patch("seymour_client.cli.fetch_subscriptions", new_callable=AsyncMock)
    def test_list(self, mock_fetch, config_file):
        mock_fetch.return_value = [Subscription(id=1, url="gemini://a/feed")]
        result = runner.invoke(
            app, ["--config-file", str(config_file), "list-subscriptions"]
        )
        assert result.exit_code == 0
        assert "gemini://a/feed" in result.output

    @patch("seymour_client.cli.fetch_subscriptions", new_callable=AsyncMock)
    def test_alias_and_empty(self, mock_fetch, config_file):
        mock_fetch.return_value = []
        result = runner.invoke(app, ["--config-file", str(config_file), "subscriptions"])
        assert result.exit_code == 0
        assert "No subscriptions" in result.output
        assert "url" not in result.output


def test_format_error_chain():
    try:
        try:
            raise ConnectionRefusedError("Connection refused")
        except OSError as err:
            raise SeymourConnectionError("failed to connect to localhost:2001") from err
    except SeymourConnectionError as err:
        chain = format_error_chain(err)

    assert chain.splitlines() == [
        "Error: failed to connect to localhost:2001",
        "  caused by: Connection refused",
    ]
