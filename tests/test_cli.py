"""Tests for the CLI interface."""

import logging
from unittest.mock import MagicMock, patch

import click.testing
import pytest
import structlog

from credential_cache import CredentialManager
from credential_cache.cli import cli
from credential_cache.storage import CredentialStore, CredentialStoreError, InMemoryStore

URL = "https://acct.example.com:443/"
HOST = "acct.example.com"


@pytest.fixture
def cli_runner():
    """Create a CLI test runner."""
    return click.testing.CliRunner()


@pytest.fixture(autouse=True)
def mock_logging():
    """Keep the CLI from touching the real log directory."""
    # With setup_logging patched out, keep unconfigured structlog from
    # printing debug events into the captured CLI output.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING)
    )
    with patch("credential_cache.cli.cli.setup_logging") as mock_setup:
        yield mock_setup


@pytest.fixture
def mock_audit():
    with patch("credential_cache.cli.cli.audit_event") as mock:
        yield mock


@pytest.fixture
def memory_store():
    """Back the CLI with an in-memory store."""
    store = InMemoryStore()
    manager = CredentialManager(store)
    with patch(
        "credential_cache.cli.cli.initialize_credential_manager", return_value=manager
    ):
        yield store


def test_status(cli_runner, memory_store, mock_audit):
    """status shows the backend and its state."""
    result = cli_runner.invoke(cli, ["status"])
    assert result.exit_code == 0
    assert "memory" in result.output
    assert "active" in result.output
    assert mock_audit.call_args[1]["event_type"] == "backend.select"


def test_status_inert(cli_runner, mock_audit, monkeypatch):
    """A disabled cache is reported as inert."""
    monkeypatch.setenv("CREDENTIAL_CACHE_BACKEND", "none")
    result = cli_runner.invoke(cli, ["status"])
    assert result.exit_code == 0
    assert "inert" in result.output


def test_store_and_get(cli_runner, memory_store, mock_audit):
    """A stored token is printed by get."""
    result = cli_runner.invoke(cli, ["store", URL, "alice", "--token", "tok-123"])
    assert result.exit_code == 0
    assert "Cached token for alice" in result.output
    assert memory_store.get_credential(HOST, "alice") == "tok-123"
    assert mock_audit.call_args[1]["success"] is True

    result = cli_runner.invoke(cli, ["get", URL, "alice"])
    assert result.exit_code == 0
    assert result.output.strip() == "tok-123"


def test_store_prompts_for_token(cli_runner, memory_store, mock_audit):
    """The token is prompted for when not given."""
    result = cli_runner.invoke(cli, ["store", URL, "alice"], input="tok-456\n")
    assert result.exit_code == 0
    assert "tok-456" not in result.output
    assert memory_store.get_credential(HOST, "alice") == "tok-456"


def test_get_missing(cli_runner, memory_store, mock_audit):
    """A missing token exits with an error."""
    result = cli_runner.invoke(cli, ["get", URL, "bob"])
    assert result.exit_code != 0
    assert "No cached token" in result.output
    assert mock_audit.call_args[1]["success"] is False


def test_get_malformed_url(cli_runner, memory_store, mock_audit):
    """A malformed URL is reported as a CLI error."""
    result = cli_runner.invoke(cli, ["get", "not a url", "alice"])
    assert result.exit_code != 0
    assert "Invalid serverUrl" in result.output
    assert mock_audit.call_args[1]["event_type"] == "error.credential"


def test_store_malformed_url(cli_runner, memory_store, mock_audit):
    """A malformed URL on store is reported as a CLI error."""
    result = cli_runner.invoke(cli, ["store", "not a url", "alice", "--token", "t"])
    assert result.exit_code != 0
    assert "Invalid serverUrl" in result.output


def test_delete(cli_runner, memory_store, mock_audit):
    """delete removes the entry for a host and user."""
    memory_store.set_credential(HOST, "alice", "tok-123")
    result = cli_runner.invoke(cli, ["delete", HOST, "alice"])
    assert result.exit_code == 0
    assert memory_store.get_credential(HOST, "alice") is None
    assert mock_audit.call_args[1]["event_type"] == "credential.delete"


def test_log_options_are_passed(cli_runner, memory_store, mock_audit, mock_logging, tmp_path):
    """--log-level and --log-dir configure logging."""
    result = cli_runner.invoke(
        cli, ["--log-level", "debug", "--log-dir", str(tmp_path), "status"]
    )
    assert result.exit_code == 0
    mock_logging.assert_called_once_with(log_level="DEBUG", base_dir=tmp_path)


def test_store_write_failure_is_reported(cli_runner, mock_audit):
    """A write the backend rejected is not reported as cached."""
    failing = MagicMock(spec=CredentialStore)
    failing.set_credential.side_effect = CredentialStoreError("keychain locked")
    with patch(
        "credential_cache.cli.cli.initialize_credential_manager",
        return_value=CredentialManager(failing),
    ):
        result = cli_runner.invoke(cli, ["store", URL, "alice", "--token", "tok-123"])

    assert result.exit_code == 0
    assert "Cached token" not in result.output
    assert "nothing was cached" in result.output
    assert mock_audit.call_args[1]["event_type"] == "credential.write"
    assert mock_audit.call_args[1]["success"] is False
