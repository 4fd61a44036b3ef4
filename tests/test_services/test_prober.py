"""Tests for the connectivity probe and SSH runner."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import asyncssh
import pytest

from overlay_mcp.models import Credential, Node
from overlay_mcp.services.prober import probe
from overlay_mcp.services.runner import SSHRunner


@pytest.fixture
def credential() -> Credential:
    """Password credential."""
    return Credential(password="secret")


@pytest.fixture
def mock_conn() -> MagicMock:
    """Mock asyncssh connection."""
    conn = MagicMock()
    conn.run = AsyncMock(return_value=MagicMock(stdout="", exit_status=0))
    conn.close = MagicMock()
    conn.wait_closed = AsyncMock()
    return conn


@pytest.mark.asyncio
async def test_probe_success_runs_nothing(credential: Credential, mock_conn: MagicMock) -> None:
    """A successful probe connects, runs no command, and closes."""
    with patch("asyncssh.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.return_value = mock_conn

        assert await probe("192.0.2.1", 22, "root", credential) is True

    mock_conn.run.assert_not_called()
    mock_conn.close.assert_called_once()


@pytest.mark.asyncio
async def test_probe_auth_failure_returns_false(credential: Credential) -> None:
    """Authentication failure yields False instead of raising."""
    with patch("asyncssh.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = asyncssh.PermissionDenied("Permission denied")

        assert await probe("192.0.2.1", 22, "root", credential) is False


@pytest.mark.asyncio
async def test_probe_unreachable_returns_false(credential: Credential) -> None:
    """Network errors yield False."""
    with patch("asyncssh.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = OSError("Network is unreachable")

        assert await probe("192.0.2.1", 22, "root", credential) is False


@pytest.mark.asyncio
async def test_runner_passes_node_fields(credential: Credential, mock_conn: MagicMock) -> None:
    """SSHRunner connects with the node's address, port and user."""
    node = Node(
        id="n1",
        name="alpha",
        address="192.0.2.9",
        port=2200,
        username="ops",
        credential=credential,
    )
    runner = SSHRunner(connect_timeout=5.0, known_hosts="/tmp/known_hosts")

    with patch("asyncssh.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.return_value = mock_conn

        result = await runner.run(node, "ip link show")

    assert result.host == "192.0.2.9"
    args, kwargs = mock_connect.call_args
    assert args == ("192.0.2.9",)
    assert kwargs["port"] == 2200
    assert kwargs["username"] == "ops"
    assert kwargs["known_hosts"] == "/tmp/known_hosts"


@pytest.mark.asyncio
async def test_runner_check_uses_probe(credential: Credential) -> None:
    """SSHRunner.check forwards to the probe with its own settings."""
    runner = SSHRunner(connect_timeout=3.0)

    with patch("overlay_mcp.services.runner.probe", new_callable=AsyncMock) as mock_probe:
        mock_probe.return_value = True

        assert await runner.check("192.0.2.1", 22, "root", credential) is True

    mock_probe.assert_awaited_once_with(
        "192.0.2.1", 22, "root", credential, connect_timeout=3.0, known_hosts=None
    )


def test_runner_warns_without_known_hosts(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Disabling host key verification is logged as a warning."""
    monkeypatch.setattr(logging.getLogger("overlay_mcp"), "propagate", True)
    with caplog.at_level(logging.WARNING, logger="overlay_mcp.services.runner"):
        SSHRunner()

    assert "verification DISABLED" in caplog.text
