"""One-shot SSH sessions.

A session opens one authenticated connection, runs at most one command to
natural termination and closes, on every exit path. Success means the
transport connected and the command was dispatched; the command's own exit
status is recorded but never turns a session into a failure, so callers
must judge correctness from the output.

Only the connect phase is bounded by a timeout. A dispatched command that
never exits keeps the session open.
"""

import asyncio
import logging
from typing import Any

import asyncssh

from overlay_mcp.models import Credential, SessionResult

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0


class ConnectionError(Exception):
    """Failed to establish an authenticated SSH connection."""

    def __init__(self, host: str, original_error: Exception | str):
        """Initialize connection error.

        Args:
            host: Address that was being connected to
            original_error: Underlying exception or reason
        """
        self.host = host
        self.original_error = original_error
        super().__init__(f"Cannot connect to {host}: {original_error}")


class ExecutionError(Exception):
    """Connected, but the command could not be dispatched."""

    def __init__(self, host: str, command: str, original_error: Exception | str):
        """Initialize execution error.

        Args:
            host: Address the session was connected to
            command: Command that failed to dispatch
            original_error: Underlying exception or reason
        """
        self.host = host
        self.command = command
        self.original_error = original_error
        super().__init__(f"Cannot run command on {host}: {original_error}")


def _decode(data: Any) -> str:
    """Normalize asyncssh output (str, bytes or None) to str."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return str(data)


class RemoteSession:
    """Async context manager around a single SSH connection.

    Example:
        async with RemoteSession("10.0.0.1", 22, "root", cred) as session:
            result = await session.run("ip -br link")
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        credential: Credential,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        known_hosts: str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.credential = credential
        self.connect_timeout = connect_timeout
        self.known_hosts = known_hosts
        self._conn: asyncssh.SSHClientConnection | None = None

    def _connect_options(self) -> dict[str, Any]:
        """Build asyncssh.connect keyword arguments for the credential."""
        options: dict[str, Any] = {
            "port": self.port,
            "username": self.username,
            "known_hosts": self.known_hosts,
        }
        if self.credential.password:
            options["password"] = self.credential.password
            # Password only: no agent or default key files
            options["client_keys"] = None
        else:
            options["client_keys"] = [
                asyncssh.import_private_key(self.credential.private_key)
            ]
        return options

    async def connect(self) -> None:
        """Open the connection.

        Raises:
            ConnectionError: On auth failure, network failure, bad key or
                connect timeout
        """
        logger.debug(
            "Opening SSH session to %s@%s:%d (auth=%s, timeout=%ss)",
            self.username,
            self.host,
            self.port,
            self.credential.kind,
            self.connect_timeout,
        )
        try:
            options = self._connect_options()
            self._conn = await asyncio.wait_for(
                asyncssh.connect(self.host, **options),
                timeout=self.connect_timeout,
            )
        except TimeoutError as e:
            raise ConnectionError(
                self.host, f"connect timed out after {self.connect_timeout}s"
            ) from e
        except (asyncssh.Error, asyncssh.KeyImportError, OSError) as e:
            raise ConnectionError(self.host, e) from e

    async def run(self, command: str) -> SessionResult:
        """Run command to completion and capture merged stdout/stderr.

        Raises:
            ExecutionError: If the channel could not be opened or the
                connection dropped while dispatching
        """
        if self._conn is None:
            raise ExecutionError(self.host, command, "session is not connected")

        try:
            result = await self._conn.run(command, check=False, stderr=asyncssh.STDOUT)
        except (asyncssh.Error, OSError) as e:
            raise ExecutionError(self.host, command, e) from e

        exit_status = result.exit_status
        if exit_status:
            logger.debug(
                "Command on %s exited with status %s (session still successful)",
                self.host,
                exit_status,
            )

        return SessionResult(
            host=self.host,
            command=command,
            output=_decode(result.stdout),
            exit_status=exit_status,
        )

    async def close(self) -> None:
        """Close the connection if open."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        conn.close()
        await conn.wait_closed()
        logger.debug("Closed SSH session to %s:%d", self.host, self.port)

    async def __aenter__(self) -> "RemoteSession":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


async def run_remote_command(
    host: str,
    port: int,
    username: str,
    credential: Credential,
    command: str,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    known_hosts: str | None = None,
) -> SessionResult:
    """Open a session, run one command, close.

    Args:
        host: Address to connect to
        port: SSH port
        username: Login user
        credential: Password or private key
        command: Shell command to run
        connect_timeout: Seconds allowed for connect + authentication
        known_hosts: known_hosts path, or None to skip host key checks

    Returns:
        SessionResult with merged output and exit status

    Raises:
        ConnectionError: If the connection could not be established
        ExecutionError: If the command could not be dispatched
    """
    async with RemoteSession(
        host,
        port,
        username,
        credential,
        connect_timeout=connect_timeout,
        known_hosts=known_hosts,
    ) as session:
        return await session.run(command)
