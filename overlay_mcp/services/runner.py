"""SSH-backed RemoteRunner used by the orchestrators."""

import logging

from overlay_mcp.models import Credential, Node, SessionResult
from overlay_mcp.services.prober import probe
from overlay_mcp.services.session import DEFAULT_CONNECT_TIMEOUT, run_remote_command

logger = logging.getLogger(__name__)


class SSHRunner:
    """Runs commands on nodes, one fresh session per call."""

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        known_hosts: str | None = None,
    ) -> None:
        """Initialize runner.

        Args:
            connect_timeout: Seconds allowed for connect + authentication
            known_hosts: Path to known_hosts file, or None to disable verification
        """
        self.connect_timeout = connect_timeout
        self.known_hosts = known_hosts

        if known_hosts is None:
            logger.warning(
                "SSH host key verification DISABLED - vulnerable to MITM attacks. "
                "Set OVERLAY_KNOWN_HOSTS to a valid known_hosts file path."
            )
        else:
            logger.info("SSH host key verification enabled (known_hosts=%s)", known_hosts)

    async def run(self, node: Node, command: str) -> SessionResult:
        """Run command on node.

        Raises:
            ConnectionError: If the session could not be established
            ExecutionError: If the command could not be dispatched
        """
        logger.info("Running on %s (%s): %s", node.name, node.endpoint, command)
        return await run_remote_command(
            node.address,
            node.port,
            node.username,
            node.credential,
            command,
            connect_timeout=self.connect_timeout,
            known_hosts=self.known_hosts,
        )

    async def check(
        self,
        host: str,
        port: int,
        username: str,
        credential: Credential,
    ) -> bool:
        """Probe connectivity with this runner's timeout and host key policy."""
        return await probe(
            host,
            port,
            username,
            credential,
            connect_timeout=self.connect_timeout,
            known_hosts=self.known_hosts,
        )
