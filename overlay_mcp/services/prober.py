"""Connectivity probe used before a node is admitted."""

import logging

from overlay_mcp.models import Credential
from overlay_mcp.services.session import (
    DEFAULT_CONNECT_TIMEOUT,
    ConnectionError,
    RemoteSession,
)

logger = logging.getLogger(__name__)


async def probe(
    host: str,
    port: int,
    username: str,
    credential: Credential,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    known_hosts: str | None = None,
) -> bool:
    """Check that a session can be opened with these parameters.

    Opens a session without running anything and closes it straight away.
    Never raises for connection problems.

    Returns:
        True if connect and authentication succeeded, False otherwise.
    """
    try:
        async with RemoteSession(
            host,
            port,
            username,
            credential,
            connect_timeout=connect_timeout,
            known_hosts=known_hosts,
        ):
            pass
    except ConnectionError as e:
        logger.warning("Probe of %s@%s:%d failed: %s", username, host, port, e.original_error)
        return False

    logger.info("Probe of %s@%s:%d succeeded", username, host, port)
    return True
