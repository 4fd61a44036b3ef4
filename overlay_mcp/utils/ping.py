"""TCP reachability checks for registered nodes."""

import asyncio
from collections.abc import Iterable

from overlay_mcp.models import Node


async def check_port_open(address: str, port: int, timeout: float = 2.0) -> bool:
    """Check if a TCP port accepts connections.

    Args:
        address: Host to check.
        port: Port to connect to (usually the node's SSH port).
        timeout: Connection timeout in seconds.

    Returns:
        True if the port accepted a connection, False otherwise.
    """
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(address, port),
            timeout=timeout,
        )
        writer.close()
        await writer.wait_closed()
        return True
    except (TimeoutError, OSError):
        return False


async def check_nodes_online(
    nodes: Iterable[Node],
    timeout: float = 2.0,
) -> dict[str, bool]:
    """Check the SSH ports of several nodes concurrently.

    Returns:
        Dict of {node id: reachable}.
    """
    nodes = list(nodes)
    if not nodes:
        return {}

    results = await asyncio.gather(
        *(check_port_open(node.address, node.port, timeout) for node in nodes)
    )
    return {node.id: online for node, online in zip(nodes, results)}
