"""Node management tools."""

from overlay_mcp.models import Credential, Node
from overlay_mcp.services import (
    DuplicateNode,
    NodeNotFound,
    NodeUnreachable,
    get_dependencies,
)


def format_node(node: Node) -> str:
    """One-line node description without credentials."""
    return f"{node.name} [{node.id}] -> {node.endpoint}"


async def add_node(
    name: str,
    address: str,
    username: str,
    port: int = 22,
    password: str | None = None,
    private_key: str | None = None,
) -> str:
    """Register a remote Linux host after verifying SSH access.

    Args:
        name: Display name for the node.
        address: Reachable address of the host; also used as the tunnel
            endpoint address.
        username: SSH login user (needs rights to run `ip`).
        port: SSH port (default: 22).
        password: SSH password. Provide exactly one of password/private_key.
        private_key: PEM-encoded private key.

    Returns:
        Confirmation with the new node id, or an error message.
    """
    try:
        credential = Credential(password=password, private_key=private_key)
        node = await get_dependencies().nodes.add_node(
            name, address, port, username, credential
        )
    except (ValueError, NodeUnreachable, DuplicateNode) as e:
        return f"Error: {e}"

    return f"Node registered: {format_node(node)}"


async def list_nodes() -> str:
    """List registered nodes, newest first.

    Returns:
        One line per node with id and SSH endpoint.
    """
    nodes = await get_dependencies().nodes.list_nodes()
    if not nodes:
        return "No nodes registered."
    return "\n".join(["Registered nodes:"] + [f"  {format_node(n)}" for n in nodes])


async def remove_node(node_id: str) -> str:
    """Remove a node and every tunnel that uses it.

    Tunnel interfaces are deleted on both ends on a best-effort basis;
    unreachable hosts do not block removal.

    Args:
        node_id: Id of the node to remove.

    Returns:
        Summary of what was removed, or an error message.
    """
    try:
        removed = await get_dependencies().nodes.remove_node(node_id)
    except NodeNotFound as e:
        return f"Error: {e}"

    return f"Node {node_id} removed along with {len(removed)} tunnel(s)."
