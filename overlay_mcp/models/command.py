"""Command execution data models."""

from dataclasses import dataclass


@dataclass
class SessionResult:
    """Result of a single remote session.

    ``output`` holds stdout and stderr merged in arrival order. The exit
    status is informational; a session that dispatched its command is
    successful regardless of what the command returned.
    """

    host: str
    command: str
    output: str
    exit_status: int | None = None


@dataclass(frozen=True)
class CommandPair:
    """Shell commands for both ends of a tunnel.

    The overlay addresses are the normalized values used in the commands.
    """

    tunnel_type: str
    interface: str
    local_command: str
    remote_command: str
    local_overlay_ip: str
    remote_overlay_ip: str
    vni: int | None = None
