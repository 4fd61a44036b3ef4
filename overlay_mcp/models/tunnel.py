"""Tunnel data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TunnelType(str, Enum):
    """Supported overlay encapsulations."""

    GRE = "gre"
    VXLAN = "vxlan"


class TunnelStatus(str, Enum):
    """Tunnel lifecycle status.

    Only ACTIVE is ever written: a tunnel is persisted once both endpoints
    accepted their commands, and nothing observes it afterwards.
    """

    ACTIVE = "active"


@dataclass
class TunnelSpec:
    """Operator request for a new tunnel."""

    tunnel_type: str
    local_node_id: str
    remote_node_id: str
    local_ip: str
    remote_ip: str
    name: str | None = None

    def validate(self) -> None:
        """Check required fields and the distinct-endpoint invariant.

        Raises:
            ValueError: If a field is missing or both ends are the same node
        """
        missing = [
            label
            for label, value in (
                ("tunnel_type", self.tunnel_type),
                ("local_node_id", self.local_node_id),
                ("remote_node_id", self.remote_node_id),
                ("local_ip", self.local_ip),
                ("remote_ip", self.remote_ip),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"Missing required tunnel configuration: {', '.join(missing)}")
        if self.local_node_id == self.remote_node_id:
            raise ValueError("A tunnel needs two different nodes")


@dataclass
class Tunnel:
    """A persisted point-to-point overlay link between two nodes."""

    id: str
    name: str
    tunnel_type: str
    local_node_id: str
    remote_node_id: str
    local_ip: str
    remote_ip: str
    status: TunnelStatus = TunnelStatus.ACTIVE
    interface: str | None = None
    vni: int | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def involves(self, node_id: str) -> bool:
        """Check whether the node is either end of this tunnel."""
        return node_id in (self.local_node_id, self.remote_node_id)
