"""Shell command synthesis for GRE and VXLAN tunnels.

Each side's command names the other side's real address as its peer, so a
pair only forms a working link when both commands run. Nothing here touches
the network.
"""

import random
from typing import Final

from overlay_mcp.models import CommandPair, TunnelType
from overlay_mcp.protocols import NameAllocator
from overlay_mcp.utils.validation import (
    validate_host,
    validate_interface_name,
    validate_overlay_ip,
)

GRE_TTL: Final[int] = 255
GRE_PREFIX_LEN: Final[int] = 30
VXLAN_PREFIX_LEN: Final[int] = 24
VXLAN_DSTPORT: Final[int] = 4789
VNI_MIN: Final[int] = 100
VNI_MAX: Final[int] = 10100  # exclusive
SUFFIX_MAX: Final[int] = 1000  # exclusive

# Interface name prefixes the synthesizer can produce
GENERATED_PREFIXES: Final[tuple[str, ...]] = tuple(t.value for t in TunnelType)


class UnsupportedTunnelType(ValueError):
    """Tunnel type is not one of the supported encapsulations."""

    def __init__(self, tunnel_type: str):
        self.tunnel_type = tunnel_type
        supported = ", ".join(GENERATED_PREFIXES)
        super().__init__(f"Unsupported tunnel type: {tunnel_type!r} (supported: {supported})")


class RandomAllocator:
    """Draws interface suffixes and VNIs uniformly at random.

    No uniqueness tracking: two tunnels may receive the same name or VNI.
    Pass a seed for reproducible output.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def interface_name(self, tunnel_type: str) -> str:
        return f"{tunnel_type}t{self._rng.randrange(SUFFIX_MAX)}"

    def vni(self) -> int:
        return self._rng.randrange(VNI_MIN, VNI_MAX)


def parse_tunnel_type(tunnel_type: str) -> TunnelType:
    """Convert a user-supplied type string to TunnelType.

    Raises:
        UnsupportedTunnelType: If the type is not supported
    """
    try:
        return TunnelType(str(tunnel_type).lower())
    except ValueError:
        raise UnsupportedTunnelType(tunnel_type) from None


def _gre_command(interface: str, own: str, peer: str, overlay_ip: str) -> str:
    return (
        f"ip tunnel add {interface} mode gre remote {peer} local {own} ttl {GRE_TTL}"
        f" && ip link set {interface} up"
        f" && ip addr add {overlay_ip}/{GRE_PREFIX_LEN} dev {interface}"
    )


def _vxlan_command(interface: str, vni: int, own: str, peer: str, overlay_ip: str) -> str:
    return (
        f"ip link add {interface} type vxlan id {vni} remote {peer} local {own}"
        f" dstport {VXLAN_DSTPORT}"
        f" && ip link set {interface} up"
        f" && ip addr add {overlay_ip}/{VXLAN_PREFIX_LEN} dev {interface}"
    )


def synthesize(
    tunnel_type: str,
    local_address: str,
    remote_address: str,
    local_overlay_ip: str,
    remote_overlay_ip: str,
    allocator: NameAllocator,
) -> CommandPair:
    """Build the command pair that creates a tunnel on both endpoints.

    Args:
        tunnel_type: "gre" or "vxlan"
        local_address: Reachable address of the local node
        remote_address: Reachable address of the remote node
        local_overlay_ip: Address to assign on the local interface
        remote_overlay_ip: Address to assign on the remote interface
        allocator: Source of the interface name and VNI

    Returns:
        CommandPair with both commands, the interface name and the VNI

    Raises:
        UnsupportedTunnelType: If tunnel_type is not supported
        ValueError: If an address is not acceptable in a shell command
    """
    kind = parse_tunnel_type(tunnel_type)
    local_address = validate_host(local_address)
    remote_address = validate_host(remote_address)
    local_overlay_ip = validate_overlay_ip(local_overlay_ip)
    remote_overlay_ip = validate_overlay_ip(remote_overlay_ip)

    interface = validate_interface_name(allocator.interface_name(kind.value))

    if kind is TunnelType.GRE:
        return CommandPair(
            tunnel_type=kind.value,
            interface=interface,
            local_command=_gre_command(interface, local_address, remote_address, local_overlay_ip),
            remote_command=_gre_command(interface, remote_address, local_address, remote_overlay_ip),
            local_overlay_ip=local_overlay_ip,
            remote_overlay_ip=remote_overlay_ip,
        )

    vni = allocator.vni()
    return CommandPair(
        tunnel_type=kind.value,
        interface=interface,
        local_command=_vxlan_command(interface, vni, local_address, remote_address, local_overlay_ip),
        remote_command=_vxlan_command(interface, vni, remote_address, local_address, remote_overlay_ip),
        local_overlay_ip=local_overlay_ip,
        remote_overlay_ip=remote_overlay_ip,
        vni=vni,
    )


def is_generated_name(name: str) -> bool:
    """Check whether a tunnel name looks like a synthesized interface name.

    Only such names are safe targets for remote cleanup.
    """
    if not name or not name.startswith(GENERATED_PREFIXES):
        return False
    try:
        validate_interface_name(name)
    except ValueError:
        return False
    return True


def teardown_command(interface: str) -> str:
    """Command that removes an interface created by synthesize()."""
    return f"ip link delete {validate_interface_name(interface)}"
