"""Tests for tunnel command synthesis."""

import pytest

from overlay_mcp.services.synthesizer import (
    RandomAllocator,
    UnsupportedTunnelType,
    is_generated_name,
    parse_tunnel_type,
    synthesize,
    teardown_command,
)


class FixedAllocator:
    """Allocator returning preset values."""

    def __init__(self, suffix: int = 42, vni: int = 4242) -> None:
        self.suffix = suffix
        self._vni = vni
        self.vni_calls = 0

    def interface_name(self, tunnel_type: str) -> str:
        return f"{tunnel_type}t{self.suffix}"

    def vni(self) -> int:
        self.vni_calls += 1
        return self._vni


def test_gre_commands_mirror_each_other() -> None:
    """GRE commands swap own and peer addresses between sides."""
    allocator = FixedAllocator()

    pair = synthesize("gre", "203.0.113.1", "203.0.113.2", "10.0.0.1", "10.0.0.2", allocator)

    assert pair.interface == "gret42"
    assert pair.tunnel_type == "gre"
    assert pair.vni is None
    assert pair.local_command == (
        "ip tunnel add gret42 mode gre remote 203.0.113.2 local 203.0.113.1 ttl 255"
        " && ip link set gret42 up && ip addr add 10.0.0.1/30 dev gret42"
    )
    assert pair.remote_command == (
        "ip tunnel add gret42 mode gre remote 203.0.113.1 local 203.0.113.2 ttl 255"
        " && ip link set gret42 up && ip addr add 10.0.0.2/30 dev gret42"
    )
    assert allocator.vni_calls == 0


def test_vxlan_commands_share_one_vni() -> None:
    """Both VXLAN commands carry the same VNI and destination port."""
    allocator = FixedAllocator(suffix=7, vni=555)

    pair = synthesize("vxlan", "203.0.113.1", "203.0.113.2", "10.1.0.1", "10.1.0.2", allocator)

    assert pair.interface == "vxlant7"
    assert pair.vni == 555
    assert pair.local_command == (
        "ip link add vxlant7 type vxlan id 555 remote 203.0.113.2 local 203.0.113.1"
        " dstport 4789 && ip link set vxlant7 up && ip addr add 10.1.0.1/24 dev vxlant7"
    )
    assert pair.remote_command == (
        "ip link add vxlant7 type vxlan id 555 remote 203.0.113.1 local 203.0.113.2"
        " dstport 4789 && ip link set vxlant7 up && ip addr add 10.1.0.2/24 dev vxlant7"
    )
    assert allocator.vni_calls == 1


def test_tunnel_type_is_case_insensitive() -> None:
    """Upper-case type names are accepted."""
    pair = synthesize("GRE", "203.0.113.1", "203.0.113.2", "10.0.0.1", "10.0.0.2", FixedAllocator())
    assert pair.tunnel_type == "gre"


def test_unsupported_tunnel_type() -> None:
    """Unknown types are rejected before anything is allocated."""
    allocator = FixedAllocator()

    with pytest.raises(UnsupportedTunnelType, match="ipip"):
        synthesize("ipip", "203.0.113.1", "203.0.113.2", "10.0.0.1", "10.0.0.2", allocator)

    assert allocator.vni_calls == 0


def test_unsupported_tunnel_type_is_value_error() -> None:
    """UnsupportedTunnelType can be handled as a ValueError."""
    with pytest.raises(ValueError):
        parse_tunnel_type("geneve")


def test_invalid_overlay_address_rejected() -> None:
    """Overlay addresses must be IPv4 literals."""
    with pytest.raises(ValueError, match="Invalid overlay address"):
        synthesize(
            "gre", "203.0.113.1", "203.0.113.2", "10.0.0.1; reboot", "10.0.0.2", FixedAllocator()
        )


def test_shell_metacharacters_in_address_rejected() -> None:
    """Node addresses with shell metacharacters never reach a command."""
    with pytest.raises(ValueError):
        synthesize(
            "gre", "203.0.113.1 && reboot", "203.0.113.2", "10.0.0.1", "10.0.0.2", FixedAllocator()
        )


def test_random_allocator_is_reproducible_with_seed() -> None:
    """Seeded allocators produce identical sequences."""
    first = RandomAllocator(seed=1234)
    second = RandomAllocator(seed=1234)

    assert [first.interface_name("gre") for _ in range(5)] == [
        second.interface_name("gre") for _ in range(5)
    ]
    assert [first.vni() for _ in range(5)] == [second.vni() for _ in range(5)]


def test_random_allocator_ranges() -> None:
    """Suffixes fall in [0, 1000) and VNIs in [100, 10100)."""
    allocator = RandomAllocator(seed=99)

    for _ in range(200):
        name = allocator.interface_name("vxlan")
        assert name.startswith("vxlant")
        assert 0 <= int(name.removeprefix("vxlant")) < 1000
        assert 100 <= allocator.vni() < 10100


def test_is_generated_name() -> None:
    """Only synthesizer-shaped names are eligible for remote cleanup."""
    assert is_generated_name("gret17")
    assert is_generated_name("vxlant999")
    assert not is_generated_name("")
    assert not is_generated_name("office-link")
    assert not is_generated_name("gre0; rm -rf /")
    assert not is_generated_name("gret1234567890123")


def test_teardown_command() -> None:
    """Teardown deletes the interface by name."""
    assert teardown_command("gret17") == "ip link delete gret17"


def test_teardown_command_rejects_unsafe_name() -> None:
    """Names that are not valid interfaces are refused."""
    with pytest.raises(ValueError):
        teardown_command("gret1 && reboot")


def test_pair_carries_normalized_overlay_addresses() -> None:
    """Overlay addresses are returned as they appear in the commands."""
    pair = synthesize("vxlan", "203.0.113.1", "203.0.113.2", " 10.1.0.1", "10.1.0.2\n", FixedAllocator())

    assert pair.local_overlay_ip == "10.1.0.1"
    assert pair.remote_overlay_ip == "10.1.0.2"
    assert pair.local_command.endswith("ip addr add 10.1.0.1/24 dev vxlant42")
