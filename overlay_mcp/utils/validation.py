"""Input validation for values that end up in remote shell commands."""

import ipaddress
import re
from typing import Final

# Linux IFNAMSIZ is 16 including the terminating NUL
MAX_INTERFACE_NAME: Final[int] = 15

_INTERFACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_.\-]+")

_SUSPICIOUS_CHARS: Final[list[str]] = [
    "/", "\\", ";", "&", "|", "$", "`", "'", '"', " ", "\t", "\n", "\r", "\x00",
    "(", ")", "<", ">", "*", "?",
]


def validate_host(host: str) -> str:
    """Validate a node address or host name.

    Args:
        host: The address to validate

    Returns:
        Validated host

    Raises:
        ValueError: If host is empty, too long, or contains shell characters
    """
    if not host:
        raise ValueError("Host cannot be empty")

    if len(host) > 253:
        raise ValueError(f"Host name too long: {len(host)} chars")

    for char in _SUSPICIOUS_CHARS:
        if char in host:
            raise ValueError(f"Host contains invalid characters: {host!r}")

    return host


def validate_port(port: int) -> int:
    """Validate an SSH port number.

    Raises:
        ValueError: If port is outside 1-65535
    """
    if isinstance(port, bool) or not isinstance(port, int):
        raise ValueError(f"Port must be an integer, got {port!r}")
    if not 1 <= port <= 65535:
        raise ValueError(f"Port out of range: {port}")
    return port


def validate_overlay_ip(address: str) -> str:
    """Validate an overlay address (bare IPv4, no prefix length).

    Returns:
        Normalized dotted-quad address

    Raises:
        ValueError: If address is not a plain IPv4 address
    """
    if not address:
        raise ValueError("Overlay address cannot be empty")
    try:
        return str(ipaddress.IPv4Address(address.strip()))
    except ipaddress.AddressValueError as e:
        raise ValueError(f"Invalid overlay address: {address!r}") from e


def validate_interface_name(name: str) -> str:
    """Validate a Linux network interface name.

    Raises:
        ValueError: If name is empty, too long, or has invalid characters
    """
    if not name:
        raise ValueError("Interface name cannot be empty")
    if len(name) > MAX_INTERFACE_NAME:
        raise ValueError(f"Interface name too long: {name!r}")
    if not _INTERFACE_PATTERN.fullmatch(name):
        raise ValueError(f"Interface name contains invalid characters: {name!r}")
    return name
