"""Managed node data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Credential:
    """SSH credential: a password or a private key, never both."""

    password: str | None = None
    private_key: str | None = None

    def __post_init__(self) -> None:
        if bool(self.password) == bool(self.private_key):
            raise ValueError("Credential requires exactly one of password or private_key")

    @property
    def kind(self) -> str:
        """Return 'password' or 'private_key'."""
        return "password" if self.password else "private_key"

    def __repr__(self) -> str:
        return f"Credential(kind={self.kind!r})"


@dataclass
class Node:
    """A managed remote endpoint."""

    id: str
    name: str
    address: str
    credential: Credential = field(repr=False)
    port: int = 22
    username: str = "root"
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def endpoint(self) -> str:
        """user@address:port, for logs."""
        return f"{self.username}@{self.address}:{self.port}"

    def summary(self) -> dict[str, Any]:
        """Return the node's fields without the credential."""
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "port": self.port,
            "username": self.username,
            "created_at": self.created_at.isoformat(),
        }
