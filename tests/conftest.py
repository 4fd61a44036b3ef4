"""Shared fixtures: a scripted RemoteRunner and a populated registry."""

import asyncio
from collections.abc import Iterator

import pytest
import pytest_asyncio

from overlay_mcp.config import Settings
from overlay_mcp.dependencies import Dependencies
from overlay_mcp.models import Credential, Node, SessionResult
from overlay_mcp.services.registry import InMemoryRegistry
from overlay_mcp.services.state import reset_state, set_dependencies


class FakeRunner:
    """RemoteRunner that records calls and fails on demand.

    failures maps a node address to the exception its commands raise.
    outputs maps a node address to the text its commands print.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.checks: list[tuple[str, int, str]] = []
        self.failures: dict[str, Exception] = {}
        self.outputs: dict[str, str] = {}
        self.check_result = True

    async def run(self, node: Node, command: str) -> SessionResult:
        self.calls.append((node.address, command))
        await asyncio.sleep(0)
        if node.address in self.failures:
            raise self.failures[node.address]
        return SessionResult(
            host=node.address,
            command=command,
            output=self.outputs.get(node.address, ""),
            exit_status=0,
        )

    async def check(self, host: str, port: int, username: str, credential: Credential) -> bool:
        self.checks.append((host, port, username))
        return self.check_result

    def commands_for(self, address: str) -> list[str]:
        return [cmd for addr, cmd in self.calls if addr == address]


@pytest.fixture
def runner() -> FakeRunner:
    """Scripted remote runner."""
    return FakeRunner()


@pytest.fixture
def registry() -> InMemoryRegistry:
    """Empty in-memory registry."""
    return InMemoryRegistry()


@pytest.fixture
def password() -> Credential:
    """Password credential."""
    return Credential(password="hunter2")


@pytest_asyncio.fixture
async def node_a(registry: InMemoryRegistry, password: Credential) -> Node:
    """Node A at 192.0.2.1."""
    return await registry.create_node(
        {"name": "alpha", "address": "192.0.2.1", "port": 22, "username": "root", "credential": password}
    )


@pytest_asyncio.fixture
async def node_b(registry: InMemoryRegistry, password: Credential) -> Node:
    """Node B at 192.0.2.2."""
    return await registry.create_node(
        {"name": "bravo", "address": "192.0.2.2", "port": 22, "username": "root", "credential": password}
    )


@pytest_asyncio.fixture
async def node_c(registry: InMemoryRegistry, password: Credential) -> Node:
    """Node C at 192.0.2.3."""
    return await registry.create_node(
        {"name": "charlie", "address": "192.0.2.3", "port": 2222, "username": "admin", "credential": password}
    )


@pytest.fixture
def deps(registry: InMemoryRegistry, runner: FakeRunner) -> Iterator[Dependencies]:
    """Install a dependency container backed by the fake runner."""
    container = Dependencies(settings=Settings(), registry=registry, runner=runner)
    set_dependencies(container)
    yield container
    reset_state()
