"""Dependency injection container for Overlay MCP.

Wires the registry, the remote runner and the orchestrators together so the
tool layer never builds them itself.
"""

from dataclasses import dataclass, field

from overlay_mcp.config import Settings
from overlay_mcp.protocols import NameAllocator, Registry, RemoteRunner
from overlay_mcp.services.diagnostics import DiagnosticRunner
from overlay_mcp.services.nodes import NodeService
from overlay_mcp.services.provisioning import ProvisioningOrchestrator
from overlay_mcp.services.registry import InMemoryRegistry
from overlay_mcp.services.runner import SSHRunner
from overlay_mcp.services.synthesizer import RandomAllocator
from overlay_mcp.services.teardown import TeardownOrchestrator


@dataclass
class Dependencies:
    """Container for Overlay MCP dependencies.

    Example:
        deps = Dependencies.create()
        tunnel = await deps.provisioning.create(spec)
    """

    settings: Settings
    registry: Registry
    runner: RemoteRunner
    allocator: NameAllocator = field(default_factory=RandomAllocator)
    provisioning: ProvisioningOrchestrator = field(init=False)
    teardown: TeardownOrchestrator = field(init=False)
    diagnostics: DiagnosticRunner = field(init=False)
    nodes: NodeService = field(init=False)

    def __post_init__(self) -> None:
        self.provisioning = ProvisioningOrchestrator(self.registry, self.runner, self.allocator)
        self.teardown = TeardownOrchestrator(self.registry, self.runner)
        self.diagnostics = DiagnosticRunner(
            self.registry,
            self.runner,
            ping_target=self.settings.ping_target,
            ping_count=self.settings.ping_count,
            throughput_seconds=self.settings.throughput_seconds,
        )
        self.nodes = NodeService(self.registry, self.runner, self.teardown)

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from environment settings.

        Returns:
            Initialized Dependencies instance
        """
        return cls.from_settings(Settings.from_env())

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dependencies":
        """Create dependencies with custom settings.

        Args:
            settings: Custom Settings instance

        Returns:
            Dependencies with an SSH runner and an empty in-memory registry
        """
        runner = SSHRunner(
            connect_timeout=settings.connect_timeout,
            known_hosts=settings.known_hosts,
        )
        return cls(settings=settings, registry=InMemoryRegistry(), runner=runner)
