"""Services for Overlay MCP."""

from overlay_mcp.services.diagnostics import (
    DiagnosticExecutionFailed,
    DiagnosticRunner,
    UnsupportedDiagnosticType,
)
from overlay_mcp.services.nodes import NodeService, NodeUnreachable
from overlay_mcp.services.prober import probe
from overlay_mcp.services.provisioning import (
    ProvisioningOrchestrator,
    TunnelProvisioningFailed,
)
from overlay_mcp.services.registry import (
    DuplicateNode,
    InMemoryRegistry,
    NodeNotFound,
    TunnelNotFound,
)
from overlay_mcp.services.runner import SSHRunner
from overlay_mcp.services.session import (
    ConnectionError,
    ExecutionError,
    RemoteSession,
    run_remote_command,
)
from overlay_mcp.services.state import (
    get_dependencies,
    reset_state,
    set_dependencies,
)
from overlay_mcp.services.synthesizer import (
    RandomAllocator,
    UnsupportedTunnelType,
    synthesize,
    teardown_command,
)
from overlay_mcp.services.teardown import TeardownOrchestrator

__all__ = [
    "ConnectionError",
    "DiagnosticExecutionFailed",
    "DiagnosticRunner",
    "DuplicateNode",
    "ExecutionError",
    "InMemoryRegistry",
    "NodeNotFound",
    "NodeService",
    "NodeUnreachable",
    "ProvisioningOrchestrator",
    "RandomAllocator",
    "RemoteSession",
    "SSHRunner",
    "TeardownOrchestrator",
    "TunnelNotFound",
    "TunnelProvisioningFailed",
    "UnsupportedDiagnosticType",
    "UnsupportedTunnelType",
    "get_dependencies",
    "probe",
    "reset_state",
    "run_remote_command",
    "set_dependencies",
    "synthesize",
    "teardown_command",
]
