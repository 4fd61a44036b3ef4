"""Ad hoc reachability and throughput tests between nodes.

These runs are independent of the tunnel lifecycle and leave no record.
"""

import logging

from overlay_mcp.models import DiagnosticResult, DiagnosticType, Node
from overlay_mcp.protocols import Registry, RemoteRunner
from overlay_mcp.services.registry import NodeNotFound
from overlay_mcp.services.session import ConnectionError, ExecutionError

logger = logging.getLogger(__name__)

# Accepted aliases for diagnostic types
_ALIASES = {"iperf3": DiagnosticType.THROUGHPUT, "iperf": DiagnosticType.THROUGHPUT}


class UnsupportedDiagnosticType(ValueError):
    """Diagnostic type is not known."""

    def __init__(self, test_type: str):
        self.test_type = test_type
        super().__init__(f"Unknown test type: {test_type!r}")


class DiagnosticExecutionFailed(Exception):
    """A required diagnostic command could not be run."""

    def __init__(self, test_type: str, node_name: str, original_error: Exception):
        self.test_type = test_type
        self.node_name = node_name
        self.original_error = original_error
        super().__init__(f"{test_type} failed on {node_name}: {original_error}")


def parse_diagnostic_type(test_type: str) -> DiagnosticType:
    """Convert a user-supplied test type string to DiagnosticType.

    Raises:
        UnsupportedDiagnosticType: If the type is not known
    """
    key = str(test_type).lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return DiagnosticType(key)
    except ValueError:
        raise UnsupportedDiagnosticType(test_type) from None


class DiagnosticRunner:
    """Runs ping and throughput tests from one node to another."""

    def __init__(
        self,
        registry: Registry,
        runner: RemoteRunner,
        ping_target: str = "1.1.1.1",
        ping_count: int = 4,
        throughput_seconds: int = 5,
    ) -> None:
        self.registry = registry
        self.runner = runner
        self.ping_target = ping_target
        self.ping_count = ping_count
        self.throughput_seconds = throughput_seconds

    async def _resolve(self, node_id: str) -> Node:
        node = await self.registry.find_node(node_id)
        if node is None:
            raise NodeNotFound(node_id)
        return node

    async def _required(self, test_type: DiagnosticType, node: Node, command: str) -> str:
        """Run a command whose failure fails the diagnostic."""
        try:
            result = await self.runner.run(node, command)
        except (ConnectionError, ExecutionError) as e:
            logger.error("%s on %s failed: %s", test_type.value, node.name, e)
            raise DiagnosticExecutionFailed(test_type.value, node.name, e) from e
        return result.output

    async def _best_effort(self, node: Node, command: str) -> bool:
        """Run a setup command whose failure is tolerated.

        Returns:
            True if the command was dispatched, False otherwise.
        """
        try:
            await self.runner.run(node, command)
        except (ConnectionError, ExecutionError) as e:
            logger.warning("Setup step on %s failed (continuing): %s", node.name, e)
            return False
        return True

    async def run(
        self,
        test_type: str,
        source_node_id: str,
        target_node_id: str | None = None,
    ) -> DiagnosticResult:
        """Run a diagnostic from source towards target.

        Args:
            test_type: "ping" or "throughput" ("iperf3" is accepted)
            source_node_id: Node the test runs on
            target_node_id: Node being tested against. Optional for ping,
                which then targets a well-known public address

        Returns:
            DiagnosticResult carrying the captured output

        Raises:
            UnsupportedDiagnosticType: If test_type is unknown
            ValueError: If throughput is requested without a target
            NodeNotFound: If a node id is not registered
            DiagnosticExecutionFailed: If the measurement could not run
        """
        kind = parse_diagnostic_type(test_type)
        if not source_node_id:
            raise ValueError("Source node is required")
        source = await self._resolve(source_node_id)
        target = await self._resolve(target_node_id) if target_node_id else None

        if kind is DiagnosticType.PING:
            address = target.address if target else self.ping_target
            output = await self._required(kind, source, f"ping -c {self.ping_count} {address}")
            return DiagnosticResult(
                test_type=kind,
                source_node_id=source.id,
                target_node_id=target.id if target else None,
                output=output,
            )

        if target is None:
            raise ValueError("Target node is required for throughput tests")

        # Phase 1: listener on the target, best effort
        setup_ok = await self._best_effort(target, "iperf3 -s -D || true")
        # Phase 2: client leg on the source, required
        output = await self._required(
            kind,
            source,
            f"iperf3 -c {target.address} -t {self.throughput_seconds}",
        )
        return DiagnosticResult(
            test_type=kind,
            source_node_id=source.id,
            target_node_id=target.id,
            output=output,
            setup_ok=setup_ok,
        )
