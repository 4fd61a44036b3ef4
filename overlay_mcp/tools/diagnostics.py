"""Diagnostic tool."""

from overlay_mcp.services import (
    DiagnosticExecutionFailed,
    NodeNotFound,
    get_dependencies,
)


async def run_diagnostic(
    test_type: str,
    source_node_id: str,
    target_node_id: str | None = None,
) -> str:
    """Run a reachability or throughput test from one node.

    Args:
        test_type: "ping" or "throughput" (alias "iperf3").
        source_node_id: Node the test runs on.
        target_node_id: Node to test against. Required for throughput;
            ping falls back to a public address when omitted.

    Returns:
        Raw command output, or an error message.
    """
    try:
        result = await get_dependencies().diagnostics.run(
            test_type, source_node_id, target_node_id
        )
    except (ValueError, NodeNotFound, DiagnosticExecutionFailed) as e:
        return f"Error: {e}"

    header = f"═══ {result.test_type.value} from {source_node_id}"
    if result.target_node_id:
        header += f" to {result.target_node_id}"
    lines = [header]
    if result.setup_ok is False:
        lines.append("(listener setup failed; results may reflect a missing server)")
    lines.append(result.output)
    return "\n".join(lines)
