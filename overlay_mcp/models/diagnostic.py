"""Diagnostic run data models."""

from dataclasses import dataclass
from enum import Enum


class DiagnosticType(str, Enum):
    """Ad hoc tests that can be run between nodes."""

    PING = "ping"
    THROUGHPUT = "throughput"


@dataclass
class DiagnosticResult:
    """Captured output of a diagnostic run."""

    test_type: DiagnosticType
    source_node_id: str
    output: str
    target_node_id: str | None = None
    setup_ok: bool | None = None
