"""Overlay MCP FastMCP server.

This is a thin wrapper that wires together the MCP server with tools and
resources. All orchestration logic lives in services/.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from overlay_mcp.config import Settings
from overlay_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from overlay_mcp.resources import (
    list_nodes_resource,
    list_tunnels_resource,
    tunnel_resource,
)
from overlay_mcp.services import get_dependencies
from overlay_mcp.tools import (
    add_node,
    create_tunnel,
    delete_tunnel,
    list_nodes,
    list_tunnels,
    remove_node,
    run_diagnostic,
)
from overlay_mcp.utils.console import MCPRequestFormatter

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "asyncssh",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
)


def _configure_logging(settings: Settings) -> None:
    """Configure colorful logging for the overlay_mcp package.

    Called at module load time so logging is configured before any
    loggers are used, regardless of how the server is started.
    """
    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("overlay_mcp")
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    # Only add handler if not already configured
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(MCPRequestFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for name in NOISY_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(logging.WARNING)
        lg.handlers = []
        lg.propagate = False


_configure_logging(Settings.from_env())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Build the dependency container at startup.

    Args:
        server: The FastMCP server instance

    Yields:
        Dict with the connect timeout in effect
    """
    logger.info("Overlay MCP server starting up")
    deps = get_dependencies()
    logger.info(
        "Remote sessions: connect_timeout=%ss, known_hosts=%s",
        deps.settings.connect_timeout,
        deps.settings.known_hosts or "(disabled)",
    )
    logger.info("Overlay MCP server ready to accept connections")

    try:
        yield {"connect_timeout": deps.settings.connect_timeout}
    finally:
        # Sessions are one-shot, nothing to close
        logger.info("Overlay MCP server shutdown complete")


def configure_middleware(server: FastMCP, settings: Settings) -> None:
    """Configure middleware stack for the server.

    Adds middleware in order: ErrorHandling -> Logging (with timing)

    Args:
        server: The FastMCP server to configure.
        settings: Settings carrying the logging options.
    """
    # First added = innermost
    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=settings.include_traceback)
    )
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=settings.log_payloads,
            slow_threshold_ms=float(settings.slow_threshold_ms),
        )
    )


def create_server(settings: Settings | None = None) -> FastMCP:
    """Create and configure the MCP server with all middleware and resources.

    Returns:
        Configured FastMCP server instance
    """
    settings = settings or Settings.from_env()
    server = FastMCP("overlay_mcp", lifespan=app_lifespan)

    configure_middleware(server, settings)

    for tool in (
        add_node,
        list_nodes,
        remove_node,
        create_tunnel,
        list_tunnels,
        delete_tunnel,
        run_diagnostic,
    ):
        server.tool()(tool)

    server.resource("nodes://list")(list_nodes_resource)
    server.resource("tunnels://list")(list_tunnels_resource)
    server.resource("tunnels://{tunnel_id}")(tunnel_resource)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
