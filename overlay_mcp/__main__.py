"""Entry point for overlay_mcp server."""

import logging

from overlay_mcp.server import mcp  # importing also configures logging
from overlay_mcp.services import get_dependencies

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the MCP server with configured transport."""
    settings = get_dependencies().settings

    if settings.transport == "stdio":
        logger.info("Starting Overlay MCP server (transport=stdio)")
        mcp.run(transport="stdio")
    else:
        logger.info(
            "Starting Overlay MCP server (transport=http, host=%s, port=%d)",
            settings.http_host,
            settings.http_port,
        )
        mcp.run(
            transport="http",
            host=settings.http_host,
            port=settings.http_port,
        )


if __name__ == "__main__":
    run_server()
