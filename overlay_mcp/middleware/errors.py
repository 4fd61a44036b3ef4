"""Error handling middleware for consistent error logging."""

import logging
import traceback
from collections import defaultdict
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from overlay_mcp.middleware.base import OverlayMiddleware
from overlay_mcp.services import (
    ConnectionError,
    DiagnosticExecutionFailed,
    ExecutionError,
    TunnelProvisioningFailed,
)

# Failures caused by the remote hosts rather than by the request or by us
REMOTE_ERRORS: tuple[type[Exception], ...] = (
    ConnectionError,
    ExecutionError,
    TunnelProvisioningFailed,
    DiagnosticExecutionFailed,
)
CLIENT_ERRORS: tuple[type[Exception], ...] = (ValueError, LookupError)


def classify_error(error: Exception) -> str:
    """Return "remote", "client" or "internal" for an exception."""
    if isinstance(error, REMOTE_ERRORS):
        return "remote"
    if isinstance(error, CLIENT_ERRORS):
        return "client"
    return "internal"


class ErrorHandlingMiddleware(OverlayMiddleware):
    """Logs exceptions escaping tools and resources, and counts them.

    Remote and client errors are logged as warnings; anything else is an
    internal error and logged at ERROR, with a traceback if enabled. The
    exception is always re-raised.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to log tracebacks for internal errors.
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self._error_counts: dict[str, int] = defaultdict(int)
        self._category_counts: dict[str, int] = defaultdict(int)

    def get_error_stats(self) -> dict[str, int]:
        """Get error counts by exception type name."""
        return dict(self._error_counts)

    def get_category_stats(self) -> dict[str, int]:
        """Get error counts by category (remote/client/internal)."""
        return dict(self._category_counts)

    def reset_stats(self) -> None:
        """Reset error statistics."""
        self._error_counts.clear()
        self._category_counts.clear()

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log, count and re-raise errors during request processing."""
        try:
            return await call_next(context)

        except Exception as e:
            error_type = type(e).__name__
            category = classify_error(e)
            method = context.method

            self._error_counts[error_type] += 1
            self._category_counts[category] += 1

            if category != "internal":
                self.logger.warning("%s error in %s: %s: %s", category, method, error_type, e)
            elif self.include_traceback:
                self.logger.error(
                    "Internal error in %s: %s: %s\n%s",
                    method,
                    error_type,
                    e,
                    traceback.format_exc(),
                )
            else:
                self.logger.error("Internal error in %s: %s: %s", method, error_type, e)

            raise
