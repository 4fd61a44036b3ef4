"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Remote sessions
    connect_timeout: float = field(default=10.0)
    known_hosts: str | None = field(default=None)

    # Diagnostics
    ping_target: str = field(default="1.1.1.1")
    ping_count: int = field(default=4)
    throughput_seconds: int = field(default=5)

    # Transport
    transport: str = field(default="http")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)
    log_payloads: bool = field(default=False)
    slow_threshold_ms: int = field(default=1000)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from OVERLAY_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            connect_timeout=cls._get_float("OVERLAY_CONNECT_TIMEOUT", 10.0),
            known_hosts=os.getenv("OVERLAY_KNOWN_HOSTS") or None,
            ping_target=os.getenv("OVERLAY_PING_TARGET", "1.1.1.1"),
            ping_count=cls._get_int("OVERLAY_PING_COUNT", 4),
            throughput_seconds=cls._get_int("OVERLAY_THROUGHPUT_SECONDS", 5),
            transport=cls._get_transport(),
            http_host=os.getenv("OVERLAY_HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("OVERLAY_HTTP_PORT", 8000),
            log_level=os.getenv("OVERLAY_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("OVERLAY_LOG_COLORS", True),
            log_payloads=cls._get_bool("OVERLAY_LOG_PAYLOADS", False),
            slow_threshold_ms=cls._get_int("OVERLAY_SLOW_THRESHOLD_MS", 1000),
            include_traceback=cls._get_bool("OVERLAY_INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get a positive integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

        if parsed <= 0:
            logger.warning("%s must be > 0, got %d. Using default: %d", key, parsed, default)
            return default
        return parsed

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Get a positive float from environment."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = float(value)
        except ValueError:
            logger.warning("Invalid number for %s: %s, using default %s", key, value, default)
            return default

        if parsed <= 0:
            logger.warning("%s must be > 0, got %s. Using default: %s", key, parsed, default)
            return default
        return parsed

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv("OVERLAY_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "http"
