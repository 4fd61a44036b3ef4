"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

# Log level colors
LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names, longest prefix first
COMPONENT_COLORS = {
    "overlay_mcp.services.session": COLORS["bright_magenta"],
    "overlay_mcp.services.runner": COLORS["bright_magenta"],
    "overlay_mcp.services.provisioning": COLORS["bright_cyan"],
    "overlay_mcp.services.teardown": COLORS["bright_yellow"],
    "overlay_mcp.services.diagnostics": COLORS["bright_blue"],
    "overlay_mcp.services": COLORS["cyan"],
    "overlay_mcp.server": COLORS["bright_cyan"],
    "overlay_mcp.middleware": COLORS["yellow"],
    "overlay_mcp.config": COLORS["green"],
    "default": COLORS["white"],
}

_INTERFACE_PATTERN = re.compile(r"\b((?:gre|vxlan)t\d+)\b")
_DURATION_PATTERN = re.compile(r"(\d+\.?\d*ms)")
_ENDPOINT_PATTERN = re.compile(r"(\w+@[\w.\-]+:\d+)")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        """Get color for a logger name/component."""
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        """Format local timestamp as HH:MM:SS.mmm MM/DD."""
        dt = datetime.fromtimestamp(record.created)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_level(self, record: logging.LogRecord) -> str:
        """Format log level with color and fixed width."""
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        """Format component/logger name with color."""
        name = record.name.removeprefix("overlay_mcp.")
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<22}", color)

    def _highlight_message(self, message: str) -> str:
        """Highlight interface names, durations and SSH endpoints."""
        if not self.use_colors:
            return message

        message = _INTERFACE_PATTERN.sub(
            f"{COLORS['bright_cyan']}\\1{COLORS['reset']}", message
        )
        if "ms" in message:
            message = _DURATION_PATTERN.sub(
                f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message
            )
        if "@" in message:
            message = _ENDPOINT_PATTERN.sub(
                f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message
            )
        return message

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class MCPRequestFormatter(ColorfulFormatter):
    """Formatter that prefixes lifecycle events with a short marker."""

    MARKERS = (
        (("starting", "ready"), "bright_green", ">>>"),
        (("shutting down", "shutdown"), "bright_red", "<<<"),
        (("failed", "error"), "bright_red", "!! "),
        (("orphaned", "slow", "ignored"), "bright_yellow", "!  "),
        (("is active", "succeeded", "registered"), "bright_green", "OK "),
        (("provisioning", "opening"), "bright_cyan", "+  "),
        (("teardown", "removing", "deleted"), "bright_yellow", "-  "),
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format with a leading event marker when colors are enabled."""
        base = super().format(record)
        if not self.use_colors:
            return base

        message = record.getMessage().lower()
        for words, color, marker in self.MARKERS:
            if any(word in message for word in words):
                return f"{COLORS[color]}{marker}{COLORS['reset']} {base}"
        return f"    {base}"
