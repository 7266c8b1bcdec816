# plansight/logging_config.py
"""
Stderr-only logging configuration.

CRITICAL: MCP uses stdio transport, so ALL logging must go to stderr.
The CLI also keeps stdout for command output (reports are pipeable).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

CLI_FORMAT = "%(asctime)s  %(levelname)-7s  %(message)s"


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON line."""
        log_data: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            log_data["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """
    Route all logging to stderr.

    Clears existing handlers to prevent stdout pollution.

    Args:
        json_format: JSON lines (server) or human-readable lines (CLI)
        level: Root log level
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CLI_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # SDK loggers are chatty at INFO (one line per HTTP request)
    for logger_name in ["httpx", "openai", "anthropic"]:
        logging.getLogger(logger_name).setLevel(max(level, logging.WARNING))

    fastmcp_logger = logging.getLogger("fastmcp")
    fastmcp_logger.handlers.clear()
    fastmcp_logger.addHandler(handler)
    fastmcp_logger.setLevel(level)
    fastmcp_logger.propagate = False
