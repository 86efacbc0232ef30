"""
Logging configuration for the data monitor command line tools.

Every record, whether it comes from a plain ``logging.getLogger`` logger
or from the structlog-wrapped findings logger, is rendered by structlog.
Key-value fields passed via ``extra`` (kind, feature, count, values,
threshold on drift findings) show up as fields in the output.
"""

import logging
import os
import sys
from typing import Optional

import structlog


def build_formatter(fmt: str = "console") -> structlog.stdlib.ProcessorFormatter:
    """
    Build a stdlib formatter that renders records through structlog.

    Args:
        fmt: "json" or "console"
    """
    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.stdlib.ExtraAdder(),
    ]

    if fmt == "json":
        processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=processors,
    )


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None):
    """
    Route all logging to stdout through a single structlog-rendered handler.

    Args:
        level: Log level name (defaults to LOG_LEVEL env var, then INFO)
        fmt: "json" or "console" (defaults to LOG_FORMAT env var, then console)
    """
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    fmt = (fmt or os.environ.get("LOG_FORMAT", "console")).lower()
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(fmt))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger("fsspec").setLevel(logging.WARNING)
