"""Structured logging configuration."""

import logging
import sys

import structlog
from pythonjsonlogger import jsonlogger

LOG_FORMATS = ("json", "logfmt")


def _logfmt_formatter() -> logging.Formatter:
    """Formatter rendering stdlib records as logfmt through structlog's processor chain."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.format_exc_info,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.LogfmtRenderer(
                key_order=["timestamp", "level", "logger", "event"],
                drop_missing=True
            ),
        ],
    )


def setup_logger(name: str = "asterisk_exporter", level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """
    Configure structured logging on stdout.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: "json" (python-json-logger) or "logfmt" (structlog key=value pairs)

    Returns:
        logging.Logger: Configured logger instance

    Raises:
        ValueError: If the format is unknown
    """
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {fmt}")

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s',
            timestamp=True
        )
    else:
        formatter = _logfmt_formatter()
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger
