"""Structured logging setup for timetracker."""

import logging
import sys
from pathlib import Path
from typing import Any, Optional, TextIO

import structlog


# Verbosity names accepted on the command line. There is no separate
# trace level, so it shares debug.
LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

_log_stream: Optional[TextIO] = None


def configure_logging(level: str = "warn", log_file: Optional[Path] = None) -> None:
    """
    Configure structlog for console or JSON file logging.

    Without a log file, human-readable lines go to stderr so that CSV
    written to stdout stays clean. With a log file, JSON lines are
    appended to it instead.

    Args:
        level: One of error, warn, info, debug, trace (unknown names fall back to warn)
        log_file: Optional file to append JSON log lines to

    Example:
        # See every parsed line
        timetracker -d journals -v debug

        # Keep a machine-readable log
        timetracker -d journals --log-file ~/.cache/timetracker/run.log
        tail -f ~/.cache/timetracker/run.log | jq .
    """
    global _log_stream

    log_level = LEVELS.get(level.lower(), logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    close_log_file()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _log_stream = open(log_file, "a")
        processors.append(structlog.processors.JSONRenderer())
        logger_factory = structlog.WriteLoggerFactory(file=_log_stream)
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
        logger_factory = _stderr_logger

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("journal_scanned", source="2024-01-15.md", records=3)
    """
    return structlog.get_logger(name)


def _stderr_logger(*args: Any) -> structlog.WriteLogger:
    # Look up sys.stderr per logger so redirected streams are honoured
    return structlog.WriteLogger(sys.stderr)


def close_log_file() -> None:
    """Close the file opened by the last configure_logging call, if any."""
    global _log_stream

    if _log_stream is not None:
        _log_stream.close()
        _log_stream = None
