"""
Logging configuration
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

_configured = False


def _stderr_logger_factory(*args) -> structlog.PrintLogger:
    # resolve sys.stderr per logger so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def setup_logger(
    name: Optional[str] = None,
    level: str = "INFO",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Set up structured logging.

    Handlers and processors are installed on the first call only; later calls
    just return a named logger so module-level ``logger = setup_logger(__name__)``
    does not reset the configuration chosen by the CLI.
    """
    global _configured
    if _configured:
        return structlog.get_logger(name)

    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False
    )
    _configured = True

    return structlog.get_logger(name)


def reset_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Reconfigure logging with a new level (used by the CLI ``--debug`` flag)."""
    global _configured
    _configured = False
    setup_logger(level=level, log_file=log_file)
