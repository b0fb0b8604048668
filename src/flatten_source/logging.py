from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path


def setup_logging(
    filename: str | Path | None = None,
    level: int = logging.WARNING,
) -> structlog.BoundLogger:
    """Set up structured logging for the flatten_source package.

    Standard output carries the extracted text, so logs never go there.
    Calling this again (e.g. once the CLI knows about `--log-file`) replaces
    the previous configuration.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        level: Minimum stdlib log level to emit.

    Returns:
        A structlog logger instance configured for the flatten_source package.
    """
    handlers: list[logging.Handler] = []
    if filename:
        handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
    else:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=level,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger("flatten_source")


logger = setup_logging()
