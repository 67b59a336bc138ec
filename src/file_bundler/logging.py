from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_LOGGING_CONFIGURED = False


def setup_logging(
    filename: str | Path | None = None,
    *,
    level: int = logging.INFO,
    force: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Set up JSON logging for the file_bundler module.

    Level filtering is left to the stdlib logger, so a later call with
    ``force=True`` changes the level and destination of loggers already in use.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        level: Minimum level; DEBUG adds one event per bundled file.
        force: Replace an earlier configuration.

    Returns:
        A structlog logger bound to the file_bundler logger.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if force or not _LOGGING_CONFIGURED:
        handler: logging.Handler = (
            logging.FileHandler(str(filename), encoding="utf-8") if filename else logging.StreamHandler(sys.stderr)
        )
        logging.basicConfig(level=level, handlers=[handler], format="%(message)s", force=force)
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                structlog.processors.JSONRenderer(sort_keys=True),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger("file_bundler")


logger = setup_logging()
