"""Structured logging configuration using structlog."""

import logging
import sys

import structlog
from structlog.types import Processor

# Third-party loggers that log every request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore")


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(debug: bool = False, json_logs: bool = True) -> None:
    """Configure structlog for the search service.

    Production output is one JSON object per line on stdout. Console
    output is meant for local development against a real repository.

    Args:
        debug: Enable debug-level logging (page fetches, cache hits).
        json_logs: Render JSON lines instead of human-readable console output.
    """
    level = logging.DEBUG if debug else logging.INFO

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(json_logs))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
