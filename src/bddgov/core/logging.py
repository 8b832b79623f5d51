"""
Structured logging configuration for bddgov.

Uses structlog so that audit runs emit key-value events that CI log
collectors can parse.  Every module logs through::

    import structlog
    logger = structlog.get_logger()

    logger.info("snapshot_computed", apps=3, scenarios=412)
    # → {"event": "snapshot_computed", "apps": 3, "scenarios": 412,
    #    "timestamp": "2026-10-18T...", "level": "info"}

Call ``configure_logging()`` once at process startup (the CLI root group does
this).  Log output always goes to stderr so that ``--format json`` on stdout
stays machine-readable.
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(
    *,
    level: str = "WARNING",
    json_output: bool = False,
) -> None:
    """
    Configure structlog + stdlib logging for the process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        json_output: If True, emit JSON lines.  If False, emit human-readable
                     console output (coloured when stderr is a TTY).

    Safe to call more than once: the stderr handler is installed once and
    re-formatted on later calls.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdlib loggers (uvicorn, the dashboard access log) share the pipeline.
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        # stdlib `extra=` fields (the access log) become event keys
        foreign_pre_chain=[*shared_processors, structlog.stdlib.ExtraAdder()],
    )

    root = logging.getLogger()
    existing = [
        h
        for h in root.handlers
        if isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), structlog.stdlib.ProcessorFormatter)
    ]
    if existing:
        # Re-render with the new output mode
        for h in existing:
            h.setFormatter(formatter)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(log_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
