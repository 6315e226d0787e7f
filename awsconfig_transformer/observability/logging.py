"""structlog setup for the transformer.

Records go to stderr so stdout stays free for piping.  ``json`` output is
the production format; ``console`` renders key=value lines for local runs.
Per-event fields (resource type, ARN) are carried in contextvars so every
record logged while one notification is handled names the resource.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

LOG_FORMATS = ("json", "console")


def setup_logging(level: str = "info", fmt: str = "json") -> None:
    """Configure structlog output at *level* in format *fmt*."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    renderer = (
        structlog.dev.ConsoleRenderer(colors=False) if fmt == "console" else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Logger bound with the emitting component's name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]


@contextmanager
def event_context(resource_type: str, arn: str) -> Iterator[None]:
    """Bind the notification's resource to every record logged inside the block."""
    with structlog.contextvars.bound_contextvars(resource_type=resource_type, arn=arn):
        yield
