"""Structured logging configuration using structlog.

Log lines are JSON on stderr. While an event moves through the pipeline its
identity (namespace, object name, reason) is held in structlog contextvars,
so every stage's log line carries it without passing it around.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from kubeherald.models.events import CanonicalEvent


def setup_logging(level: str = "info") -> None:
    """Configure structlog for JSON output to stderr at *level*."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]


@contextmanager
def event_log_context(event: CanonicalEvent) -> Iterator[None]:
    """Bind *event*'s identity to every log line emitted inside the block.

    contextvars are per-task, so concurrently processed events keep
    separate contexts.
    """
    with structlog.contextvars.bound_contextvars(
        namespace=event.namespace,
        name=event.object_name,
        kind=event.object_kind,
        reason=event.reason,
    ):
        yield
