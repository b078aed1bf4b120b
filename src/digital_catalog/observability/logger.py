"""Structured JSON logging with request_id support.

Uses structlog for structured logging with JSON output.  Standard library
loggers (``logging.getLogger(__name__)``, used by every module) are routed
through the same processor chain, so context bound with
:func:`request_context` shows up on their records too.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import structlog

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get current request ID from context, creating one if unset."""
    rid = _request_id.get()
    if not rid:
        rid = str(uuid.uuid4())
        _request_id.set(rid)
    return rid


def new_request_id() -> str:
    """Generate and set a new request ID."""
    rid = str(uuid.uuid4())
    _request_id.set(rid)
    return rid


def _add_request_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add request_id to every log entry."""
    event_dict.setdefault("request_id", get_request_id())
    return event_dict


@contextmanager
def request_context(operation: str, **fields: Any) -> Iterator[str]:
    """Bind a fresh request_id plus *fields* for the duration of a workflow.

    The previous request_id is restored on exit.

    Usage::

        with request_context("purchase", product_id=pid, user_id=uid):
            ...
    """
    rid = str(uuid.uuid4())
    token = _request_id.set(rid)
    try:
        with structlog.contextvars.bound_contextvars(
            request_id=rid, operation=operation, **fields,
        ):
            yield rid
    finally:
        _request_id.reset(token)


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        _add_request_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    renderer: Any
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            *_shared_processors(),
            structlog.processors.format_exc_info,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
