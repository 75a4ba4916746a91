"""structlog setup for the async side of the pipeline.

Sources, stores, the fact checker and the pipeline log through structlog
with event-style keys. A verification binds its session id into the
structlog context once (``verification_session``), so every record emitted
while it runs, in any component, carries the same ``session_id``.
"""

import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from structlog.contextvars import bound_contextvars, merge_contextvars

from verity_system.config.settings import settings


def configure_structured_logging() -> None:
    """
    Configure structlog from settings.

    Console rendering when stderr is a terminal and log_format is
    "console", JSON lines otherwise. Records always go to stderr.
    """
    processors = [
        merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if sys.stderr.isatty() and settings.log_format.lower() == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level.upper()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_structured_logger(
    name: str,
    session_id: Optional[str] = None,
    **context: Any,
) -> structlog.BoundLogger:
    """
    Return a structlog logger with ``context`` bound.

    Example:
        >>> log = get_structured_logger(__name__, component="SourceManager")
        >>> log.info("source_timeout", source="wikipedia", timeout=5.0)
    """
    logger = structlog.get_logger(name)
    if session_id:
        logger = logger.bind(session_id=session_id)
    if context:
        logger = logger.bind(**context)
    return logger


def get_correlation_id() -> str:
    """New id for one verification session."""
    return str(uuid.uuid4())


@contextmanager
def verification_session(session_id: str, **context: Any) -> Iterator[str]:
    """Bind ``session_id`` (and ``context``) for every log record inside the block."""
    with bound_contextvars(session_id=session_id, **context):
        yield session_id


configure_structured_logging()
