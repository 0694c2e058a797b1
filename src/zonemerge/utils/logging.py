"""Structured logging for zonemerge, built on structlog.

Every event emitted while a map document is being converged can carry two
correlation fields: `map_id` (which document, usually its path) and `step`
(which merge of the convergence loop). With both set, a merge logged by the
driver or a pair skipped by the resolver can be traced back to the exact
document and step that produced it. Output is JSON for machine consumption
or a colored console rendering for interactive use.
"""

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import Processor

from zonemerge.config import settings

# Correlation fields for the document and merge currently being processed
_map_id: ContextVar[str | None] = ContextVar("map_id", default=None)
_step: ContextVar[int | None] = ContextVar("step", default=None)


def set_correlation_context(
    map_id: str | None = None,
    step: int | None = None,
) -> None:
    """Tag subsequent log events with the document and merge step.

    Fields left as None keep their current value, so the CLI can set the
    map once and the convergence loop can advance only the step.

    Args:
        map_id: Identifier of the map document being converged
            (e.g., the path it was loaded from).
        step: 1-based number of the merge about to be attempted.
    """
    if map_id is not None:
        _map_id.set(map_id)
    if step is not None:
        _step.set(step)


def clear_correlation_context() -> None:
    """Forget the current document and merge step."""
    _map_id.set(None)
    _step.set(None)


def _add_correlation_ids(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Copy `map_id` and `step` into the event when they are set."""
    _ = logger, method_name
    map_id = _map_id.get()
    step = _step.get()

    if map_id is not None:
        event_dict["map_id"] = map_id
    if step is not None:
        event_dict["step"] = step

    return event_dict


def _renderer(log_format: str) -> list[Processor]:
    if log_format == "json":
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...). Merges are
            logged at INFO and skipped degenerate pairs at WARNING.
            Defaults to settings.LOG_LEVEL.
        log_format: "console" or "json". Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_correlation_ids,
        *_renderer(log_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, usually called with `__name__`."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
