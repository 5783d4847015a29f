"""Logging helpers for trace correlation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ai_orchestrator.telemetry.tracing import get_current_trace_id

if TYPE_CHECKING:
    from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [trace_id=%(trace_id)s] %(message)s"


class TraceContextFilter(logging.Filter):
    """Attach trace identifiers to log records when available."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject trace_id into the log record."""
        record.trace_id = get_current_trace_id() or "-"
        return True


def install_trace_log_filter(handlers: Iterable[logging.Handler] | None = None) -> None:
    """Install trace context filters on log handlers.

    Args:
        handlers: Optional iterable of handlers to attach the filter to. Defaults to the
            root logger's handlers. Handler filters also see records propagated from
            child loggers, which logger filters do not.
    """
    targets = list(handlers) if handlers is not None else list(logging.getLogger().handlers)
    for handler in targets:
        if any(isinstance(flt, TraceContextFilter) for flt in handler.filters):
            continue
        handler.addFilter(TraceContextFilter())


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with trace ids in every line."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
    install_trace_log_filter()
