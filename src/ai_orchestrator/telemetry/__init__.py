"""Telemetry package: trace-correlated logging and run spans."""

from __future__ import annotations

from ai_orchestrator.telemetry.logging_utils import (
    LOG_FORMAT,
    TraceContextFilter,
    configure_logging,
    install_trace_log_filter,
)
from ai_orchestrator.telemetry.tracing import RunSpan, get_current_trace_id

__all__ = [
    "LOG_FORMAT",
    "RunSpan",
    "TraceContextFilter",
    "configure_logging",
    "get_current_trace_id",
    "install_trace_log_filter",
]
