"""OpenTelemetry spans for orchestrator runs.

Spans are recorded through the OpenTelemetry API only. Without an SDK tracer
provider installed by the host application they are no-ops.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from opentelemetry import trace as otel_trace
from opentelemetry.trace import Status, StatusCode, format_trace_id

if TYPE_CHECKING:
    from collections.abc import Iterator

    from opentelemetry.trace import Span

    from ai_orchestrator.models.plan import ExecutionPlan, RunResult, SubResult

logger = logging.getLogger(__name__)

TRACER_NAME = "ai_orchestrator.run"


def get_current_trace_id() -> str | None:
    """Get the current OpenTelemetry trace ID if available."""
    try:
        span = otel_trace.get_current_span()
        if span is None:
            return None
        ctx = span.get_span_context()
        if ctx.trace_id == 0:
            return None
        return format_trace_id(ctx.trace_id)
    except Exception:  # noqa: BLE001
        return None


@dataclass
class RunSpan:
    """Span wrapping one orchestrator run, with one event per step."""

    task: str
    trace_id: str | None = None
    _span: Span | None = field(default=None, repr=False)

    @contextmanager
    def span(self) -> Iterator[RunSpan]:
        tracer = otel_trace.get_tracer(TRACER_NAME)
        attributes: dict[str, Any] = {
            "openinference.span.kind": "CHAIN",
            "input.value": self.task,
        }
        with tracer.start_as_current_span("orchestrator_run", attributes=attributes) as span:
            self._span = span
            ctx = span.get_span_context()
            if ctx.trace_id != 0:
                self.trace_id = format_trace_id(ctx.trace_id)
                logger.debug("Captured trace_id: %s", self.trace_id)
            try:
                yield self
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise
            finally:
                self._span = None

    def set_plan(self, plan: ExecutionPlan) -> None:
        if self._span:
            self._span.set_attribute("orchestrator.steps", len(plan))
            self._span.set_attribute(
                "orchestrator.categories", [category.value for category in plan.categories]
            )
            self._span.set_attribute(
                "orchestrator.providers", [step.provider.value for step in plan]
            )

    def add_step(self, result: SubResult) -> None:
        """Record a finished step as a span event."""
        if not self._span:
            return
        attributes: dict[str, Any] = {
            "step.position": result.request.position,
            "step.category": result.category.value,
            "step.planned_provider": result.request.provider.value,
            "step.provider": result.provider.value if result.provider else "",
            "step.success": result.success,
        }
        if result.response.tokens_used is not None:
            attributes["step.tokens_used"] = result.response.tokens_used
        if result.error:
            attributes["step.error"] = result.error
        self._span.add_event("orchestrator.step", attributes)

    def set_result(self, result: RunResult) -> None:
        if not self._span:
            return
        self._span.set_attribute("output.value", result.consolidated_output)
        self._span.set_attribute("orchestrator.cancelled", result.cancelled)
        if result.success:
            self._span.set_status(Status(StatusCode.OK))
        else:
            self._span.set_status(Status(StatusCode.ERROR, "; ".join(result.errors)))
