"""Runtime models for execution plans and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ai_orchestrator.models.config import Provider, TaskCategory

PROVIDER_DISPLAY_NAMES: dict[Provider, str] = {
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
    Provider.GEMINI: "Gemini",
    Provider.MOONSHOT: "Moonshot",
}


def display_name(provider: Provider | None) -> str:
    """Human-readable provider name, ``none`` when no provider ran."""
    if provider is None:
        return "none"
    return PROVIDER_DISPLAY_NAMES[provider]


@dataclass(frozen=True)
class SubRequest:
    """One planned, routed unit of work."""

    position: int
    description: str
    category: TaskCategory
    provider: Provider
    prompt: str
    system_prompt: str | None = None
    prerequisites: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize for history snapshots."""
        return {
            "position": self.position,
            "description": self.description,
            "category": self.category.value,
            "provider": self.provider.value,
            "prompt": self.prompt,
            "system_prompt": self.system_prompt,
            "prerequisites": list(self.prerequisites),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SubRequest:
        """Rebuild from :meth:`to_dict` output."""
        return cls(
            position=int(data["position"]),
            description=str(data["description"]),
            category=TaskCategory(data["category"]),
            provider=Provider(data["provider"]),
            prompt=str(data["prompt"]),
            system_prompt=data.get("system_prompt"),
            prerequisites=tuple(int(item) for item in data.get("prerequisites", [])),
        )


@dataclass(frozen=True)
class ExecutionPlan:
    """Ordered, non-empty chain of sub-requests."""

    steps: tuple[SubRequest, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            msg = "An execution plan needs at least one sub-request"
            raise ValueError(msg)
        for expected, step in enumerate(self.steps, start=1):
            if step.position != expected:
                msg = f"Sub-request positions must be contiguous from 1, got {step.position}"
                raise ValueError(msg)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    @property
    def categories(self) -> list[TaskCategory]:
        return [step.category for step in self.steps]


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of one capability client call."""

    content: str
    success: bool
    error: str | None = None
    tokens_used: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    provider: Provider | None = None
    model_id: str = ""

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        provider: Provider | None = None,
        model_id: str = "",
    ) -> CompletionResult:
        """Build a failed result carrying ``error``."""
        return cls(content="", success=False, error=error, provider=provider, model_id=model_id)


@dataclass(frozen=True)
class SubResult:
    """A sub-request paired with the outcome of executing it."""

    request: SubRequest
    response: CompletionResult

    @property
    def category(self) -> TaskCategory:
        return self.request.category

    @property
    def success(self) -> bool:
        return self.response.success

    @property
    def content(self) -> str:
        return self.response.content

    @property
    def error(self) -> str | None:
        return self.response.error

    @property
    def provider(self) -> Provider | None:
        """Provider that actually ran the request (may differ after fallback)."""
        return self.response.provider

    @property
    def provider_display_name(self) -> str:
        return display_name(self.provider)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the external result shape."""
        return {
            "request": self.request.to_dict(),
            "category": self.category.value,
            "provider": self.provider.value if self.provider else None,
            "provider_display_name": self.provider_display_name,
            "model_id": self.response.model_id,
            "success": self.success,
            "content": self.content,
            "error": self.error,
            "tokens_used": self.response.tokens_used,
            "metadata": dict(self.response.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SubResult:
        """Rebuild from :meth:`to_dict` output."""
        provider = data.get("provider")
        return cls(
            request=SubRequest.from_dict(data["request"]),
            response=CompletionResult(
                content=str(data.get("content", "")),
                success=bool(data.get("success", False)),
                error=data.get("error"),
                tokens_used=data.get("tokens_used"),
                metadata=dict(data.get("metadata") or {}),
                provider=Provider.parse(provider) if provider else None,
                model_id=str(data.get("model_id", "")),
            ),
        )


@dataclass(frozen=True)
class RoutingPlanItem:
    """Display row of the routing plan."""

    position: int
    category: TaskCategory
    provider: Provider
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "category": self.category.value,
            "provider": self.provider.value,
            "description": self.description,
        }


@dataclass
class RunResult:
    """Top-level output of one orchestrated run."""

    task: str
    plan: ExecutionPlan | None = None
    results: list[SubResult] = field(default_factory=list)
    consolidated_output: str = ""
    success: bool = True
    errors: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def routing_plan(self) -> list[RoutingPlanItem]:
        if self.plan is None:
            return []
        return [
            RoutingPlanItem(
                position=step.position,
                category=step.category,
                provider=step.provider,
                description=step.description,
            )
            for step in self.plan
        ]

    def compute_success(self) -> bool:
        """A run with partial output is never marked wholly failed."""
        return not self.errors or any(result.success for result in self.results)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the external result shape."""
        return {
            "task": self.task,
            "routing_plan": [item.to_dict() for item in self.routing_plan],
            "plan": [step.to_dict() for step in self.plan] if self.plan else [],
            "results": [result.to_dict() for result in self.results],
            "consolidated_output": self.consolidated_output,
            "success": self.success,
            "errors": list(self.errors),
            "cancelled": self.cancelled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunResult:
        """Rebuild from :meth:`to_dict` output."""
        steps = tuple(SubRequest.from_dict(item) for item in data.get("plan", []))
        return cls(
            task=str(data.get("task", "")),
            plan=ExecutionPlan(steps=steps) if steps else None,
            results=[SubResult.from_dict(item) for item in data.get("results", [])],
            consolidated_output=str(data.get("consolidated_output", "")),
            success=bool(data.get("success", False)),
            errors=[str(item) for item in data.get("errors", [])],
            cancelled=bool(data.get("cancelled", False)),
        )
