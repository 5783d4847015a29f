"""Pydantic configuration models and runtime plan/result models."""

from ai_orchestrator.models.config import (
    CATEGORY_PRIORITY,
    CategoryProfile,
    Provider,
    ProviderConfig,
    TaskCategory,
)
from ai_orchestrator.models.plan import (
    CompletionResult,
    ExecutionPlan,
    RoutingPlanItem,
    RunResult,
    SubRequest,
    SubResult,
    display_name,
)
from ai_orchestrator.models.settings import Settings, load_settings

__all__ = [
    "CATEGORY_PRIORITY",
    "CategoryProfile",
    "CompletionResult",
    "ExecutionPlan",
    "Provider",
    "ProviderConfig",
    "RoutingPlanItem",
    "RunResult",
    "Settings",
    "SubRequest",
    "SubResult",
    "TaskCategory",
    "display_name",
    "load_settings",
]
