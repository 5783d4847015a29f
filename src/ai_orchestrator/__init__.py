"""Route tasks to the best-suited AI provider and consolidate the results."""

from ai_orchestrator.classifier import TaskClassifier
from ai_orchestrator.consolidator import merge_results
from ai_orchestrator.credentials import (
    CredentialStore,
    EnvCredentialStore,
    ProviderStatus,
    StatusInfo,
    get_status_info,
)
from ai_orchestrator.decomposer import TaskDecomposer
from ai_orchestrator.errors import (
    ConfigurationError,
    NoClientForRouteError,
    NoProviderAvailableError,
    OrchestratorError,
    ProviderError,
    RoutingError,
)
from ai_orchestrator.models import (
    CompletionResult,
    ExecutionPlan,
    Provider,
    RunResult,
    SubRequest,
    SubResult,
    TaskCategory,
)
from ai_orchestrator.orchestrator import Orchestrator
from ai_orchestrator.router import TaskRouter
from ai_orchestrator.run_history import HistoryEntry, RunHistoryStore

__all__ = [
    "CompletionResult",
    "ConfigurationError",
    "CredentialStore",
    "EnvCredentialStore",
    "ExecutionPlan",
    "HistoryEntry",
    "NoClientForRouteError",
    "NoProviderAvailableError",
    "Orchestrator",
    "OrchestratorError",
    "Provider",
    "ProviderError",
    "ProviderStatus",
    "RoutingError",
    "RunHistoryStore",
    "RunResult",
    "StatusInfo",
    "SubRequest",
    "SubResult",
    "TaskCategory",
    "TaskClassifier",
    "TaskDecomposer",
    "TaskRouter",
    "get_status_info",
    "merge_results",
]
