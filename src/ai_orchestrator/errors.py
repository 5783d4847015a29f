"""Error taxonomy for task routing and dispatch."""

from __future__ import annotations

NO_PROVIDERS_MESSAGE = "No providers available. Configure at least one API key."


class OrchestratorError(Exception):
    """Base class for orchestrator errors."""


class ConfigurationError(OrchestratorError):
    """Configuration is missing or invalid (tables, credentials, client setup)."""


class RoutingError(OrchestratorError):
    """A category could not be mapped to a provider."""


class NoProviderAvailableError(RoutingError):
    """Raised when routing is attempted with an empty provider set."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or NO_PROVIDERS_MESSAGE)


class NoClientForRouteError(RoutingError):
    """The routed provider has no live client and no substitute exists."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"No client available for {provider}")


class ProviderError(OrchestratorError):
    """A capability client invocation failed.

    Never escapes a capability client: clients convert it into a failed
    ``CompletionResult``.
    """
