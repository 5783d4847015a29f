"""Capability clients: prompt + optional system instruction -> completion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from strands import Agent

from ai_orchestrator.errors import ConfigurationError, ProviderError
from ai_orchestrator.models.plan import CompletionResult, display_name
from ai_orchestrator.providers.registry import get_default_registry

if TYPE_CHECKING:
    from strands.agent.agent_result import AgentResult

    from ai_orchestrator.models.config import Provider
    from ai_orchestrator.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class CapabilityClient(Protocol):
    """Protocol implemented by provider clients.

    ``complete`` must not raise in normal operation: failures are returned as
    ``CompletionResult(success=False, error=...)``.
    """

    provider: Provider
    model_id: str

    async def complete(self, prompt: str, system_prompt: str | None = None) -> CompletionResult:
        """Run one completion."""


class StrandsCapabilityClient:
    """Capability client backed by a strands model.

    Every call runs a fresh single-turn agent, so no conversation state is
    shared between sub-requests.
    """

    def __init__(
        self,
        provider: Provider,
        api_key: str,
        model_id: str,
        *,
        registry: ProviderRegistry | None = None,
    ) -> None:
        """Build the client.

        Raises:
            ConfigurationError: If ``api_key`` is empty or the provider is not configured.
            ImportError: If the provider's optional strands extra is not installed.
        """
        if not api_key:
            msg = f"API key required for {display_name(provider)}"
            raise ConfigurationError(msg)
        self.provider = provider
        self.model_id = model_id
        self._model = (registry or get_default_registry()).create_model(
            provider, api_key=api_key, model_id=model_id
        )

    async def complete(self, prompt: str, system_prompt: str | None = None) -> CompletionResult:
        """Run one completion, converting any failure into a failed result."""
        try:
            result = await self._invoke(prompt, system_prompt)
            content = _extract_text(result)
        except Exception as exc:  # noqa: BLE001 - failures cross the client boundary as results
            logger.warning("%s completion failed: %s", display_name(self.provider), exc)
            return CompletionResult.failure(str(exc), provider=self.provider, model_id=self.model_id)

        return CompletionResult(
            content=content,
            success=True,
            tokens_used=_total_tokens(result),
            metadata={"stop_reason": str(getattr(result, "stop_reason", "") or "")},
            provider=self.provider,
            model_id=self.model_id,
        )

    async def _invoke(self, prompt: str, system_prompt: str | None) -> AgentResult:
        agent = Agent(model=self._model, system_prompt=system_prompt, callback_handler=None)
        return await agent.invoke_async(prompt)


def _extract_text(result: Any) -> str:
    if not isinstance(getattr(result, "message", None), dict):
        msg = "Malformed completion payload: no message in agent result"
        raise ProviderError(msg)
    return str(result).strip()


def _total_tokens(result: Any) -> int | None:
    metrics = getattr(result, "metrics", None)
    if metrics is None:
        return None
    usage = metrics.get_summary().get("accumulated_usage", {})
    total = usage.get("totalTokens")
    return int(total) if total is not None else None
