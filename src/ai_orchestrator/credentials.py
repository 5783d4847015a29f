"""Credential and model-identifier lookup for capability providers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from ai_orchestrator.models.config import Provider
from ai_orchestrator.models.plan import display_name
from ai_orchestrator.providers.registry import get_default_registry

if TYPE_CHECKING:
    from ai_orchestrator.providers.registry import ProviderRegistry
    from ai_orchestrator.run_history import RunHistoryStore


class CredentialStore(Protocol):
    """Source of provider credentials and model identifiers."""

    def get_credential(self, provider: Provider) -> str | None:
        """Return the credential for ``provider`` or None when absent."""

    def get_model_identifier(self, provider: Provider) -> str:
        """Return the configured model id, falling back to the provider default."""


class EnvCredentialStore:
    """Read credentials and model overrides from environment variables."""

    def __init__(self, registry: ProviderRegistry | None = None) -> None:
        self._registry = registry or get_default_registry()

    def get_credential(self, provider: Provider) -> str | None:
        config = self._registry.get_provider(provider)
        if config is None:
            return None
        value = os.getenv(config.api_key_env, "").strip()
        return value or None

    def get_model_identifier(self, provider: Provider) -> str:
        config = self._registry.require_provider(provider)
        return os.getenv(config.model_env, "").strip() or config.default_model


@dataclass(frozen=True)
class ProviderStatus:
    """Configuration state of one provider."""

    provider: Provider
    name: str
    active: bool
    specialty: str
    model_id: str


@dataclass(frozen=True)
class StatusInfo:
    """Overview of configured providers and usage."""

    providers: list[ProviderStatus]
    tasks_completed: int
    available_providers: int
    total_providers: int


def get_status_info(
    credentials: CredentialStore,
    *,
    registry: ProviderRegistry | None = None,
    history: RunHistoryStore | None = None,
) -> StatusInfo:
    """Summarize which providers have credentials and how many tasks completed."""
    registry = registry or get_default_registry()
    statuses: list[ProviderStatus] = []
    for provider in Provider:
        config = registry.get_provider(provider)
        statuses.append(
            ProviderStatus(
                provider=provider,
                name=display_name(provider),
                active=bool(credentials.get_credential(provider)),
                specialty=config.specialty if config else "General",
                model_id=credentials.get_model_identifier(provider) if config else "",
            )
        )
    return StatusInfo(
        providers=statuses,
        tasks_completed=history.tasks_completed() if history is not None else 0,
        available_providers=sum(1 for status in statuses if status.active),
        total_providers=len(statuses),
    )
