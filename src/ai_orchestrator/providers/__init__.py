"""Capability providers: configuration registry and clients."""

from ai_orchestrator.providers.clients import CapabilityClient, StrandsCapabilityClient
from ai_orchestrator.providers.registry import (
    ProviderRegistry,
    get_default_registry,
    load_providers,
)

__all__ = [
    "CapabilityClient",
    "ProviderRegistry",
    "StrandsCapabilityClient",
    "get_default_registry",
    "load_providers",
]
