"""Provider registry for the capability backends."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ai_orchestrator.config.config_paths import resolve_config_path
from ai_orchestrator.errors import ConfigurationError
from ai_orchestrator.models.config import Provider, ProviderConfig

if TYPE_CHECKING:
    from strands.models.model import Model

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = ("openai", "anthropic", "gemini")

# Global registry instance
_default_registry: ProviderRegistry | None = None


class ProviderRegistry:
    """Registry mapping each ``Provider`` to its configuration.

    Builds strands model instances for a provider given a credential and a
    model identifier.
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._providers: dict[Provider, ProviderConfig] = {}

    def register_provider(self, provider: Provider, config: ProviderConfig) -> None:
        """Register a provider.

        Args:
            provider: Provider identifier
            config: Provider configuration
        """
        if config.type not in SUPPORTED_TYPES:
            msg = f"Unsupported provider type '{config.type}'. Supported types: {list(SUPPORTED_TYPES)}"
            raise ConfigurationError(msg)
        self._providers[provider] = config
        logger.debug("Registered provider: %s (%s)", provider.value, config.type)

    def get_provider(self, provider: Provider) -> ProviderConfig | None:
        """Get a provider configuration, None when not registered."""
        return self._providers.get(provider)

    def require_provider(self, provider: Provider) -> ProviderConfig:
        """Get a provider configuration or raise ConfigurationError."""
        config = self._providers.get(provider)
        if config is None:
            msg = f"Provider '{provider.value}' is not configured"
            raise ConfigurationError(msg)
        return config

    def list_providers(self) -> list[Provider]:
        """List registered providers in construction order."""
        return [provider for provider in Provider if provider in self._providers]

    def create_model(self, provider: Provider, *, api_key: str, model_id: str) -> Model:
        """Create a strands model instance for ``provider``.

        Args:
            provider: Provider to build a model for.
            api_key: Non-empty credential.
            model_id: Model identifier understood by the provider API.

        Returns:
            Configured model instance
        """
        config = self.require_provider(provider)
        if not api_key:
            msg = f"Missing API key: set {config.api_key_env}"
            raise ConfigurationError(msg)

        if config.type == "anthropic":
            return self._create_anthropic_model(config, api_key, model_id)
        if config.type == "gemini":
            return self._create_gemini_model(config, api_key, model_id)
        return self._create_openai_model(config, api_key, model_id)

    def _create_openai_model(self, config: ProviderConfig, api_key: str, model_id: str) -> Model:
        """Create an OpenAI-compatible model instance (OpenAI, Moonshot)."""
        from strands.models.openai import OpenAIModel  # noqa: PLC0415

        client_args: dict[str, Any] = {"api_key": api_key}
        if config.base_url:
            client_args["base_url"] = config.base_url
        return OpenAIModel(
            client_args=client_args,
            model_id=model_id,
            params={"temperature": config.temperature, "max_tokens": config.max_tokens},
        )

    def _create_anthropic_model(self, config: ProviderConfig, api_key: str, model_id: str) -> Model:
        """Create an Anthropic model instance."""
        from strands.models.anthropic import AnthropicModel  # noqa: PLC0415

        return AnthropicModel(
            client_args={"api_key": api_key},
            model_id=model_id,
            max_tokens=config.max_tokens,
            params={"temperature": config.temperature},
        )

    def _create_gemini_model(self, config: ProviderConfig, api_key: str, model_id: str) -> Model:
        """Create a Gemini model instance."""
        from strands.models.gemini import GeminiModel  # noqa: PLC0415

        return GeminiModel(
            client_args={"api_key": api_key},
            model_id=model_id,
            params={"temperature": config.temperature, "max_output_tokens": config.max_tokens},
        )


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file, return empty dict if not found."""
    if not path.exists():
        return {}
    with path.open("rb") as file:
        return tomllib.load(file)


def load_providers(path: Path | str | None = None) -> ProviderRegistry:
    """Load capability providers from ``providers.toml``.

    Unknown provider identifiers are skipped with a warning. Every known
    provider must be configured.

    Raises:
        ConfigurationError: If a known provider is missing or misconfigured.
    """
    source = Path(path) if path is not None else resolve_config_path("providers")
    registry = ProviderRegistry()
    data = _load_toml_file(source)

    for name, entry in data.get("providers", {}).items():
        provider = Provider.parse(name)
        if provider is None:
            logger.warning("Ignoring unknown provider '%s' in %s", name, source)
            continue
        for key in ("api_key_env", "model_env", "default_model"):
            if not entry.get(key):
                msg = f"Missing {key} for provider '{name}' in {source}"
                raise ConfigurationError(msg)
        registry.register_provider(
            provider,
            ProviderConfig(
                type=str(entry.get("type", "openai")),
                api_key_env=str(entry["api_key_env"]),
                model_env=str(entry["model_env"]),
                default_model=str(entry["default_model"]),
                base_url=entry.get("base_url"),
                temperature=float(entry.get("temperature", 0.7)),
                max_tokens=int(entry.get("max_tokens", 4096)),
                specialty=str(entry.get("specialty", "General")),
            ),
        )

    missing = [provider.value for provider in Provider if registry.get_provider(provider) is None]
    if missing:
        msg = f"Missing provider configuration in {source}: {missing}"
        raise ConfigurationError(msg)

    logger.info("Loaded %d capability providers", len(registry.list_providers()))
    return registry


def get_default_registry() -> ProviderRegistry:
    """Get or create the default provider registry."""
    global _default_registry  # noqa: PLW0603
    if _default_registry is None:
        _default_registry = load_providers()
    return _default_registry
