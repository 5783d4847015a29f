"""Configuration path resolution.

TOML tables can be loaded from:
1. Bundled defaults (package resources)
2. External directory (ORCHESTRATOR_CONFIG_DIR environment variable)

An external file completely replaces the bundled file of the same name.
"""

from __future__ import annotations

import os
from importlib import resources
from pathlib import Path

# Default external config directory (fallback for local dev without .env)
DEFAULT_CONFIG_DIR = "./config"

CONFIG_FILES = {
    "categories": "categories.toml",
    "providers": "providers.toml",
}

# Module-level override (can be set via set_config_dir)
_config_dir_override: str | None = None


def set_config_dir(path: str | None) -> None:
    """Set a module-level config directory override.

    Args:
        path: The config directory path, or None to clear override.
    """
    global _config_dir_override  # noqa: PLW0603
    _config_dir_override = path


def get_config_dir() -> Path:
    """Get the external config directory.

    Priority:
    1. Module-level override (set via set_config_dir)
    2. ORCHESTRATOR_CONFIG_DIR environment variable
    3. Default: ./config
    """
    if _config_dir_override:
        return Path(_config_dir_override).expanduser()

    config_dir = os.getenv("ORCHESTRATOR_CONFIG_DIR", DEFAULT_CONFIG_DIR)
    return Path(config_dir).expanduser()


def _filename(config_name: str) -> str:
    filename = CONFIG_FILES.get(config_name)
    if not filename:
        msg = f"Unknown config: {config_name}. Valid: {list(CONFIG_FILES.keys())}"
        raise ValueError(msg)
    return filename


def get_bundled_path(config_name: str) -> Path:
    """Get the bundled (package resource) path for a config file."""
    return Path(str(resources.files("ai_orchestrator.config").joinpath(_filename(config_name))))


def get_external_path(config_name: str) -> Path:
    """Get the external override path for a config file (may not exist)."""
    return get_config_dir() / _filename(config_name)


def resolve_config_path(config_name: str, prefer_external: bool = True) -> Path:
    """Resolve to the best available config path.

    Args:
        config_name: The config file identifier.
        prefer_external: If True, use external when it exists.

    Returns:
        Path to the config file to use.
    """
    external = get_external_path(config_name)
    if prefer_external and external.exists():
        return external
    return get_bundled_path(config_name)
