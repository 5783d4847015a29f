"""Loader for the static task category table."""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ai_orchestrator.config.config_paths import resolve_config_path
from ai_orchestrator.errors import ConfigurationError
from ai_orchestrator.models.config import CategoryProfile, Provider, TaskCategory

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

# Process-wide table, built on first use and never mutated afterwards
_category_profiles: Mapping[TaskCategory, CategoryProfile] | None = None


def load_category_profiles(path: Path | str | None = None) -> Mapping[TaskCategory, CategoryProfile]:
    """Load and validate the category table.

    Args:
        path: TOML file to read. Defaults to the external ``categories.toml``
            when present, the bundled one otherwise.

    Returns:
        Read-only mapping with one profile per ``TaskCategory``, in
        declaration order.

    Raises:
        ConfigurationError: If a category is missing or unknown, a pattern does
            not compile, a provider is unknown, or the catch-all has patterns.
    """
    source = Path(path) if path is not None else resolve_config_path("categories")
    with source.open("rb") as file:
        data = tomllib.load(file)

    raw_categories: dict[str, Any] = data.get("categories", {})
    parsed: dict[TaskCategory, CategoryProfile] = {}
    for name, entry in raw_categories.items():
        category = TaskCategory.parse(name)
        if category is None:
            msg = f"Unknown task category '{name}' in {source}"
            raise ConfigurationError(msg)
        parsed[category] = _parse_profile(category, entry, source)

    missing = [category.value for category in TaskCategory if category not in parsed]
    if missing:
        msg = f"Missing task categories in {source}: {missing}"
        raise ConfigurationError(msg)

    logger.debug("Loaded %d task categories from %s", len(parsed), source)
    return MappingProxyType({category: parsed[category] for category in TaskCategory})


def _parse_profile(category: TaskCategory, entry: dict[str, Any], source: Path) -> CategoryProfile:
    provider = Provider.parse(str(entry.get("provider", "")))
    if provider is None:
        msg = f"Unknown provider '{entry.get('provider')}' for category '{category.value}' in {source}"
        raise ConfigurationError(msg)

    system_prompt = str(entry.get("system_prompt", "")).strip()
    if not system_prompt:
        msg = f"Missing system_prompt for category '{category.value}' in {source}"
        raise ConfigurationError(msg)

    patterns = tuple(str(pattern) for pattern in entry.get("patterns", []))
    if category is TaskCategory.GENERAL and patterns:
        msg = f"The '{category.value}' catch-all category must not define patterns"
        raise ConfigurationError(msg)
    for pattern in patterns:
        try:
            re.compile(pattern, re.IGNORECASE)
        except re.error as exc:
            msg = f"Invalid pattern {pattern!r} for category '{category.value}': {exc}"
            raise ConfigurationError(msg) from exc

    return CategoryProfile(
        category=category,
        provider=provider,
        system_prompt=system_prompt,
        prompt_prefix=str(entry.get("prompt_prefix", "")),
        patterns=patterns,
    )


def get_category_profiles() -> Mapping[TaskCategory, CategoryProfile]:
    """Get or load the process-wide category table."""
    global _category_profiles  # noqa: PLW0603
    if _category_profiles is None:
        _category_profiles = load_category_profiles()
    return _category_profiles
