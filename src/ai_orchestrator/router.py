"""Category to provider routing with availability fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ai_orchestrator.config.categories import get_category_profiles
from ai_orchestrator.errors import NoProviderAvailableError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ai_orchestrator.models.config import CategoryProfile, Provider, TaskCategory

logger = logging.getLogger(__name__)


class TaskRouter:
    """Map a task category to a provider.

    The category's preferred provider wins when available; otherwise the
    first available provider in caller order is used.
    """

    def __init__(self, profiles: Mapping[TaskCategory, CategoryProfile] | None = None) -> None:
        self._profiles = profiles if profiles is not None else get_category_profiles()

    def preferred_provider(self, category: TaskCategory) -> Provider:
        return self._profiles[category].provider

    def resolve(self, category: TaskCategory, available: Sequence[Provider]) -> Provider:
        """Resolve the provider for ``category``.

        Raises:
            NoProviderAvailableError: If ``available`` is empty.
        """
        if not available:
            raise NoProviderAvailableError

        preferred = self.preferred_provider(category)
        if preferred in available:
            return preferred

        fallback = available[0]
        logger.debug(
            "Preferred provider %s unavailable for %s, falling back to %s",
            preferred.value,
            category.value,
            fallback.value,
        )
        return fallback
