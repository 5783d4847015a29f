"""Deterministic multi-label task classification over weighted patterns."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ai_orchestrator.config.categories import get_category_profiles
from ai_orchestrator.models.config import TaskCategory

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ai_orchestrator.models.config import CategoryProfile


class TaskClassifier:
    """Score task text against the category patterns.

    Every match of every pattern adds one to its category's score. The
    ``general`` category never matches and is the result when nothing else
    does.
    """

    def __init__(self, profiles: Mapping[TaskCategory, CategoryProfile] | None = None) -> None:
        profiles = profiles if profiles is not None else get_category_profiles()
        # Declaration order of TaskCategory, not mapping order
        self._patterns: dict[TaskCategory, tuple[re.Pattern[str], ...]] = {
            category: tuple(re.compile(pattern, re.IGNORECASE) for pattern in profiles[category].patterns)
            for category in TaskCategory
            if category is not TaskCategory.GENERAL
        }

    def score(self, text: str) -> dict[TaskCategory, int]:
        """Count non-overlapping pattern matches per category."""
        scores = {category: 0 for category in TaskCategory}
        for category, patterns in self._patterns.items():
            scores[category] = sum(
                sum(1 for _ in pattern.finditer(text)) for pattern in patterns
            )
        return scores

    def detect_primary(self, text: str) -> TaskCategory:
        """Return the highest-scoring category.

        Ties go to the earliest category in declaration order; an all-zero
        score vector yields ``general``.
        """
        best = TaskCategory.GENERAL
        best_score = 0
        for category, value in self.score(text).items():
            if value > best_score:
                best, best_score = category, value
        return best

    def detect_all(self, text: str) -> list[TaskCategory]:
        """Return every category with at least one matching pattern."""
        detected = [
            category
            for category, patterns in self._patterns.items()
            if any(pattern.search(text) for pattern in patterns)
        ]
        return detected or [TaskCategory.GENERAL]
