"""Split a task into an ordered chain of routed sub-requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ai_orchestrator.classifier import TaskClassifier
from ai_orchestrator.config.categories import get_category_profiles
from ai_orchestrator.errors import NoProviderAvailableError
from ai_orchestrator.models.config import CATEGORY_PRIORITY
from ai_orchestrator.models.plan import ExecutionPlan, SubRequest
from ai_orchestrator.router import TaskRouter
from ai_orchestrator.utils import title_case

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ai_orchestrator.models.config import CategoryProfile, Provider, TaskCategory

logger = logging.getLogger(__name__)


def priority_rank(category: TaskCategory) -> int:
    """Position of ``category`` in the plan priority list (unlisted go last)."""
    try:
        return CATEGORY_PRIORITY.index(category)
    except ValueError:
        return len(CATEGORY_PRIORITY)


class TaskDecomposer:
    """Build execution plans from task text.

    A task matching one category becomes a single sub-request carrying the
    untouched text. A task matching several becomes one sub-request per
    category, higher-level planning phases first, each prompt reframed with
    the category prefix and linked to the previous step. The link is display
    metadata only: earlier outputs are never fed into later prompts.
    """

    def __init__(
        self,
        profiles: Mapping[TaskCategory, CategoryProfile] | None = None,
        *,
        classifier: TaskClassifier | None = None,
        router: TaskRouter | None = None,
    ) -> None:
        self._profiles = profiles if profiles is not None else get_category_profiles()
        self._classifier = classifier or TaskClassifier(self._profiles)
        self._router = router or TaskRouter(self._profiles)

    def plan(self, task: str, available: Sequence[Provider]) -> ExecutionPlan:
        """Build the execution plan for ``task``.

        Raises:
            NoProviderAvailableError: If ``available`` is empty.
        """
        if not available:
            raise NoProviderAvailableError

        detected = self._classifier.detect_all(task)
        if len(detected) == 1:
            category = detected[0]
            return ExecutionPlan(
                steps=(
                    SubRequest(
                        position=1,
                        description=task,
                        category=category,
                        provider=self._router.resolve(category, available),
                        prompt=task,
                        system_prompt=self._profiles[category].system_prompt,
                    ),
                )
            )

        # sorted() is stable, so equal ranks keep detection order
        ordered = sorted(detected, key=priority_rank)
        steps: list[SubRequest] = []
        for position, category in enumerate(ordered, start=1):
            profile = self._profiles[category]
            steps.append(
                SubRequest(
                    position=position,
                    description=f"{title_case(category.value)} phase",
                    category=category,
                    provider=self._router.resolve(category, available),
                    prompt=profile.prompt_prefix + task,
                    system_prompt=profile.system_prompt,
                    prerequisites=(position - 1,) if position > 1 else (),
                )
            )
        logger.info(
            "Decomposed task into %d steps: %s",
            len(steps),
            ", ".join(step.category.value for step in steps),
        )
        return ExecutionPlan(steps=tuple(steps))
