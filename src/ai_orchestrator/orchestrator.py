"""Run a task end to end: plan, dispatch each step, consolidate."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from ai_orchestrator.config.categories import get_category_profiles
from ai_orchestrator.consolidator import merge_results
from ai_orchestrator.decomposer import TaskDecomposer
from ai_orchestrator.errors import (
    NO_PROVIDERS_MESSAGE,
    ConfigurationError,
    NoClientForRouteError,
    RoutingError,
)
from ai_orchestrator.models.config import Provider
from ai_orchestrator.models.plan import CompletionResult, RunResult, SubResult, display_name
from ai_orchestrator.providers.clients import StrandsCapabilityClient
from ai_orchestrator.providers.registry import get_default_registry
from ai_orchestrator.telemetry.tracing import RunSpan
from ai_orchestrator.utils import truncate

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ai_orchestrator.credentials import CredentialStore
    from ai_orchestrator.models.config import CategoryProfile, TaskCategory
    from ai_orchestrator.models.plan import SubRequest
    from ai_orchestrator.providers.clients import CapabilityClient
    from ai_orchestrator.providers.registry import ProviderRegistry
    from ai_orchestrator.run_history import RunHistoryStore

    ClientFactory = Callable[[Provider, str, str], CapabilityClient]
    ProgressCallback = Callable[[str], None]
    CancelCheck = Callable[[], bool]

logger = logging.getLogger(__name__)

DESCRIPTION_PREVIEW_CHARS = 40


class Orchestrator:
    """Plan a task, run each step on its routed provider and merge the outputs.

    Steps run one at a time in plan order. A failing step never stops the
    run: its error is recorded and the remaining steps still execute.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        registry: ProviderRegistry | None = None,
        profiles: Mapping[TaskCategory, CategoryProfile] | None = None,
        client_factory: ClientFactory | None = None,
        history: RunHistoryStore | None = None,
    ) -> None:
        self._credentials = credentials
        self._registry = registry or get_default_registry()
        self._profiles = profiles if profiles is not None else get_category_profiles()
        self._client_factory = client_factory or partial(
            StrandsCapabilityClient, registry=self._registry
        )
        self._decomposer = TaskDecomposer(self._profiles)
        self.history = history

    def build_clients(self) -> dict[Provider, CapabilityClient]:
        """Construct a client for every provider with a credential.

        Providers whose client cannot be built are logged and skipped.
        """
        clients: dict[Provider, CapabilityClient] = {}
        for provider in Provider:
            api_key = self._credentials.get_credential(provider)
            if not api_key:
                continue
            try:
                model_id = self._credentials.get_model_identifier(provider)
                clients[provider] = self._client_factory(provider, api_key, model_id)
            except (ConfigurationError, ImportError, ValueError) as exc:
                logger.warning("Skipping %s: %s", display_name(provider), exc)
        return clients

    def list_available_providers(self) -> list[Provider]:
        return list(self.build_clients())

    async def run(
        self,
        task: str,
        on_progress: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> RunResult:
        """Run ``task`` and return the consolidated result.

        Args:
            task: Free-form task text.
            on_progress: Optional callback receiving short status messages.
            should_cancel: Optional check consulted before each step; when it
                returns True the run stops and keeps the results collected so far.
        """
        # Rebuilt per run so credential changes apply without a restart
        clients = self.build_clients()
        result = RunResult(task=task)

        with RunSpan(task=task).span() as run_span:
            if not clients:
                result.errors.append(str(ConfigurationError(NO_PROVIDERS_MESSAGE)))
                result.success = False
                run_span.set_result(result)
                return self._finish(result)

            self._emit(on_progress, "Analyzing task...")
            try:
                result.plan = self._decomposer.plan(task, list(clients))
            except RoutingError as exc:
                result.errors.append(str(exc))
                result.success = False
                run_span.set_result(result)
                return self._finish(result)
            run_span.set_plan(result.plan)

            total = len(result.plan)
            for step in result.plan:
                if should_cancel is not None and should_cancel():
                    completed = len(result.results)
                    logger.info("Run cancelled after %d of %d steps", completed, total)
                    result.errors.append(f"Run cancelled after {completed} of {total} steps")
                    result.cancelled = True
                    break

                self._emit(
                    on_progress,
                    f"Processing with {display_name(step.provider)}: "
                    f"{truncate(step.description, DESCRIPTION_PREVIEW_CHARS)}...",
                )
                sub_result = SubResult(request=step, response=await self._execute(step, clients))
                result.results.append(sub_result)
                run_span.add_step(sub_result)
                if not sub_result.success:
                    result.errors.append(f"[{step.provider.value}] {sub_result.error}")

            self._emit(on_progress, "Consolidating results...")
            result.consolidated_output = merge_results(result.results)
            result.success = result.compute_success()
            run_span.set_result(result)
        return self._finish(result)

    async def _execute(
        self,
        step: SubRequest,
        clients: Mapping[Provider, CapabilityClient],
    ) -> CompletionResult:
        client = clients.get(step.provider)
        if client is None:
            if not clients:
                return CompletionResult.failure(str(NoClientForRouteError(step.provider.value)))
            client = next(iter(clients.values()))
            logger.info(
                "No client for %s, using %s instead",
                step.provider.value,
                client.provider.value,
            )
        try:
            return await client.complete(step.prompt, step.system_prompt)
        except Exception as exc:  # noqa: BLE001 - a misbehaving client must not abort the run
            logger.exception("Client %s raised during step %d", client.provider.value, step.position)
            return CompletionResult.failure(
                str(exc), provider=client.provider, model_id=client.model_id
            )

    def _emit(self, on_progress: ProgressCallback | None, message: str) -> None:
        if on_progress is None:
            return
        try:
            on_progress(message)
        except Exception:  # noqa: BLE001 - progress reporting is best effort
            logger.warning("Progress callback failed for %r", message, exc_info=True)

    def _finish(self, result: RunResult) -> RunResult:
        if self.history is None:
            return result
        try:
            self.history.record(result.task, result)
        except OSError:
            logger.exception("Failed to record run history")
        return result
