from __future__ import annotations

import pytest
from ai_orchestrator.errors import NO_PROVIDERS_MESSAGE, ConfigurationError
from ai_orchestrator.models.config import Provider, TaskCategory
from ai_orchestrator.models.plan import CompletionResult, SubRequest
from ai_orchestrator.orchestrator import Orchestrator
from ai_orchestrator.run_history import RunHistoryStore


class FakeClient:
    def __init__(self, provider: Provider, model_id: str, *, fail: bool = False, raises: bool = False) -> None:
        self.provider = provider
        self.model_id = model_id
        self.fail = fail
        self.raises = raises
        self.calls: list[tuple[str, str | None]] = []

    async def complete(self, prompt: str, system_prompt: str | None = None) -> CompletionResult:
        self.calls.append((prompt, system_prompt))
        if self.raises:
            raise RuntimeError("socket closed")
        if self.fail:
            return CompletionResult.failure("rate limited", provider=self.provider, model_id=self.model_id)
        return CompletionResult(
            content=f"{self.provider.value} answer",
            success=True,
            tokens_used=10,
            provider=self.provider,
            model_id=self.model_id,
        )


class FakeCredentials:
    def __init__(self, keys: dict[Provider, str]) -> None:
        self.keys = keys

    def get_credential(self, provider: Provider) -> str | None:
        return self.keys.get(provider)

    def get_model_identifier(self, provider: Provider) -> str:
        return f"{provider.value}-model"


class FakeFactory:
    def __init__(self, *, failing: set[Provider] | None = None, raising: set[Provider] | None = None) -> None:
        self.failing = failing or set()
        self.raising = raising or set()
        self.clients: dict[Provider, FakeClient] = {}

    def __call__(self, provider: Provider, api_key: str, model_id: str) -> FakeClient:
        if api_key == "broken":
            msg = "bad key"
            raise ConfigurationError(msg)
        client = FakeClient(
            provider,
            model_id,
            fail=provider in self.failing,
            raises=provider in self.raising,
        )
        self.clients[provider] = client
        return client


ALL_KEYS = {provider: "key" for provider in Provider}
MULTI_TASK = "Design the architecture, create a roadmap, implement the code, and review it"


@pytest.mark.asyncio
async def test_run_without_providers() -> None:
    messages: list[str] = []
    orchestrator = Orchestrator(FakeCredentials({}), client_factory=FakeFactory())

    result = await orchestrator.run("fix this bug", on_progress=messages.append)

    assert result.success is False
    assert result.errors == ["No providers available. Configure at least one API key."]
    assert result.plan is None
    assert result.results == []
    assert messages == []


@pytest.mark.asyncio
async def test_run_single_step_reports_progress() -> None:
    messages: list[str] = []
    factory = FakeFactory()
    orchestrator = Orchestrator(FakeCredentials({Provider.ANTHROPIC: "key"}), client_factory=factory)

    result = await orchestrator.run("fix this bug", on_progress=messages.append)

    assert result.success is True
    assert result.errors == []
    assert result.consolidated_output == "anthropic answer"
    assert messages == [
        "Analyzing task...",
        "Processing with Anthropic: fix this bug...",
        "Consolidating results...",
    ]
    prompt, system_prompt = factory.clients[Provider.ANTHROPIC].calls[0]
    assert prompt == "fix this bug"
    assert system_prompt is not None
    assert system_prompt.startswith("You are a debugging expert.")


@pytest.mark.asyncio
async def test_progress_truncates_long_descriptions() -> None:
    messages: list[str] = []
    task = "fix this bug " + "x" * 80
    orchestrator = Orchestrator(FakeCredentials({Provider.ANTHROPIC: "key"}), client_factory=FakeFactory())

    await orchestrator.run(task, on_progress=messages.append)

    assert messages[1] == f"Processing with Anthropic: {task[:40]}..."


@pytest.mark.asyncio
async def test_run_multi_step_routes_each_category() -> None:
    factory = FakeFactory()
    orchestrator = Orchestrator(FakeCredentials(ALL_KEYS), client_factory=factory)

    result = await orchestrator.run(MULTI_TASK)

    assert [item.category for item in result.routing_plan] == [
        TaskCategory.ARCHITECTURE,
        TaskCategory.ROADMAP,
        TaskCategory.CODING,
        TaskCategory.CODE_REVIEW,
    ]
    assert [sub.provider for sub in result.results] == [
        Provider.OPENAI,
        Provider.OPENAI,
        Provider.ANTHROPIC,
        Provider.MOONSHOT,
    ]
    assert len(factory.clients[Provider.OPENAI].calls) == 2
    assert Provider.GEMINI not in {sub.provider for sub in result.results}
    assert result.consolidated_output.startswith("## Architecture (OpenAI)\n\nopenai answer")
    assert result.consolidated_output.count("\n\n---\n\n") == 3


@pytest.mark.asyncio
async def test_failed_step_does_not_halt_run() -> None:
    factory = FakeFactory(failing={Provider.ANTHROPIC})
    orchestrator = Orchestrator(FakeCredentials(ALL_KEYS), client_factory=factory)

    result = await orchestrator.run(MULTI_TASK)

    assert len(result.results) == 4
    assert result.results[2].success is False
    assert result.errors == ["[anthropic] rate limited"]
    assert result.success is True
    assert "## Coding" not in result.consolidated_output
    assert "## Code Review (Moonshot)" in result.consolidated_output


@pytest.mark.asyncio
async def test_all_steps_failing_marks_run_failed() -> None:
    factory = FakeFactory(failing=set(Provider))
    orchestrator = Orchestrator(FakeCredentials(ALL_KEYS), client_factory=factory)

    result = await orchestrator.run(MULTI_TASK)

    assert result.success is False
    assert len(result.errors) == 4
    assert result.consolidated_output == ""


@pytest.mark.asyncio
async def test_client_that_raises_is_contained() -> None:
    factory = FakeFactory(raising={Provider.ANTHROPIC})
    orchestrator = Orchestrator(FakeCredentials({Provider.ANTHROPIC: "key"}), client_factory=factory)

    result = await orchestrator.run("fix this bug")

    assert result.success is False
    assert result.errors == ["[anthropic] socket closed"]
    assert result.results[0].provider == Provider.ANTHROPIC


@pytest.mark.asyncio
async def test_broken_client_construction_is_skipped() -> None:
    credentials = FakeCredentials({Provider.OPENAI: "broken", Provider.GEMINI: "key"})
    orchestrator = Orchestrator(credentials, client_factory=FakeFactory())

    assert orchestrator.list_available_providers() == [Provider.GEMINI]

    result = await orchestrator.run("hello there")

    assert result.success is True
    assert result.results[0].provider == Provider.GEMINI


@pytest.mark.asyncio
async def test_progress_callback_errors_are_ignored() -> None:
    def explode(_message: str) -> None:
        raise RuntimeError("ui gone")

    orchestrator = Orchestrator(FakeCredentials({Provider.OPENAI: "key"}), client_factory=FakeFactory())

    result = await orchestrator.run("hello there", on_progress=explode)

    assert result.success is True


@pytest.mark.asyncio
async def test_cancellation_stops_between_steps() -> None:
    checks = iter([False, False, True])
    orchestrator = Orchestrator(FakeCredentials(ALL_KEYS), client_factory=FakeFactory())

    result = await orchestrator.run(MULTI_TASK, should_cancel=lambda: next(checks))

    assert result.cancelled is True
    assert len(result.results) == 2
    assert result.errors == ["Run cancelled after 2 of 4 steps"]
    assert result.success is True


@pytest.mark.asyncio
async def test_execute_substitutes_first_client_for_missing_provider() -> None:
    factory = FakeFactory()
    orchestrator = Orchestrator(FakeCredentials({}), client_factory=factory)
    substitute = factory(Provider.GEMINI, "key", "gemini-model")
    step = SubRequest(
        position=1,
        description="Code Review phase",
        category=TaskCategory.CODE_REVIEW,
        provider=Provider.MOONSHOT,
        prompt="review it",
    )

    response = await orchestrator._execute(step, {Provider.GEMINI: substitute})
    assert response.success is True
    assert response.provider == Provider.GEMINI

    missing = await orchestrator._execute(step, {})
    assert missing.success is False
    assert missing.error == "No client available for moonshot"


@pytest.mark.asyncio
async def test_run_is_recorded_in_history(tmp_path) -> None:
    history = RunHistoryStore(tmp_path / "history", max_items=10)
    orchestrator = Orchestrator(
        FakeCredentials({Provider.ANTHROPIC: "key"}),
        client_factory=FakeFactory(),
        history=history,
    )

    await orchestrator.run("fix this bug")
    await Orchestrator(FakeCredentials({}), client_factory=FakeFactory(), history=history).run("x")

    entries = history.list_entries()
    assert len(entries) == 2
    assert {entry.task for entry in entries} == {"fix this bug", "x"}
    assert history.tasks_completed() == 1


class FailingHistory(RunHistoryStore):
    def record(self, task, result):
        raise OSError("disk full")


@pytest.mark.asyncio
async def test_history_failure_still_returns_result(tmp_path) -> None:
    orchestrator = Orchestrator(
        FakeCredentials({Provider.ANTHROPIC: "key"}),
        client_factory=FakeFactory(),
        history=FailingHistory(tmp_path / "history"),
    )

    result = await orchestrator.run("fix this bug")

    assert result.success is True
    assert result.consolidated_output == "anthropic answer"


@pytest.mark.asyncio
async def test_no_providers_error_is_a_configuration_error() -> None:
    orchestrator = Orchestrator(FakeCredentials({}), client_factory=FakeFactory())

    result = await orchestrator.run("fix this bug")

    assert result.errors == [str(ConfigurationError(NO_PROVIDERS_MESSAGE))]
