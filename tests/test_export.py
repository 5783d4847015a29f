import pytest
from ai_orchestrator.export import export_entry, export_history, render_entry_markdown
from ai_orchestrator.models.config import Provider, TaskCategory
from ai_orchestrator.models.plan import (
    CompletionResult,
    ExecutionPlan,
    RunResult,
    SubRequest,
    SubResult,
)
from ai_orchestrator.run_history import HistoryEntry, RunHistoryStore


def _entry() -> HistoryEntry:
    steps = (
        SubRequest(
            position=1,
            description="Architecture phase",
            category=TaskCategory.ARCHITECTURE,
            provider=Provider.OPENAI,
            prompt="p1",
        ),
        SubRequest(
            position=2,
            description="Coding phase",
            category=TaskCategory.CODING,
            provider=Provider.ANTHROPIC,
            prompt="p2",
            prerequisites=(1,),
        ),
    )
    results = [
        SubResult(
            request=steps[0],
            response=CompletionResult(
                content="Layers", success=True, provider=Provider.OPENAI, model_id="gpt-4"
            ),
        ),
        SubResult(
            request=steps[1],
            response=CompletionResult(
                content="Code",
                success=True,
                provider=Provider.ANTHROPIC,
                model_id="claude-3-opus-20240229",
            ),
        ),
    ]
    return HistoryEntry(
        entry_id="20260101T000000000000Z-abcd1234",
        recorded_at="2026-01-01T00:00:00+00:00",
        task="Design a REST API and implement authentication",
        result=RunResult(
            task="Design a REST API and implement authentication",
            plan=ExecutionPlan(steps=steps),
            results=results,
            consolidated_output="merged output",
        ),
    )


def test_render_entry_markdown() -> None:
    markdown = render_entry_markdown(_entry())

    assert markdown.startswith("# AI Orchestrator Result\n\n**Date:** 2026-01-01 00:00:00 UTC")
    assert "## Task\n\nDesign a REST API and implement authentication" in markdown
    assert "- **OpenAI** (gpt-4): architecture" in markdown
    assert "- **Anthropic** (claude-3-opus-20240229): coding" in markdown
    assert markdown.endswith("## Result\n\nmerged output\n")


def test_render_entry_markdown_without_output() -> None:
    entry = _entry()
    entry.result.consolidated_output = ""
    assert "## Result\n\nNo output" in render_entry_markdown(entry)


def test_export_entry(tmp_path) -> None:
    path = export_entry(_entry(), tmp_path)
    assert path.name == "20260101T000000000000Z-abcd1234.md"
    assert "# AI Orchestrator Result" in path.read_text(encoding="utf-8")


def test_export_history(tmp_path) -> None:
    store = RunHistoryStore(tmp_path / "history")
    entry = _entry()
    recorded = store.record(entry.task, entry.result)

    export_path = export_history(store, tmp_path / "exports")

    summary = (export_path / "summary.md").read_text(encoding="utf-8")
    assert recorded.entry_id in summary
    assert "OpenAI, Anthropic" in summary
    assert (export_path / "entries" / f"{recorded.entry_id}.json").exists()
    assert (export_path / "entries" / f"{recorded.entry_id}.md").exists()


def test_export_history_without_entries(tmp_path) -> None:
    with pytest.raises(RuntimeError, match="No history entries found"):
        export_history(RunHistoryStore(tmp_path / "history"), tmp_path / "exports")
