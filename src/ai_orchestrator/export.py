from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ai_orchestrator.run_history import HistoryEntry, RunHistoryStore


def render_entry_markdown(entry: HistoryEntry) -> str:
    """Render one history entry as a standalone Markdown document."""
    lines = [
        "# AI Orchestrator Result",
        "",
        f"**Date:** {_format_date(entry.recorded_at)}",
        "",
        "## Task",
        "",
        entry.task or "N/A",
        "",
        "## Models Used",
        "",
    ]
    lines.extend(
        f"- **{result.provider_display_name}** ({result.response.model_id}): {result.category.value}"
        for result in entry.result.results
    )
    lines.extend(["", "## Result", "", entry.result.consolidated_output or "No output", ""])
    return "\n".join(lines)


def export_entry(entry: HistoryEntry, export_dir: str | Path = ".exports") -> Path:
    """Write one entry as ``<entry_id>.md`` and return its path."""
    output_dir = Path(export_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{entry.entry_id}.md"
    path.write_text(render_entry_markdown(entry), encoding="utf-8")
    return path


def export_history(store: RunHistoryStore, export_dir: str | Path = ".exports") -> Path:
    """Export every stored run to a timestamped directory.

    The directory holds one Markdown file and one JSON snapshot per entry
    plus a ``summary.md`` table.
    """
    entries = store.list_entries()
    if not entries:
        message = "No history entries found"
        raise RuntimeError(message)

    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
    export_path = Path(export_dir) / timestamp
    export_path.mkdir(parents=True, exist_ok=True)

    entries_path = export_path / "entries"
    entries_path.mkdir(exist_ok=True)
    for entry in entries:
        (entries_path / f"{entry.entry_id}.json").write_text(
            json.dumps(entry.to_dict(), indent=2),
            encoding="utf-8",
        )
        export_entry(entry, entries_path)

    (export_path / "summary.md").write_text(render_history_summary_markdown(entries), encoding="utf-8")
    return export_path


def render_history_summary_markdown(entries: list[HistoryEntry]) -> str:
    """Render a Markdown summary table of history entries."""
    lines = ["# Run Summary", "", f"- Total runs: {len(entries)}", ""]
    lines.extend(
        [
            "| Entry ID | Status | Steps | Providers | Task | Recorded |",
            "| --- | --- | --- | --- | --- | --- |",
        ]
    )
    for entry in entries:
        result = entry.result
        providers = ", ".join(dict.fromkeys(item.provider_display_name for item in result.results))
        lines.append(
            "| "
            + " | ".join(
                [
                    entry.entry_id,
                    _status_label(entry),
                    str(len(result.results)),
                    providers or "-",
                    _table_cell(entry.task, 60),
                    entry.recorded_at,
                ]
            )
            + " |"
        )
    return "\n".join(lines)


def _status_label(entry: HistoryEntry) -> str:
    if entry.result.cancelled:
        return "cancelled"
    if not entry.result.success:
        return "failed"
    return "partial" if entry.result.errors else "success"


def _table_cell(text: str, limit: int) -> str:
    cleaned = " ".join(text.split()).replace("|", "\\|")
    if len(cleaned) > limit:
        return cleaned[: limit - 3] + "..."
    return cleaned


def _format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return value or "N/A"
