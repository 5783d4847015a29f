"""Command-line entry point: ``ai-orchestrator``."""

from __future__ import annotations

import argparse
import asyncio
import json
import shutil
import sys
from pathlib import Path

from ai_orchestrator.config.config_paths import CONFIG_FILES, get_bundled_path, set_config_dir
from ai_orchestrator.credentials import EnvCredentialStore, get_status_info
from ai_orchestrator.errors import OrchestratorError
from ai_orchestrator.export import export_entry, export_history, render_entry_markdown
from ai_orchestrator.models.plan import RunResult
from ai_orchestrator.models.settings import Settings, load_settings
from ai_orchestrator.orchestrator import Orchestrator
from ai_orchestrator.run_history import RunHistoryStore
from ai_orchestrator.telemetry import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-orchestrator",
        description="Route tasks to the best-suited AI provider and merge the results",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Run a task")
    run.add_argument("task", help="Task text")
    run.add_argument("--json", action="store_true", help="Print the full result as JSON")

    commands.add_parser("status", help="Show provider configuration and usage")

    history = commands.add_parser("history", help="Inspect stored runs")
    history_commands = history.add_subparsers(dest="history_command", required=True)
    history_commands.add_parser("list", help="List stored runs, newest first")
    for name, help_text in (
        ("show", "Show one stored run as Markdown"),
        ("rerun", "Run a stored task again"),
        ("remove", "Delete one stored run"),
    ):
        sub = history_commands.add_parser(name, help=help_text)
        sub.add_argument("entry_id", help="History entry id")
    history_commands.add_parser("clear", help="Delete all stored runs")

    export = commands.add_parser("export", help="Export history to Markdown")
    export.add_argument("--entry", help="Export only this entry")
    export.add_argument("--out", type=Path, default=Path(".exports"), help="Output directory")

    config = commands.add_parser("config", help="Manage configuration files")
    config_commands = config.add_subparsers(dest="config_command", required=True)
    init = config_commands.add_parser("init", help="Copy bundled TOML tables for editing")
    init.add_argument(
        "--dir",
        type=Path,
        help="Target directory (default: ORCHESTRATOR_CONFIG_DIR or ./config)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)
    set_config_dir(settings.config_dir)

    try:
        return _dispatch(args, settings)
    except (OrchestratorError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _dispatch(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "config":
        return bootstrap_config(args.dir or Path(settings.config_dir))

    history = RunHistoryStore(settings.history_dir, settings.history_max_items)

    if args.command == "run":
        return _run_task(args.task, history, as_json=args.json)
    if args.command == "status":
        return _print_status(history)
    if args.command == "export":
        return _export(history, args.entry, args.out)
    return _history(args, history)


def _run_task(task: str, history: RunHistoryStore, *, as_json: bool = False) -> int:
    orchestrator = Orchestrator(EnvCredentialStore(), history=history)
    result = asyncio.run(
        orchestrator.run(task, on_progress=None if as_json else _print_progress)
    )
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)
    return 0 if result.success else 1


def _print_progress(message: str) -> None:
    print(f"... {message}", file=sys.stderr)


def _print_result(result: RunResult) -> None:
    if result.routing_plan:
        print("Routing plan:")
        for item in result.routing_plan:
            print(f"  {item.position}. {item.category.value} -> {item.provider.value}")
        print()
    if result.consolidated_output:
        print(result.consolidated_output)
    for error in result.errors:
        print(f"Error: {error}", file=sys.stderr)


def _print_status(history: RunHistoryStore) -> int:
    status = get_status_info(EnvCredentialStore(), history=history)
    print(f"Available providers: {status.available_providers}/{status.total_providers}")
    for provider in status.providers:
        marker = "active" if provider.active else "inactive"
        print(f"  {provider.name:<10} {marker:<9} {provider.specialty} ({provider.model_id})")
    print(f"Tasks completed: {status.tasks_completed}")
    return 0


def _history(args: argparse.Namespace, history: RunHistoryStore) -> int:
    command = args.history_command
    if command == "list":
        entries = history.list_entries()
        if not entries:
            print("No history entries.")
        for entry in entries:
            marker = "ok" if entry.result.success else "failed"
            print(f"{entry.entry_id}  {marker:<6}  {entry.task[:60]}")
        return 0
    if command == "clear":
        print(f"Removed {history.clear()} entries.")
        return 0

    entry = history.get(args.entry_id)
    if entry is None:
        print(f"Error: unknown history entry {args.entry_id}", file=sys.stderr)
        return 1
    if command == "show":
        print(render_entry_markdown(entry))
        return 0
    if command == "remove":
        history.remove(entry.entry_id)
        print(f"Removed {entry.entry_id}.")
        return 0
    return _run_task(entry.task, history)


def _export(history: RunHistoryStore, entry_id: str | None, out: Path) -> int:
    if entry_id is None:
        try:
            path = export_history(history, out)
        except RuntimeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Exported history to {path}")
        return 0

    entry = history.get(entry_id)
    if entry is None:
        print(f"Error: unknown history entry {entry_id}", file=sys.stderr)
        return 1
    print(f"Exported {entry_id} to {export_entry(entry, out)}")
    return 0


def bootstrap_config(config_dir: Path) -> int:
    """Copy bundled TOML tables into ``config_dir``, keeping existing files."""
    config_dir.mkdir(parents=True, exist_ok=True)
    print(f"Bootstrapping config directory: {config_dir}")
    for name, filename in CONFIG_FILES.items():
        target_path = config_dir / filename
        if target_path.exists():
            print(f"  SKIP {filename} (already exists)")
            continue
        shutil.copy(get_bundled_path(name), target_path)
        print(f"  COPY {filename}")
    print(f"Set ORCHESTRATOR_CONFIG_DIR={config_dir} to use a different location.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
