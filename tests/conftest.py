from __future__ import annotations

from collections.abc import Iterator

import pytest
from ai_orchestrator.config.config_paths import set_config_dir

CREDENTIAL_ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "MOONSHOT_API_KEY",
    "OPENAI_MODEL",
    "ANTHROPIC_MODEL",
    "GEMINI_MODEL",
    "MOONSHOT_MODEL",
)


@pytest.fixture(autouse=True)
def _set_required_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    # Empty external dir: every table resolves to the bundled default
    monkeypatch.setenv("ORCHESTRATOR_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("ORCHESTRATOR_HISTORY_DIR", str(tmp_path / "history"))
    monkeypatch.delenv("ORCHESTRATOR_HISTORY_MAX_ITEMS", raising=False)
    monkeypatch.delenv("ORCHESTRATOR_LOG_LEVEL", raising=False)
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    set_config_dir(None)
