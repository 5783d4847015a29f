import pytest
from ai_orchestrator.config.categories import load_category_profiles
from ai_orchestrator.config.config_paths import get_bundled_path, resolve_config_path
from ai_orchestrator.errors import ConfigurationError
from ai_orchestrator.models.config import Provider, TaskCategory


def _write(tmp_path, body: str):
    path = tmp_path / "categories.toml"
    path.write_text(body, encoding="utf-8")
    return path


def _table(**overrides: str) -> str:
    sections = []
    for category in TaskCategory:
        patterns = "[]" if category is TaskCategory.GENERAL else "['x']"
        sections.append(
            overrides.get(
                category.value,
                f'[categories.{category.value}]\nprovider = "openai"\n'
                f'system_prompt = "Help."\npatterns = {patterns}\n',
            )
        )
    return "\n".join(sections)


def test_bundled_table_covers_every_category() -> None:
    profiles = load_category_profiles()

    assert list(profiles) == list(TaskCategory)
    assert profiles[TaskCategory.CODE_REVIEW].provider == Provider.MOONSHOT
    assert profiles[TaskCategory.GENERAL].patterns == ()
    assert profiles[TaskCategory.GENERAL].prompt_prefix == ""
    assert profiles[TaskCategory.ROADMAP].prompt_prefix == "Create a roadmap and project plan for:\n\n"
    assert "trade.?off" in profiles[TaskCategory.REASONING].patterns


def test_table_is_read_only() -> None:
    profiles = load_category_profiles()
    with pytest.raises(TypeError):
        profiles[TaskCategory.GENERAL] = profiles[TaskCategory.CODING]  # type: ignore[index]


def test_resolves_bundled_when_no_external_file() -> None:
    assert resolve_config_path("categories") == get_bundled_path("categories")


def test_unknown_category_is_rejected(tmp_path) -> None:
    body = _table() + '\n[categories.poetry]\nprovider = "openai"\nsystem_prompt = "Rhyme."\n'
    with pytest.raises(ConfigurationError, match="Unknown task category 'poetry'"):
        load_category_profiles(_write(tmp_path, body))


def test_missing_category_is_rejected(tmp_path) -> None:
    body = _table(logic="")
    with pytest.raises(ConfigurationError, match="Missing task categories"):
        load_category_profiles(_write(tmp_path, body))


def test_unknown_provider_is_rejected(tmp_path) -> None:
    body = _table(
        coding='[categories.coding]\nprovider = "mistral"\nsystem_prompt = "Code."\npatterns = []\n'
    )
    with pytest.raises(ConfigurationError, match="Unknown provider 'mistral'"):
        load_category_profiles(_write(tmp_path, body))


def test_invalid_pattern_is_rejected(tmp_path) -> None:
    body = _table(
        coding='[categories.coding]\nprovider = "anthropic"\nsystem_prompt = "Code."\n'
        "patterns = ['(unclosed']\n"
    )
    with pytest.raises(ConfigurationError, match="Invalid pattern"):
        load_category_profiles(_write(tmp_path, body))


def test_general_must_not_have_patterns(tmp_path) -> None:
    body = _table(
        general='[categories.general]\nprovider = "openai"\nsystem_prompt = "Help."\n'
        "patterns = ['hello']\n"
    )
    with pytest.raises(ConfigurationError, match="catch-all"):
        load_category_profiles(_write(tmp_path, body))


def test_missing_system_prompt_is_rejected(tmp_path) -> None:
    body = _table(debugging='[categories.debugging]\nprovider = "anthropic"\npatterns = []\n')
    with pytest.raises(ConfigurationError, match="Missing system_prompt"):
        load_category_profiles(_write(tmp_path, body))
