from ai_orchestrator.config.categories import get_category_profiles, load_category_profiles
from ai_orchestrator.config.config_paths import (
    get_bundled_path,
    get_config_dir,
    get_external_path,
    resolve_config_path,
    set_config_dir,
)

__all__ = [
    "get_bundled_path",
    "get_category_profiles",
    "get_config_dir",
    "get_external_path",
    "load_category_profiles",
    "resolve_config_path",
    "set_config_dir",
]
