"""Pydantic models for the static routing configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class TaskCategory(str, Enum):
    """Closed set of task classifications, in declaration order."""

    ARCHITECTURE = "architecture"
    ROADMAP = "roadmap"
    CODING = "coding"
    DEBUGGING = "debugging"
    REASONING = "reasoning"
    LOGIC = "logic"
    CODE_REVIEW = "code_review"
    DOCUMENTATION = "documentation"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: str) -> TaskCategory | None:
        """Return the category for ``value`` or None when unknown."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Provider(str, Enum):
    """Capability backends, in client construction order."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    MOONSHOT = "moonshot"

    @classmethod
    def parse(cls, value: str) -> Provider | None:
        """Return the provider for ``value`` or None when unknown.

        Unknown identifiers are treated as absent, never mapped to a default.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Multi-category plans run in this order; unlisted categories go last.
CATEGORY_PRIORITY: tuple[TaskCategory, ...] = (
    TaskCategory.ARCHITECTURE,
    TaskCategory.ROADMAP,
    TaskCategory.REASONING,
    TaskCategory.LOGIC,
    TaskCategory.CODING,
    TaskCategory.DEBUGGING,
    TaskCategory.CODE_REVIEW,
    TaskCategory.DOCUMENTATION,
)


class CategoryProfile(BaseModel, frozen=True):
    """Static routing profile for one task category."""

    category: TaskCategory
    provider: Provider
    system_prompt: str
    prompt_prefix: str = ""
    patterns: tuple[str, ...] = ()


class ProviderConfig(BaseModel, frozen=True):
    """Configuration for a capability provider."""

    type: str  # openai, anthropic, gemini
    api_key_env: str
    model_env: str
    default_model: str
    base_url: str | None = None
    temperature: float = 0.7
    max_tokens: int = 4096
    specialty: str = "General"
