"""Shared utilities for the orchestrator."""

from __future__ import annotations

from datetime import UTC, datetime


def utc_timestamp() -> str:
    """Return current UTC timestamp in ISO format.

    Returns:
        ISO-formatted timestamp string.
    """
    return datetime.now(UTC).isoformat()


def title_case(identifier: str) -> str:
    """Turn ``code_review`` into ``Code Review``."""
    return " ".join(word.capitalize() for word in identifier.replace("_", " ").split(" ") if word)


def truncate(text: str, limit: int) -> str:
    """Return at most ``limit`` leading characters of ``text``."""
    return text[:limit]
