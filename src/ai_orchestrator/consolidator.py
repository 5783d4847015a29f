"""Merge per-step results into one consolidated artifact."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ai_orchestrator.utils import title_case

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai_orchestrator.models.plan import SubResult

EMPTY_PLACEHOLDER = "No results to consolidate."
SECTION_SEPARATOR = "\n\n---\n\n"


def format_section(result: SubResult) -> str:
    """Render one result as a titled Markdown section."""
    title = title_case(result.category.value)
    return f"## {title} ({result.provider_display_name})\n\n{result.content}"


def merge_results(results: Sequence[SubResult]) -> str:
    """Merge ordered results.

    A single result is returned verbatim, failed or not. With several
    results, failed or empty ones are left out of the text; they stay
    visible in the per-step results and the run's error list.
    """
    if not results:
        return EMPTY_PLACEHOLDER
    if len(results) == 1:
        return results[0].content

    sections = [format_section(result) for result in results if result.success and result.content]
    return SECTION_SEPARATOR.join(sections)
