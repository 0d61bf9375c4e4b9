"""Application results – display helpers for normalized results."""
from __future__ import annotations

import dataclasses
from typing import Sequence

from facetsearch.application.results.models import Facet, FacetStats, FacetValue, PerCollectionResult, TextMatchInfo
from facetsearch.application.results.raw import Document

DEFAULT_VISIBLE_FACET_VALUES = 10
_TITLE_FIELDS = ("title", "name", "id")


@dataclasses.dataclass(frozen=True)
class ResultsSummary:
    collections: int
    total_found: int
    total_search_time_ms: int
    failed: int


def format_facet_stats(stats: FacetStats | None) -> dict[str, str]:
    """Human-readable stats; ``avg`` is shown with two decimals."""
    if stats is None:
        return {}
    out: dict[str, str] = {}
    if stats.min is not None:
        out["min"] = _number(stats.min)
    if stats.max is not None:
        out["max"] = _number(stats.max)
    if stats.avg is not None:
        out["avg"] = f"{stats.avg:.2f}"
    if stats.sum is not None:
        out["sum"] = _number(stats.sum)
    if stats.total_values is not None:
        out["total_values"] = str(stats.total_values)
    return out


def format_text_match(text_match: int | None, info: TextMatchInfo | None = None) -> str:
    if text_match is None and info is None:
        return ""
    parts = []
    if text_match is not None:
        parts.append(f"score {text_match}")
    if info is not None and info.tokens_matched is not None:
        parts.append(f"{info.tokens_matched} token(s)")
    if info is not None and info.fields_matched is not None:
        parts.append(f"{info.fields_matched} field(s)")
    return ", ".join(parts)


def document_title(document: Document) -> str:
    for key in _TITLE_FIELDS:
        value = document.get(key)
        if value not in (None, ""):
            return str(value)
    return "Untitled"


def visible_facet_values(
    facet: Facet,
    query: str = "",
    limit: int = DEFAULT_VISIBLE_FACET_VALUES,
    show_all: bool = False,
) -> tuple[list[FacetValue], int]:
    """Values matching *query* (case-insensitive substring), capped at *limit*.

    Returns the visible values and how many more are hidden.
    """
    needle = query.strip().lower()
    matching = [v for v in facet.values if needle in v.value.lower()] if needle else list(facet.values)
    if show_all or len(matching) <= limit:
        return matching, 0
    return matching[:limit], len(matching) - limit


def summarize_results(results: Sequence[PerCollectionResult]) -> ResultsSummary:
    return ResultsSummary(
        collections=len(results),
        total_found=sum(r.found for r in results),
        total_search_time_ms=sum(r.search_time_ms for r in results),
        failed=sum(1 for r in results if r.error is not None),
    )


def _number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "DEFAULT_VISIBLE_FACET_VALUES",
    "ResultsSummary",
    "document_title",
    "format_facet_stats",
    "format_text_match",
    "summarize_results",
    "visible_facet_values",
]
