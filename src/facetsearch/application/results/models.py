"""Application results – normalized per-collection result model."""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

from facetsearch.application.results.highlight import DEFAULT_TAGS, Spans, to_spans
from facetsearch.application.results.raw import Document
from facetsearch.kernel.errors import PerCollectionFault


@dataclasses.dataclass(frozen=True)
class FacetValue:
    value: str
    count: int
    highlighted: str = ""
    selected: bool = False

    @property
    def highlighted_spans(self) -> Spans:
        return to_spans(self.highlighted or self.value, DEFAULT_TAGS)


@dataclasses.dataclass(frozen=True)
class FacetStats:
    min: float | None = None
    max: float | None = None
    avg: float | None = None
    sum: float | None = None
    total_values: int | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "FacetStats | None":
        if not raw:
            return None

        def number(key: str) -> float | None:
            value = raw.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return None
            return value

        total = raw.get("total_values")
        return cls(
            min=number("min"),
            max=number("max"),
            avg=number("avg"),
            sum=number("sum"),
            total_values=total if isinstance(total, int) and not isinstance(total, bool) else None,
        )


@dataclasses.dataclass(frozen=True)
class Facet:
    field_name: str
    values: tuple[FacetValue, ...] = ()
    stats: FacetStats | None = None

    @property
    def selected_count(self) -> int:
        return sum(1 for value in self.values if value.selected)


@dataclasses.dataclass(frozen=True)
class HitHighlight:
    """One highlighted field; array fields carry one span tuple per element in ``snippets``."""

    field: str
    snippet: Spans = ()
    snippets: tuple[Spans, ...] = ()
    matched_tokens: tuple[str, ...] = ()
    value: Spans = ()


@dataclasses.dataclass(frozen=True)
class TextMatchInfo:
    """Relevance breakdown; the engine reports some scores as strings."""

    best_field_score: int | None = None
    best_field_weight: int | None = None
    fields_matched: int | None = None
    score: int | None = None
    tokens_matched: int | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "TextMatchInfo | None":
        if not raw:
            return None
        return cls(
            best_field_score=_as_int(raw.get("best_field_score")),
            best_field_weight=_as_int(raw.get("best_field_weight")),
            fields_matched=_as_int(raw.get("fields_matched")),
            score=_as_int(raw.get("score")),
            tokens_matched=_as_int(raw.get("tokens_matched")),
        )


@dataclasses.dataclass(frozen=True)
class SearchResultHit:
    document: Document
    highlights: tuple[HitHighlight, ...] = ()
    text_match_score: int | None = None
    text_match_info: TextMatchInfo | None = None

    def highlight_for(self, field: str) -> HitHighlight | None:
        for highlight in self.highlights:
            if highlight.field == field:
                return highlight
        return None


@dataclasses.dataclass(frozen=True)
class PerCollectionResult:
    """The normalized outcome of one specification in a batch.

    A per-collection fault keeps the positional slot: ``error`` is set and the
    counts, hits and facets are empty.
    """

    spec_id: str
    collection: str
    found: int = 0
    out_of: int = 0
    page: int = 1
    hits: tuple[SearchResultHit, ...] = ()
    facets: tuple[Facet, ...] = ()
    search_time_ms: int = 0
    error: PerCollectionFault | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def facet(self, field_name: str) -> Facet | None:
        for facet in self.facets:
            if facet.field_name == field_name:
                return facet
        return None


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return None


__all__ = [
    "Facet",
    "FacetStats",
    "FacetValue",
    "HitHighlight",
    "PerCollectionResult",
    "SearchResultHit",
    "TextMatchInfo",
]
