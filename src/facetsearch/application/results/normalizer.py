"""Application results – raw engine entries to :class:`PerCollectionResult`."""
from __future__ import annotations

import dataclasses
from typing import Iterable, Mapping

from facetsearch.application.results.highlight import DEFAULT_TAGS, to_spans
from facetsearch.application.results.models import (
    Facet,
    FacetStats,
    FacetValue,
    HitHighlight,
    PerCollectionResult,
    SearchResultHit,
    TextMatchInfo,
)
from facetsearch.application.results.raw import RawEntry, RawFacetCount, RawHit, RawSearchFault

Selections = Mapping[str, Iterable[str]]


def normalize(
    raw: RawEntry,
    previous_selections: Selections | None = None,
    *,
    spec_id: str,
    collection: str,
    tags: Iterable[tuple[str, str]] = DEFAULT_TAGS,
) -> PerCollectionResult:
    """Normalize one entry of a multi-search response.

    Facet values already in *previous_selections* come back marked
    ``selected``. Within a facet the first occurrence of a value wins.
    """
    if isinstance(raw, RawSearchFault):
        return PerCollectionResult(spec_id=spec_id, collection=collection, error=raw.to_fault())

    tags = tuple(tags)
    selected = _selected_sets(previous_selections)
    return PerCollectionResult(
        spec_id=spec_id,
        collection=collection,
        found=raw.found,
        out_of=raw.out_of,
        page=raw.page,
        hits=tuple(_hit(hit, tags) for hit in raw.hits),
        facets=tuple(_facet(facet, selected.get(facet.field_name, frozenset())) for facet in raw.facet_counts),
        search_time_ms=raw.search_time_ms,
    )


def apply_selections(result: PerCollectionResult, selections: Selections | None) -> PerCollectionResult:
    """Re-mark ``selected`` on every facet value without touching counts."""
    selected = _selected_sets(selections)
    facets = tuple(
        dataclasses.replace(
            facet,
            values=tuple(
                dataclasses.replace(value, selected=value.value in selected.get(facet.field_name, frozenset()))
                for value in facet.values
            ),
        )
        for facet in result.facets
    )
    return dataclasses.replace(result, facets=facets)


def _selected_sets(selections: Selections | None) -> dict[str, frozenset[str]]:
    return {field: frozenset(values) for field, values in (selections or {}).items()}


def _hit(raw: RawHit, tags: tuple[tuple[str, str], ...]) -> SearchResultHit:
    highlights = tuple(
        HitHighlight(
            field=h.field,
            snippet=to_spans(h.snippet, tags),
            snippets=tuple(to_spans(s, tags) for s in h.snippets),
            matched_tokens=h.matched_tokens,
            value=to_spans(h.value, tags),
        )
        for h in raw.highlights
    )
    text_match = raw.text_match
    return SearchResultHit(
        document=raw.document,
        highlights=highlights,
        text_match_score=(
            int(text_match) if isinstance(text_match, (int, float)) and not isinstance(text_match, bool) else None
        ),
        text_match_info=TextMatchInfo.from_dict(raw.text_match_info),
    )


def _facet(raw: RawFacetCount, selected: frozenset[str]) -> Facet:
    seen: set[str] = set()
    values: list[FacetValue] = []
    for count in raw.counts:
        if count.value in seen:
            continue
        seen.add(count.value)
        values.append(
            FacetValue(
                value=count.value,
                count=count.count,
                highlighted=count.highlighted or count.value,
                selected=count.value in selected,
            )
        )
    return Facet(field_name=raw.field_name, values=tuple(values), stats=FacetStats.from_dict(raw.stats))


__all__ = ["Selections", "apply_selections", "normalize"]
