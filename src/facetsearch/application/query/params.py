"""Application query – engine search parameters for one specification."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from facetsearch.application.filters import combine_with_facet_selections, serialize_all
from facetsearch.application.query.specification import QuerySpecification, unique

DEFAULT_HIGHLIGHT_START_TAG = "<mark>"
DEFAULT_HIGHLIGHT_END_TAG = "</mark>"


def build_filter_by(
    spec: QuerySpecification,
    facet_selections: Mapping[str, Iterable[str]] | None = None,
) -> str:
    """Structured conditions plus facet selections, AND-ed with the manual filter."""
    conditions = combine_with_facet_selections(spec.filter_conditions, facet_selections or {})
    structured = serialize_all(conditions)
    manual = spec.filter_by.strip()
    if manual and structured:
        return f"({manual}) && {structured}"
    return manual or structured


def build_search_params(
    spec: QuerySpecification,
    facet_selections: Mapping[str, Iterable[str]] | None = None,
    *,
    highlight_start_tag: str = DEFAULT_HIGHLIGHT_START_TAG,
    highlight_end_tag: str = DEFAULT_HIGHLIGHT_END_TAG,
) -> dict[str, Any]:
    """One entry of the ``searches`` array; empty optional parameters are omitted."""
    params: dict[str, Any] = {
        "collection": spec.collection.strip(),
        "q": spec.effective_query,
    }
    query_by = unique(spec.query_by)
    if query_by:
        params["query_by"] = ",".join(query_by)
    filter_by = build_filter_by(spec, facet_selections)
    if filter_by:
        params["filter_by"] = filter_by
    if spec.sort_options:
        params["sort_by"] = ",".join(option.to_param() for option in spec.sort_options)
    facet_by = unique(spec.facet_by)
    if facet_by:
        params["facet_by"] = ",".join(facet_by)
        params["max_facet_values"] = spec.max_facet_values
    params["page"] = spec.page
    params["per_page"] = spec.per_page
    params["num_typos"] = spec.num_typos
    params["prefix"] = spec.prefix
    params["highlight_start_tag"] = highlight_start_tag
    params["highlight_end_tag"] = highlight_end_tag
    return params


__all__ = [
    "DEFAULT_HIGHLIGHT_END_TAG",
    "DEFAULT_HIGHLIGHT_START_TAG",
    "build_filter_by",
    "build_search_params",
]
