"""Application query – per-collection query specifications."""
from facetsearch.application.query.params import (
    DEFAULT_HIGHLIGHT_END_TAG,
    DEFAULT_HIGHLIGHT_START_TAG,
    build_filter_by,
    build_search_params,
)
from facetsearch.application.query.specification import (
    DEFAULT_MAX_FACET_VALUES,
    DEFAULT_PER_PAGE,
    MAX_NUM_TYPOS,
    MAX_PER_PAGE,
    MAX_SORT_OPTIONS,
    WILDCARD,
    QuerySpecification,
    SortOption,
)
from facetsearch.application.query.validation import ensure_valid, validate, validate_facet_selections

__all__ = [
    "DEFAULT_HIGHLIGHT_END_TAG",
    "DEFAULT_HIGHLIGHT_START_TAG",
    "DEFAULT_MAX_FACET_VALUES",
    "DEFAULT_PER_PAGE",
    "MAX_NUM_TYPOS",
    "MAX_PER_PAGE",
    "MAX_SORT_OPTIONS",
    "QuerySpecification",
    "SortOption",
    "WILDCARD",
    "build_filter_by",
    "build_search_params",
    "ensure_valid",
    "validate",
    "validate_facet_selections",
]
