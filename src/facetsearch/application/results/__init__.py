"""Application results – raw shapes, normalization and presentation."""
from facetsearch.application.results.highlight import (
    DEFAULT_TAGS,
    HighlightSpan,
    matched_terms,
    plain_text,
    to_spans,
)
from facetsearch.application.results.models import (
    Facet,
    FacetStats,
    FacetValue,
    HitHighlight,
    PerCollectionResult,
    SearchResultHit,
    TextMatchInfo,
)
from facetsearch.application.results.normalizer import Selections, apply_selections, normalize
from facetsearch.application.results.presentation import (
    ResultsSummary,
    document_title,
    format_facet_stats,
    format_text_match,
    summarize_results,
    visible_facet_values,
)
from facetsearch.application.results.raw import (
    Document,
    RawEntry,
    RawFacetCount,
    RawFacetCountValue,
    RawHighlight,
    RawHit,
    RawSearchFault,
    RawSearchResult,
    parse_multi_search_response,
    parse_raw_result,
)

__all__ = [
    "DEFAULT_TAGS",
    "Document",
    "Facet",
    "FacetStats",
    "FacetValue",
    "HighlightSpan",
    "HitHighlight",
    "PerCollectionResult",
    "RawEntry",
    "RawFacetCount",
    "RawFacetCountValue",
    "RawHighlight",
    "RawHit",
    "RawSearchFault",
    "RawSearchResult",
    "ResultsSummary",
    "SearchResultHit",
    "Selections",
    "TextMatchInfo",
    "apply_selections",
    "document_title",
    "format_facet_stats",
    "format_text_match",
    "matched_terms",
    "normalize",
    "parse_multi_search_response",
    "parse_raw_result",
    "plain_text",
    "summarize_results",
    "to_spans",
    "visible_facet_values",
]
