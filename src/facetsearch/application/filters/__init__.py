"""Application filters – filter conditions and the ``filter_by`` grammar."""
from facetsearch.application.filters.condition import (
    FilterCondition,
    FilterOperator,
    LogicalOperator,
    canonicalize,
    is_valid_field_name,
)
from facetsearch.application.filters.facets import (
    combine_with_facet_selections,
    facet_condition,
    facet_literal,
)
from facetsearch.application.filters.grammar import parse, serialize, serialize_all

__all__ = [
    "FilterCondition",
    "FilterOperator",
    "LogicalOperator",
    "canonicalize",
    "combine_with_facet_selections",
    "facet_condition",
    "facet_literal",
    "is_valid_field_name",
    "parse",
    "serialize",
    "serialize_all",
]
