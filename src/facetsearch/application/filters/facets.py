"""Application filters – folding facet selections into filter conditions."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from facetsearch.application.filters.condition import FilterCondition, FilterOperator, LogicalOperator
from facetsearch.application.filters.grammar import format_literal, literal_from_text


def facet_literal(value: str) -> Any:
    """Engine facet values arrive as strings; recover numbers and booleans.

    Only exact textual round trips convert, so ``"007"`` stays a string.
    """
    literal = literal_from_text(value)
    if literal is value or not isinstance(literal, (bool, int, float)):
        return value
    return literal if format_literal(literal) == value else value


def facet_condition(field: str, values: Iterable[str]) -> FilterCondition | None:
    """One AND-ed condition for one facet field, or ``None`` when nothing is selected.

    A single value is an exact match; several values are OR-ed through ``in``.
    Values are sorted so selection order never changes the filter.
    """
    ordered = sorted(set(values))
    if not ordered:
        return None
    literals = tuple(facet_literal(v) for v in ordered)
    if len(literals) == 1:
        return FilterCondition(field, FilterOperator.EXACT, literals[0], LogicalOperator.AND)
    return FilterCondition(field, FilterOperator.IN, literals, LogicalOperator.AND)


def combine_with_facet_selections(
    base_conditions: Iterable[FilterCondition],
    selected_facet_values: Mapping[str, Iterable[str]],
) -> list[FilterCondition]:
    """Append one condition per selected facet field to *base_conditions*.

    Distinct fields are AND-ed (in field-name order); values of one field are
    OR-ed. Fields with an empty selection contribute nothing.
    """
    combined = list(base_conditions)
    for field in sorted(selected_facet_values):
        condition = facet_condition(field, selected_facet_values[field])
        if condition is not None:
            combined.append(condition)
    return combined


__all__ = ["combine_with_facet_selections", "facet_condition", "facet_literal"]
