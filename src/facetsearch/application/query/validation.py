"""Application query – specification validation."""
from __future__ import annotations

from typing import Iterable, Mapping

from facetsearch.application.filters import facet_condition, is_valid_field_name, serialize
from facetsearch.application.query.specification import (
    MAX_NUM_TYPOS,
    MAX_PER_PAGE,
    MAX_SORT_OPTIONS,
    QuerySpecification,
)
from facetsearch.kernel.errors import FieldError, FilterError, ValidationError


def validate(
    spec: QuerySpecification,
    facet_selections: Mapping[str, Iterable[str]] | None = None,
) -> list[FieldError]:
    """Return every field-level problem with *spec*; an empty list means valid.

    *facet_selections* are the values selected for the spec's collection;
    a value the filter grammar cannot express is reported under
    ``facet_selections[<field>]``.
    """
    errors: list[FieldError] = []

    if not spec.collection.strip():
        errors.append(FieldError("collection", "Collection is required", "required"))

    query_by = [name for name in spec.query_by if name.strip()]
    if not spec.is_wildcard and not query_by:
        errors.append(FieldError("query_by", "Search fields are required for a non-wildcard query", "required"))
    errors.extend(_field_names("query_by", query_by))
    errors.extend(_field_names("facet_by", [name for name in spec.facet_by if name.strip()]))

    if not 1 <= spec.per_page <= MAX_PER_PAGE:
        errors.append(FieldError("per_page", f"Results per page must be between 1 and {MAX_PER_PAGE}", "out_of_range"))
    if spec.max_facet_values <= 0:
        errors.append(FieldError("max_facet_values", "Max facet values must be greater than 0", "out_of_range"))
    if spec.page < 1:
        errors.append(FieldError("page", "Page must be 1 or greater", "out_of_range"))
    if not 0 <= spec.num_typos <= MAX_NUM_TYPOS:
        errors.append(FieldError("num_typos", f"Typo tolerance must be between 0 and {MAX_NUM_TYPOS}", "out_of_range"))

    if len(spec.sort_options) > MAX_SORT_OPTIONS:
        errors.append(FieldError("sort_options", f"At most {MAX_SORT_OPTIONS} sort fields are allowed", "too_many"))
    for index, option in enumerate(spec.sort_options):
        if not is_valid_field_name(option.field):
            errors.append(FieldError(f"sort_options[{index}]", f"Invalid field name {option.field!r}", "invalid_field_name"))
        if option.order not in ("asc", "desc"):
            errors.append(FieldError(f"sort_options[{index}]", "Sort order must be 'asc' or 'desc'", "invalid"))

    for index, condition in enumerate(spec.filter_conditions):
        try:
            serialize(condition)
        except FilterError as exc:
            errors.append(FieldError(f"filter_conditions[{index}]", exc.message, exc.code))

    errors.extend(validate_facet_selections(facet_selections or {}))
    return errors


def validate_facet_selections(facet_selections: Mapping[str, Iterable[str]]) -> list[FieldError]:
    """Problems with the facet values that will be folded into ``filter_by``."""
    errors: list[FieldError] = []
    for field in sorted(facet_selections):
        try:
            condition = facet_condition(field, facet_selections[field])
            if condition is not None:
                serialize(condition)
        except FilterError as exc:
            errors.append(FieldError(f"facet_selections[{field}]", exc.message, exc.code))
    return errors


def ensure_valid(
    spec: QuerySpecification,
    facet_selections: Mapping[str, Iterable[str]] | None = None,
) -> QuerySpecification:
    """Raise :class:`ValidationError` listing every problem, else return *spec*."""
    errors = validate(spec, facet_selections)
    if errors:
        raise ValidationError(
            f"Search on {spec.collection or '<no collection>'!s} is invalid",
            errors=errors,
            spec_id=spec.id,
        )
    return spec


def _field_names(attribute: str, names: list[str]) -> list[FieldError]:
    return [
        FieldError(f"{attribute}[{index}]", f"Invalid field name {name.strip()!r}", "invalid_field_name")
        for index, name in enumerate(names)
        if not is_valid_field_name(name.strip())
    ]


__all__ = ["ensure_valid", "validate", "validate_facet_selections"]
