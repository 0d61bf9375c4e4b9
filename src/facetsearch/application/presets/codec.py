"""Application presets – camelCase JSON shape used by the local preset store."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from facetsearch.application.filters import FilterCondition, FilterOperator, LogicalOperator
from facetsearch.application.presets.models import PRESET_FORMAT_VERSION, SearchPreset
from facetsearch.application.query import QuerySpecification, SortOption
from facetsearch.application.state.selection import FacetSelectionState
from facetsearch.kernel.errors import SerializationError


def preset_to_dict(preset: SearchPreset) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": preset.id,
        "name": preset.name,
        "version": preset.version,
        "queries": [specification_to_dict(spec) for spec in preset.queries],
        "exportedAt": preset.exported_at.isoformat(),
    }
    if preset.description is not None:
        payload["description"] = preset.description
    if preset.facet_filters:
        payload["facetFilters"] = {c: {f: list(v) for f, v in fields.items()} for c, fields in preset.facet_filters.items()}
    if preset.sort_options:
        payload["sortOptions"] = [_sort_to_dict(s) for s in preset.sort_options]
    return payload


def preset_from_dict(data: Any) -> SearchPreset:
    """Decode a stored preset.

    Raises:
        SerializationError: *data* is not a valid preset object.
    """
    if not isinstance(data, Mapping):
        raise SerializationError("preset must be an object", payload_type="preset")
    try:
        name = data["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValueError("preset name must be a non-empty string")
        queries = data["queries"]
        if not isinstance(queries, list):
            raise ValueError("'queries' must be a list")
        facet_filters = FacetSelectionState.from_dict(data.get("facetFilters") or {}).to_dict()
        kwargs: dict[str, Any] = {}
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return SearchPreset(
            name=name,
            queries=tuple(specification_from_dict(q) for q in queries),
            exported_at=datetime.fromisoformat(data["exportedAt"]),
            facet_filters=facet_filters,
            sort_options=tuple(_sort_from_dict(s) for s in data.get("sortOptions") or ()),
            description=data.get("description"),
            version=str(data.get("version") or PRESET_FORMAT_VERSION),
            **kwargs,
        )
    except SerializationError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SerializationError(f"invalid preset: {exc}", payload_type="preset", cause=exc) from exc


def specification_to_dict(spec: QuerySpecification) -> dict[str, Any]:
    return {
        "id": spec.id,
        "collection": spec.collection,
        "query": spec.query,
        "queryBy": list(spec.query_by),
        "filterBy": [_condition_to_dict(c) for c in spec.filter_conditions],
        "sortBy": [_sort_to_dict(s) for s in spec.sort_options],
        "facetBy": list(spec.facet_by),
        "maxFacetValues": spec.max_facet_values,
        "perPage": spec.per_page,
        "page": spec.page,
        "numTypos": spec.num_typos,
        "prefix": spec.prefix,
        "filterByText": spec.filter_by,
        "enabled": spec.enabled,
    }


def specification_from_dict(data: Mapping[str, Any]) -> QuerySpecification:
    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    return QuerySpecification(
        collection=str(data["collection"]),
        query=str(data.get("query", "*")),
        query_by=[str(f) for f in data.get("queryBy") or ()],
        filter_conditions=[_condition_from_dict(c) for c in data.get("filterBy") or ()],
        sort_options=[_sort_from_dict(s) for s in data.get("sortBy") or ()],
        facet_by=[str(f) for f in data.get("facetBy") or ()],
        max_facet_values=int(data.get("maxFacetValues", 10)),
        per_page=int(data.get("perPage", 10)),
        page=int(data.get("page", 1)),
        num_typos=int(data.get("numTypos", 2)),
        prefix=bool(data.get("prefix", True)),
        filter_by=str(data.get("filterByText") or ""),
        enabled=bool(data.get("enabled", True)),
        **kwargs,
    )


def _condition_to_dict(condition: FilterCondition) -> dict[str, Any]:
    value = condition.value
    payload: dict[str, Any] = {
        "id": condition.id,
        "field": condition.field,
        "operator": condition.operator.value,
        "value": list(value) if isinstance(value, tuple) else value,
    }
    if condition.logical_operator is not None:
        payload["logicalOperator"] = condition.logical_operator.value
    return payload


def _condition_from_dict(data: Mapping[str, Any]) -> FilterCondition:
    value = data["value"]
    if isinstance(value, list):
        value = tuple(value)
    logical = data.get("logicalOperator")
    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    return FilterCondition(
        field=str(data["field"]),
        operator=FilterOperator(data["operator"]),
        value=value,
        logical_operator=LogicalOperator(logical) if logical else None,
        **kwargs,
    )


def _sort_to_dict(option: SortOption) -> dict[str, str]:
    return {"field": option.field, "order": option.order}


def _sort_from_dict(data: Mapping[str, Any]) -> SortOption:
    order = data.get("order", "asc")
    if order not in ("asc", "desc"):
        raise ValueError(f"sort order must be 'asc' or 'desc', got {order!r}")
    return SortOption(field=str(data["field"]), order=order)


__all__ = ["preset_from_dict", "preset_to_dict", "specification_from_dict", "specification_to_dict"]
