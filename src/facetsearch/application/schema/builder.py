"""Application schema – query-builder choices derived from a collection schema."""
from __future__ import annotations

import dataclasses
from typing import Protocol, runtime_checkable

from facetsearch.application.schema.models import CollectionSchema


@dataclasses.dataclass(frozen=True)
class QueryBuilderField:
    name: str
    label: str
    type: str
    facetable: bool
    sortable: bool
    searchable: bool = False


@runtime_checkable
class SchemaSource(Protocol):
    async def get_schema(self, collection: str) -> CollectionSchema: ...


def field_label(name: str) -> str:
    """``file_name`` → ``File Name``; nested ``author.name`` → ``Author Name``."""
    words = name.replace(".", " ").replace("_", " ").split()
    return " ".join(w[:1].upper() + w[1:] for w in words) or name


def query_builder_fields(schema: CollectionSchema) -> list[QueryBuilderField]:
    """Every concrete field, in schema order. Regex and ``auto`` fields are skipped."""
    return [
        QueryBuilderField(
            name=f.name,
            label=field_label(f.name),
            type=f.type,
            facetable=f.facet,
            sortable=f.is_sortable,
            searchable=f.is_searchable,
        )
        for f in schema.fields
        if f.type != "auto" and f.name != ".*"
    ]


__all__ = ["QueryBuilderField", "SchemaSource", "field_label", "query_builder_fields"]
