"""Application schema – collection field descriptions from the engine."""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

from facetsearch.kernel.errors import SerializationError

NUMERIC_TYPES = frozenset({"int32", "int64", "float"})
STRING_TYPES = frozenset({"string", "string[]", "string*"})


@dataclasses.dataclass(frozen=True)
class CollectionField:
    name: str
    type: str
    facet: bool = False
    optional: bool = False
    index: bool = True
    sort: bool | None = None
    infix: bool = False

    @property
    def base_type(self) -> str:
        """``int32[]`` → ``int32``."""
        return self.type.removesuffix("[]")

    @property
    def is_array(self) -> bool:
        return self.type.endswith("[]")

    @property
    def is_numeric(self) -> bool:
        return self.base_type in NUMERIC_TYPES

    @property
    def is_searchable(self) -> bool:
        return self.index and self.type in STRING_TYPES

    @property
    def is_sortable(self) -> bool:
        """Numbers and booleans sort by default; strings only when ``sort`` is set."""
        if self.is_array:
            return False
        if self.sort is not None:
            return self.sort
        return self.is_numeric or self.type == "bool"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CollectionField":
        sort = raw.get("sort")
        return cls(
            name=str(raw["name"]),
            type=str(raw["type"]),
            facet=bool(raw.get("facet", False)),
            optional=bool(raw.get("optional", False)),
            index=bool(raw.get("index", True)),
            sort=None if sort is None else bool(sort),
            infix=bool(raw.get("infix", False)),
        )


@dataclasses.dataclass(frozen=True)
class CollectionSchema:
    name: str
    fields: tuple[CollectionField, ...] = ()
    default_sorting_field: str | None = None
    num_documents: int | None = None

    def field(self, name: str) -> CollectionField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def facet_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.facet]

    @classmethod
    def from_dict(cls, raw: Any) -> "CollectionSchema":
        """Parse ``GET /collections/{name}``.

        Raises:
            SerializationError: missing ``name`` or a malformed field list.
        """
        if not isinstance(raw, Mapping):
            raise SerializationError("collection schema must be an object", payload_type="collection")
        try:
            return cls(
                name=str(raw["name"]),
                fields=tuple(CollectionField.from_dict(f) for f in raw.get("fields") or ()),
                default_sorting_field=raw.get("default_sorting_field") or None,
                num_documents=raw.get("num_documents"),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise SerializationError(
                f"malformed collection schema: {exc}", payload_type="collection", cause=exc
            ) from exc


__all__ = ["CollectionField", "CollectionSchema", "NUMERIC_TYPES", "STRING_TYPES"]
