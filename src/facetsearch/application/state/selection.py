"""Application state – facet selections keyed by ``(collection, field)``."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from facetsearch.application.results.models import Facet
from facetsearch.kernel.errors import SerializationError


class FacetSelectionState:
    """Which facet values the user has ticked, per collection and field.

    Mutations are synchronous and immediately visible. A selected value that
    no longer appears in the latest facet counts is kept until the user
    clears it; :meth:`stale_values` reports such values.
    """

    def __init__(self) -> None:
        self._selected: dict[tuple[str, str], set[str]] = {}

    def toggle(self, collection: str, field: str, value: str) -> bool:
        """Flip *value*; return whether it is selected afterwards."""
        key = (collection, field)
        values = self._selected.setdefault(key, set())
        if value in values:
            values.discard(value)
            if not values:
                del self._selected[key]
            return False
        values.add(value)
        return True

    def select(self, collection: str, field: str, values: Iterable[str]) -> None:
        """Replace the selection for one field; an empty iterable clears it."""
        chosen = set(values)
        if chosen:
            self._selected[(collection, field)] = chosen
        else:
            self._selected.pop((collection, field), None)

    def clear_field(self, collection: str, field: str) -> bool:
        return self._selected.pop((collection, field), None) is not None

    def clear_all(self, collection: str | None = None) -> int:
        """Clear one collection (or everything); return how many fields were cleared."""
        keys = [k for k in self._selected if collection is None or k[0] == collection]
        for key in keys:
            del self._selected[key]
        return len(keys)

    def is_selected(self, collection: str, field: str, value: str) -> bool:
        return value in self._selected.get((collection, field), ())

    def selected(self, collection: str, field: str) -> frozenset[str]:
        return frozenset(self._selected.get((collection, field), ()))

    def for_collection(self, collection: str) -> dict[str, frozenset[str]]:
        return {f: frozenset(v) for (c, f), v in self._selected.items() if c == collection}

    def by_collection(self) -> dict[str, dict[str, frozenset[str]]]:
        out: dict[str, dict[str, frozenset[str]]] = {}
        for (collection, field), values in self._selected.items():
            out.setdefault(collection, {})[field] = frozenset(values)
        return out

    def count(self, collection: str | None = None) -> int:
        return sum(len(v) for (c, _), v in self._selected.items() if collection is None or c == collection)

    def stale_values(self, collection: str, facets: Iterable[Facet]) -> dict[str, frozenset[str]]:
        """Selected values absent from *facets* (the latest counts for *collection*).

        Fields that are not faceted in *facets* at all are reported whole.
        """
        present = {facet.field_name: {v.value for v in facet.values} for facet in facets}
        stale: dict[str, frozenset[str]] = {}
        for field, values in self.for_collection(collection).items():
            missing = values - present.get(field, set())
            if missing:
                stale[field] = frozenset(missing)
        return stale

    def __bool__(self) -> bool:
        return bool(self._selected)

    # ------------------------------------------------------------------
    # Preset shape: {collection: {field: [values...]}}
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        return {c: {f: sorted(v) for f, v in fields.items()} for c, fields in self.by_collection().items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FacetSelectionState":
        state = cls()
        if not isinstance(data, Mapping):
            raise SerializationError("facet filters must be an object", payload_type="facet_filters")
        for collection, fields in data.items():
            if not isinstance(fields, Mapping):
                raise SerializationError(
                    f"facet filters for {collection!r} must be an object", payload_type="facet_filters"
                )
            for field, values in fields.items():
                if isinstance(values, str) or not isinstance(values, (list, tuple)):
                    raise SerializationError(
                        f"facet filter {collection}.{field} must be a list", payload_type="facet_filters"
                    )
                state.select(str(collection), str(field), (str(v) for v in values))
        return state


__all__ = ["FacetSelectionState"]
