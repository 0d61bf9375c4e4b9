"""Application presets – named snapshots of a search session."""
from __future__ import annotations

import dataclasses
from datetime import datetime

from facetsearch.application.query import QuerySpecification, SortOption
from facetsearch.kernel.types import new_id

PRESET_FORMAT_VERSION = "1.0"


@dataclasses.dataclass(frozen=True)
class SearchPreset:
    """``facet_filters`` is ``{collection: {field: [values]}}``.

    ``sort_options`` are defaults applied on load to specifications that
    carry no sort of their own.
    """

    name: str
    queries: tuple[QuerySpecification, ...]
    exported_at: datetime
    facet_filters: dict[str, dict[str, list[str]]] = dataclasses.field(default_factory=dict)
    sort_options: tuple[SortOption, ...] = ()
    description: str | None = None
    version: str = PRESET_FORMAT_VERSION
    id: str = dataclasses.field(default_factory=new_id)


__all__ = ["PRESET_FORMAT_VERSION", "SearchPreset"]
