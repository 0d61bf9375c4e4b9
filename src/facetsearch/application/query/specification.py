"""Application query – QuerySpecification value object."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Literal

from facetsearch.application.filters import FilterCondition
from facetsearch.kernel.types import new_id

WILDCARD = "*"
DEFAULT_MAX_FACET_VALUES = 10
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 250
MAX_NUM_TYPOS = 2
MAX_SORT_OPTIONS = 3


@dataclass(frozen=True)
class SortOption:
    field: str
    order: Literal["asc", "desc"] = "asc"

    def to_param(self) -> str:
        return f"{self.field}:{self.order}"


@dataclass
class QuerySpecification:
    """One per-collection search panel.

    ``query_by`` and ``facet_by`` are ordered sets: duplicates are dropped
    when the request is built. ``filter_by`` is a manual filter string that
    is passed through verbatim alongside ``filter_conditions``.
    """

    collection: str
    query: str = WILDCARD
    query_by: list[str] = field(default_factory=list)
    filter_conditions: list[FilterCondition] = field(default_factory=list)
    sort_options: list[SortOption] = field(default_factory=list)
    facet_by: list[str] = field(default_factory=list)
    max_facet_values: int = DEFAULT_MAX_FACET_VALUES
    per_page: int = DEFAULT_PER_PAGE
    page: int = 1
    num_typos: int = 2
    prefix: bool = True
    filter_by: str = ""
    enabled: bool = True
    id: str = field(default_factory=new_id)

    @property
    def effective_query(self) -> str:
        """Blank queries search everything."""
        return self.query.strip() or WILDCARD

    @property
    def is_wildcard(self) -> bool:
        return self.effective_query == WILDCARD

    def copy(self, **changes: object) -> "QuerySpecification":
        """Deep-enough copy: list attributes are not shared with the original."""
        clone = dataclasses.replace(
            self,
            query_by=list(self.query_by),
            filter_conditions=list(self.filter_conditions),
            sort_options=list(self.sort_options),
            facet_by=list(self.facet_by),
        )
        return dataclasses.replace(clone, **changes) if changes else clone


def unique(names: list[str]) -> list[str]:
    """Strip blanks and duplicates, keep first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            out.append(name)
    return out


__all__ = [
    "DEFAULT_MAX_FACET_VALUES",
    "DEFAULT_PER_PAGE",
    "MAX_NUM_TYPOS",
    "MAX_PER_PAGE",
    "MAX_SORT_OPTIONS",
    "QuerySpecification",
    "SortOption",
    "WILDCARD",
    "unique",
]
