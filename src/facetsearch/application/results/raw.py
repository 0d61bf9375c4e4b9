"""Application results – raw engine response shapes.

Each position of a multi-search response is either a :class:`RawSearchResult`
or a :class:`RawSearchFault` (``kind`` tells them apart). Documents stay
opaque behind :class:`Document`.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterator, Literal

from facetsearch.kernel.errors import PerCollectionFault, SerializationError


@dataclasses.dataclass(frozen=True)
class Document(Mapping[str, Any]):
    """Read-only view over an engine document; its fields are not interpreted."""

    fields: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.fields)))

    @property
    def id(self) -> str | None:
        value = self.fields.get("id")
        return None if value is None else str(value)


@dataclasses.dataclass(frozen=True)
class RawHighlight:
    field: str
    matched_tokens: tuple[str, ...] = ()
    snippet: str | None = None
    snippets: tuple[str, ...] = ()
    value: str | None = None


@dataclasses.dataclass(frozen=True)
class RawHit:
    document: Document
    highlights: tuple[RawHighlight, ...] = ()
    text_match: int | float | None = None
    text_match_info: Mapping[str, Any] | None = None


@dataclasses.dataclass(frozen=True)
class RawFacetCountValue:
    value: str
    count: int
    highlighted: str = ""


@dataclasses.dataclass(frozen=True)
class RawFacetCount:
    field_name: str
    counts: tuple[RawFacetCountValue, ...] = ()
    stats: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class RawSearchResult:
    found: int
    out_of: int
    page: int
    search_time_ms: int
    hits: tuple[RawHit, ...] = ()
    facet_counts: tuple[RawFacetCount, ...] = ()
    request_params: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    search_cutoff: bool = False
    kind: Literal["result"] = "result"


@dataclasses.dataclass(frozen=True)
class RawSearchFault:
    message: str
    code: int | None = None
    kind: Literal["fault"] = "fault"

    def to_fault(self) -> PerCollectionFault:
        return PerCollectionFault(self.message, self.code)


RawEntry = RawSearchResult | RawSearchFault


def parse_multi_search_response(payload: Any, expected: int) -> list[RawEntry]:
    """Split a multi-search response into one entry per request position.

    An entry that cannot be read becomes a :class:`RawSearchFault` in its
    position, so healthy siblings survive.

    Raises:
        SerializationError: the payload is not a ``{"results": [...]}`` object
            with exactly *expected* entries.
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("results"), list):
        raise SerializationError("multi-search response has no 'results' list", payload_type="multi_search")
    results = payload["results"]
    if len(results) != expected:
        raise SerializationError(
            f"multi-search returned {len(results)} results for {expected} searches",
            payload_type="multi_search",
        )
    return [_parse_entry(entry) for entry in results]


def _parse_entry(entry: Any) -> RawEntry:
    try:
        return parse_raw_result(entry)
    except SerializationError as exc:
        return RawSearchFault(message=exc.message, code=None)


def parse_raw_result(entry: Any) -> RawEntry:
    if not isinstance(entry, Mapping):
        raise SerializationError("search result is not an object", payload_type="search_result")
    if "error" in entry:
        code = entry.get("code")
        return RawSearchFault(message=str(entry["error"]), code=code if isinstance(code, int) else None)
    try:
        return RawSearchResult(
            found=int(entry.get("found", 0)),
            out_of=int(entry.get("out_of", 0)),
            page=int(entry.get("page", 1)),
            search_time_ms=int(entry.get("search_time_ms", 0)),
            hits=tuple(_hit(h) for h in entry.get("hits") or ()),
            facet_counts=tuple(_facet_count(f) for f in entry.get("facet_counts") or ()),
            request_params=dict(entry.get("request_params") or {}),
            search_cutoff=bool(entry.get("search_cutoff", False)),
        )
    except (TypeError, ValueError, KeyError, AttributeError) as exc:
        raise SerializationError(f"malformed search result: {exc}", payload_type="search_result") from exc


def _hit(raw: Mapping[str, Any]) -> RawHit:
    return RawHit(
        document=Document(raw["document"]),
        highlights=tuple(_highlight(h) for h in raw.get("highlights") or ()),
        text_match=raw.get("text_match"),
        text_match_info=raw.get("text_match_info"),
    )


def _highlight(raw: Mapping[str, Any]) -> RawHighlight:
    return RawHighlight(
        field=str(raw["field"]),
        matched_tokens=tuple(_flatten_tokens(raw.get("matched_tokens") or ())),
        snippet=raw.get("snippet"),
        snippets=tuple(raw.get("snippets") or ()),
        value=raw.get("value"),
    )


def _flatten_tokens(tokens: Any) -> list[str]:
    # Array fields report one token list per matched element.
    out: list[str] = []
    for token in tokens:
        if isinstance(token, list):
            out.extend(str(t) for t in token)
        else:
            out.append(str(token))
    return out


def _facet_count(raw: Mapping[str, Any]) -> RawFacetCount:
    return RawFacetCount(
        field_name=str(raw["field_name"]),
        counts=tuple(
            RawFacetCountValue(
                value=str(c["value"]),
                count=int(c.get("count", 0)),
                highlighted=str(c.get("highlighted") or c["value"]),
            )
            for c in raw.get("counts") or ()
        ),
        stats=dict(raw.get("stats") or {}),
    )


__all__ = [
    "Document",
    "RawEntry",
    "RawFacetCount",
    "RawFacetCountValue",
    "RawHighlight",
    "RawHit",
    "RawSearchFault",
    "RawSearchResult",
    "parse_multi_search_response",
    "parse_raw_result",
]
