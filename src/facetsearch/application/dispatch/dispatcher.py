"""Application dispatch – one batched request for every enabled specification.

Entries in a :class:`DispatchOutcome` line up with the dispatched
specifications by position. Per-collection faults stay inline as
:class:`RawSearchFault`; only whole-batch failures come back as
:class:`Err`.
"""
from __future__ import annotations

import dataclasses
from typing import Iterable, Mapping, Sequence

from facetsearch.application.dispatch.ports import SearchTransport
from facetsearch.application.query import (
    DEFAULT_HIGHLIGHT_END_TAG,
    DEFAULT_HIGHLIGHT_START_TAG,
    QuerySpecification,
    build_search_params,
    validate,
)
from facetsearch.application.results.raw import RawEntry, RawSearchFault, parse_multi_search_response
from facetsearch.kernel.errors import (
    BatchTooLargeError,
    DispatchError,
    FieldError,
    InfrastructureError,
)
from facetsearch.kernel.time import Clock, SystemClock, elapsed_ms
from facetsearch.kernel.types import Err, Ok, Result
from facetsearch.observability.logging import get_logger
from facetsearch.observability.metrics import Metrics, NoopMetrics

DEFAULT_MAX_BATCH_SIZE = 50

CollectionSelections = Mapping[str, Mapping[str, Iterable[str]]]
"""Facet selections per collection: ``{collection: {field: values}}``."""

_log = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class DispatchEntry:
    specification: QuerySpecification
    raw: RawEntry

    @property
    def is_fault(self) -> bool:
        return isinstance(self.raw, RawSearchFault)


@dataclasses.dataclass(frozen=True)
class DispatchOutcome:
    entries: tuple[DispatchEntry, ...] = ()
    rejected: Mapping[str, list[FieldError]] = dataclasses.field(default_factory=dict)
    total_time_ms: int = 0

    @property
    def dispatched(self) -> bool:
        return bool(self.entries)


class MultiSearchDispatcher:
    """Build, send and positionally split one multi-search batch.

    The dispatcher never retries; retrying belongs to the transport.
    """

    def __init__(
        self,
        transport: SearchTransport,
        *,
        clock: Clock | None = None,
        metrics: Metrics | None = None,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        highlight_start_tag: str = DEFAULT_HIGHLIGHT_START_TAG,
        highlight_end_tag: str = DEFAULT_HIGHLIGHT_END_TAG,
    ) -> None:
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")
        self._transport = transport
        self._clock = clock or SystemClock()
        self._metrics = metrics or NoopMetrics()
        self._max_batch_size = max_batch_size
        self._highlight_start_tag = highlight_start_tag
        self._highlight_end_tag = highlight_end_tag

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    @property
    def highlight_tags(self) -> tuple[tuple[str, str], ...]:
        return ((self._highlight_start_tag, self._highlight_end_tag),)

    def prepare(
        self,
        specs: Sequence[QuerySpecification],
        selections: CollectionSelections | None = None,
    ) -> tuple[list[QuerySpecification], list[dict], dict[str, list[FieldError]]]:
        """Split *specs* into (dispatchable, request params, rejected)."""
        accepted: list[QuerySpecification] = []
        searches: list[dict] = []
        rejected: dict[str, list[FieldError]] = {}
        for spec in specs:
            if not spec.enabled:
                continue
            facet_selections = (selections or {}).get(spec.collection.strip())
            errors = validate(spec, facet_selections)
            if errors:
                rejected[spec.id] = errors
                continue
            accepted.append(spec)
            searches.append(
                build_search_params(
                    spec,
                    facet_selections,
                    highlight_start_tag=self._highlight_start_tag,
                    highlight_end_tag=self._highlight_end_tag,
                )
            )
        return accepted, searches, rejected

    async def dispatch(
        self,
        specs: Sequence[QuerySpecification],
        selections: CollectionSelections | None = None,
    ) -> Result[DispatchOutcome, DispatchError]:
        accepted, searches, rejected = self.prepare(specs, selections)
        if rejected:
            self._metrics.counter("multisearch.rejected_specifications").add(len(rejected))
            _log.info("multisearch.rejected", spec_ids=sorted(rejected))

        if not searches:
            self._metrics.counter("multisearch.batches").add(labels={"outcome": "empty"})
            return Ok(DispatchOutcome(rejected=rejected))

        if len(searches) > self._max_batch_size:
            error = BatchTooLargeError(len(searches), self._max_batch_size)
            self._metrics.counter("multisearch.batches").add(labels={"outcome": "error"})
            _log.warning("multisearch.batch_too_large", size=len(searches), limit=self._max_batch_size)
            return Err(error)

        start = self._clock.monotonic()
        try:
            payload = await self._transport.multi_search(searches)
            raw_entries = parse_multi_search_response(payload, expected=len(searches))
        except InfrastructureError as exc:
            total_time_ms = elapsed_ms(start, self._clock.monotonic())
            self._metrics.counter("multisearch.batches").add(labels={"outcome": "error"})
            _log.warning(
                "multisearch.failed",
                error_code=exc.code,
                error=exc.message,
                searches=len(searches),
                duration_ms=total_time_ms,
            )
            return Err(
                DispatchError(
                    f"Multi-search request failed: {exc.message}",
                    detail={"searches": len(searches), "duration_ms": total_time_ms},
                    cause=exc,
                )
            )
        total_time_ms = elapsed_ms(start, self._clock.monotonic())

        entries = tuple(DispatchEntry(spec, raw) for spec, raw in zip(accepted, raw_entries))
        faults = [entry for entry in entries if entry.is_fault]
        for entry in faults:
            self._metrics.counter("multisearch.collection_faults").add(
                labels={"collection": entry.specification.collection}
            )
            _log.info(
                "multisearch.collection_fault",
                spec_id=entry.specification.id,
                collection=entry.specification.collection,
                **entry.raw.to_fault().to_dict(),  # type: ignore[union-attr]
            )
        self._metrics.counter("multisearch.batches").add(labels={"outcome": "ok"})
        self._metrics.histogram("multisearch.duration").record(total_time_ms)
        _log.info(
            "multisearch.dispatched",
            searches=len(entries),
            faults=len(faults),
            rejected=len(rejected),
            duration_ms=total_time_ms,
        )
        return Ok(DispatchOutcome(entries=entries, rejected=rejected, total_time_ms=total_time_ms))


__all__ = [
    "CollectionSelections",
    "DEFAULT_MAX_BATCH_SIZE",
    "DispatchEntry",
    "DispatchOutcome",
    "MultiSearchDispatcher",
]
