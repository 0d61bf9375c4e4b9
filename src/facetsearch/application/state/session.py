"""Application state – MultiSearchSession, the dispatch-and-normalize cycle.

Each :meth:`MultiSearchSession.refresh` issues a new request token. Only
the response carrying the latest token is applied; earlier responses that
arrive late are dropped without touching state. Facet mutations change the
selection state before the first ``await`` so they are visible at once.
"""
from __future__ import annotations

import dataclasses
from typing import Any

from facetsearch.application.dispatch import MultiSearchDispatcher
from facetsearch.application.presets.models import SearchPreset
from facetsearch.application.query import QuerySpecification, validate
from facetsearch.application.results import DEFAULT_TAGS, PerCollectionResult, apply_selections, normalize
from facetsearch.application.state.selection import FacetSelectionState
from facetsearch.application.state.store import MultiSearchState
from facetsearch.application.state.telemetry import TelemetryAggregator
from facetsearch.kernel.errors import FieldError
from facetsearch.kernel.time import Clock, SystemClock
from facetsearch.kernel.types import Err
from facetsearch.observability.logging import get_logger
from facetsearch.observability.metrics import Metrics, NoopMetrics

_log = get_logger(__name__)


class MultiSearchSession:
    def __init__(
        self,
        dispatcher: MultiSearchDispatcher,
        *,
        clock: Clock | None = None,
        telemetry: TelemetryAggregator | None = None,
        metrics: Metrics | None = None,
        state: MultiSearchState | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._clock = clock or SystemClock()
        self._metrics = metrics or NoopMetrics()
        self._telemetry = telemetry or TelemetryAggregator(self._metrics)
        self.state = state or MultiSearchState()
        self._tags = tuple(dict.fromkeys(dispatcher.highlight_tags + DEFAULT_TAGS))

    @property
    def selections(self) -> FacetSelectionState:
        return self.state.selections

    # ------------------------------------------------------------------
    # Specifications
    # ------------------------------------------------------------------

    def add_specification(self, spec: QuerySpecification) -> QuerySpecification:
        if any(s.id == spec.id for s in self.state.specifications):
            raise ValueError(f"specification {spec.id!r} already exists")
        self.state.specifications.append(spec)
        return spec

    def update_specification(self, spec_id: str, **changes: Any) -> QuerySpecification:
        """Replace the specification with a copy carrying *changes*; the id is kept."""
        changes.pop("id", None)
        index = self.state.index_of(spec_id)
        updated = self.state.specifications[index].copy(**changes)
        self.state.specifications[index] = updated
        return updated

    def remove_specification(self, spec_id: str) -> QuerySpecification:
        removed = self.state.specifications.pop(self.state.index_of(spec_id))
        self.state.results.pop(spec_id, None)
        self.state.rejected.pop(spec_id, None)
        return removed

    def set_enabled(self, spec_id: str, enabled: bool) -> QuerySpecification:
        return self.update_specification(spec_id, enabled=enabled)

    def validation_errors(self, spec_id: str) -> list[FieldError]:
        """Problems that would keep *spec_id* out of the next dispatch, selections included."""
        spec = self.state.specification(spec_id)
        return validate(spec, self.state.selections.for_collection(spec.collection.strip()))

    def result_for(self, spec_id: str) -> PerCollectionResult | None:
        return self.state.results.get(spec_id)

    # ------------------------------------------------------------------
    # Dispatch cycle
    # ------------------------------------------------------------------

    async def refresh(self) -> bool:
        """Dispatch every enabled specification; return whether the outcome was applied.

        ``False`` means a newer refresh started while this one was in flight.
        A failed batch sets ``last_error`` and keeps the previous results.
        """
        state = self.state
        token = state.issue_token()
        specs = [spec.copy() for spec in state.specifications]
        state.loading = True
        in_flight = self._metrics.gauge("session.in_flight")
        in_flight.inc()
        try:
            result = await self._dispatcher.dispatch(specs, state.selections.by_collection())
        except BaseException:
            if state.is_latest(token):
                state.loading = False
            raise
        finally:
            in_flight.dec()

        if not state.is_latest(token):
            self._metrics.counter("session.stale_results").add()
            _log.debug("session.stale_result_dropped", token=token, latest=state.latest_token)
            return False

        state.loading = False
        if isinstance(result, Err):
            state.last_error = result.error
            _log.warning("session.refresh_failed", token=token, **result.error.to_dict())
            return True

        outcome = result.value
        results: dict[str, PerCollectionResult | None] = {spec.id: None for spec in specs}
        for entry in outcome.entries:
            spec = entry.specification
            results[spec.id] = normalize(
                entry.raw,
                state.selections.for_collection(spec.collection.strip()),
                spec_id=spec.id,
                collection=spec.collection.strip(),
                tags=self._tags,
            )
        state.results = results
        state.rejected = dict(outcome.rejected)
        state.last_error = None
        state.performance = self._telemetry.record(
            outcome.total_time_ms, [results[e.specification.id] for e in outcome.entries]
        )
        return True

    # ------------------------------------------------------------------
    # Facet actions
    # ------------------------------------------------------------------

    async def toggle_facet(self, collection: str, field: str, value: str) -> bool:
        self.state.selections.toggle(collection, field, value)
        self._reflect_selections(collection)
        return await self.refresh()

    async def clear_facet_field(self, collection: str, field: str) -> bool:
        self.state.selections.clear_field(collection, field)
        self._reflect_selections(collection)
        return await self.refresh()

    async def clear_facets(self, collection: str | None = None) -> bool:
        self.state.selections.clear_all(collection)
        self._reflect_selections(collection)
        return await self.refresh()

    def stale_selections(self, spec_id: str) -> dict[str, frozenset[str]]:
        result = self.state.results.get(spec_id)
        if result is None:
            return {}
        return self.state.selections.stale_values(result.collection, result.facets)

    def _reflect_selections(self, collection: str | None) -> None:
        for spec_id, result in self.state.results.items():
            if result is None or (collection is not None and result.collection != collection):
                continue
            self.state.results[spec_id] = apply_selections(
                result, self.state.selections.for_collection(result.collection)
            )

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    def export_preset(self, name: str, *, description: str | None = None) -> SearchPreset:
        return SearchPreset(
            name=name,
            description=description,
            queries=tuple(spec.copy() for spec in self.state.specifications),
            facet_filters=self.state.selections.to_dict(),
            exported_at=self._clock.now(),
        )

    def load_preset(self, preset: SearchPreset) -> None:
        """Replace specifications and selections; results are cleared until the next refresh."""
        specs = []
        for query in preset.queries:
            spec = query.copy()
            if not spec.sort_options and preset.sort_options:
                spec = spec.copy(sort_options=list(preset.sort_options))
            specs.append(spec)
        self.state.specifications = specs
        self.state.selections = FacetSelectionState.from_dict(preset.facet_filters)
        self.state.results = {}
        self.state.rejected = {}
        self.state.last_error = None
        _log.info("session.preset_loaded", preset_id=preset.id, specifications=len(specs))


__all__ = ["MultiSearchSession"]
