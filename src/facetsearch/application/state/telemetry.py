"""Application state – round-trip timing for display."""
from __future__ import annotations

import dataclasses
from typing import Sequence

from facetsearch.application.results.models import PerCollectionResult
from facetsearch.observability.metrics import Metrics, NoopMetrics


@dataclasses.dataclass(frozen=True)
class CollectionTiming:
    spec_id: str
    collection: str
    search_time_ms: int


@dataclasses.dataclass(frozen=True)
class PerformanceMetrics:
    total_time_ms: int = 0
    search_times: tuple[CollectionTiming, ...] = ()

    @property
    def per_collection_ms(self) -> dict[str, int]:
        """Engine time keyed by specification id."""
        return {t.spec_id: t.search_time_ms for t in self.search_times}

    @property
    def total_search_time_ms(self) -> int:
        return sum(t.search_time_ms for t in self.search_times)


class TelemetryAggregator:
    """Collect timings of one dispatch cycle; the numbers are never used for control."""

    def __init__(self, metrics: Metrics | None = None) -> None:
        self._metrics = metrics or NoopMetrics()

    def record(self, total_time_ms: int, results: Sequence[PerCollectionResult]) -> PerformanceMetrics:
        timings = tuple(
            CollectionTiming(r.spec_id, r.collection, r.search_time_ms) for r in results if r.error is None
        )
        engine_time = self._metrics.histogram("search.engine_time")
        for timing in timings:
            engine_time.record(timing.search_time_ms, labels={"collection": timing.collection})
        return PerformanceMetrics(total_time_ms=total_time_ms, search_times=timings)


__all__ = ["CollectionTiming", "PerformanceMetrics", "TelemetryAggregator"]
