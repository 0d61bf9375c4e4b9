"""Testing fakes – FakeMetricsRegistry."""
from __future__ import annotations

from facetsearch.observability.metrics.ports import Counter, Gauge, Histogram, Labels, Metrics


class FakeCounter(Counter):
    def __init__(self, name: str) -> None:
        self.name = name
        self.calls: list[tuple[float, Labels | None]] = []

    def add(self, value: float = 1.0, labels: Labels | None = None) -> None:
        self.calls.append((value, labels))

    @property
    def total(self) -> float:
        return sum(v for v, _ in self.calls)

    def total_for(self, **labels: str) -> float:
        """Sum of the calls whose labels include every given pair."""
        return sum(v for v, l in self.calls if all((l or {}).get(k) == val for k, val in labels.items()))


class FakeHistogram(Histogram):
    def __init__(self, name: str) -> None:
        self.name = name
        self.calls: list[tuple[float, Labels | None]] = []

    def record(self, value: float, labels: Labels | None = None) -> None:
        self.calls.append((value, labels))

    @property
    def values(self) -> list[float]:
        return [v for v, _ in self.calls]


class FakeGauge(Gauge):
    def __init__(self, name: str) -> None:
        self.name = name
        self.current = 0.0
        self.peak = 0.0

    def set(self, value: float, labels: Labels | None = None) -> None:
        self.current = value
        self.peak = max(self.peak, value)

    def inc(self, labels: Labels | None = None) -> None:
        self.set(self.current + 1)

    def dec(self, labels: Labels | None = None) -> None:
        self.current -= 1


class FakeMetricsRegistry(Metrics):
    """In-memory :class:`Metrics` double; instruments are created on first use.

    Usage::

        metrics = FakeMetricsRegistry()
        dispatcher = MultiSearchDispatcher(transport, metrics=metrics)
        ...
        assert metrics.counter("multisearch.batches").total_for(outcome="ok") == 1
    """

    def __init__(self) -> None:
        self.counters: dict[str, FakeCounter] = {}
        self.histograms: dict[str, FakeHistogram] = {}
        self.gauges: dict[str, FakeGauge] = {}

    def counter(self, name: str, description: str = "", unit: str = "") -> FakeCounter:
        return self.counters.setdefault(name, FakeCounter(name))

    def histogram(self, name: str, description: str = "", unit: str = "ms") -> FakeHistogram:
        return self.histograms.setdefault(name, FakeHistogram(name))

    def gauge(self, name: str, description: str = "", unit: str = "") -> FakeGauge:
        return self.gauges.setdefault(name, FakeGauge(name))

    def assert_counter_total(self, name: str, total: float) -> None:
        counter = self.counters.get(name)
        assert counter is not None, f"Counter '{name}' was never created"
        assert counter.total == total, f"Counter '{name}' total is {counter.total}, expected {total}"

    def reset(self) -> None:
        self.counters.clear()
        self.histograms.clear()
        self.gauges.clear()


__all__ = ["FakeCounter", "FakeGauge", "FakeHistogram", "FakeMetricsRegistry"]
