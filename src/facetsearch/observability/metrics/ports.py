"""Observability – metric instrument ports.

Instrument names emitted by this package:

* ``multisearch.duration`` (histogram, ms) – wall-clock time per batch
* ``multisearch.batches`` (counter) – labelled ``outcome=ok|error|empty``
* ``multisearch.collection_faults`` (counter) – labelled by ``collection``
* ``multisearch.rejected_specifications`` (counter)
* ``search.engine_time`` (histogram, ms) – engine-reported time per collection
* ``session.stale_results`` (counter) – responses dropped by token check
* ``session.in_flight`` (gauge)
"""
from __future__ import annotations

import abc

Labels = dict[str, str]


class Counter(abc.ABC):
    @abc.abstractmethod
    def add(self, value: float = 1.0, labels: Labels | None = None) -> None: ...


class Histogram(abc.ABC):
    @abc.abstractmethod
    def record(self, value: float, labels: Labels | None = None) -> None: ...


class Gauge(abc.ABC):
    @abc.abstractmethod
    def set(self, value: float, labels: Labels | None = None) -> None: ...

    @abc.abstractmethod
    def inc(self, labels: Labels | None = None) -> None: ...

    @abc.abstractmethod
    def dec(self, labels: Labels | None = None) -> None: ...


class Metrics(abc.ABC):
    """Port: factory for metric instruments. Same name, same instrument."""

    @abc.abstractmethod
    def counter(self, name: str, description: str = "", unit: str = "") -> Counter: ...

    @abc.abstractmethod
    def histogram(self, name: str, description: str = "", unit: str = "ms") -> Histogram: ...

    @abc.abstractmethod
    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge: ...


__all__ = ["Counter", "Gauge", "Histogram", "Labels", "Metrics"]
