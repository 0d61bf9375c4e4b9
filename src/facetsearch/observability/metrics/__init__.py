"""Observability – metrics."""
from facetsearch.observability.metrics.noop import NoopMetrics
from facetsearch.observability.metrics.ports import Counter, Gauge, Histogram, Labels, Metrics

__all__ = ["Counter", "Gauge", "Histogram", "Labels", "Metrics", "NoopMetrics"]
