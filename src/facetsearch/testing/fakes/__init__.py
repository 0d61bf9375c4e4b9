"""Testing fakes – in-memory doubles for the ports."""
from facetsearch.testing.fakes.clock import FakeClock
from facetsearch.testing.fakes.metrics import FakeCounter, FakeGauge, FakeHistogram, FakeMetricsRegistry
from facetsearch.testing.fakes.transport import (
    FakeSearchTransport,
    echo_results,
    make_facet_count,
    make_fault,
    make_hit,
    make_search_result,
)

__all__ = [
    "FakeClock",
    "FakeCounter",
    "FakeGauge",
    "FakeHistogram",
    "FakeMetricsRegistry",
    "FakeSearchTransport",
    "echo_results",
    "make_facet_count",
    "make_fault",
    "make_hit",
    "make_search_result",
]
