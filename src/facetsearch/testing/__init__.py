"""Testing support – fakes and engine-shaped payload builders.

Usage::

    from facetsearch.testing import FakeSearchTransport, make_search_result

    transport = FakeSearchTransport().respond_with({"results": [make_search_result(found=3)]})
"""
from facetsearch.testing.fakes import (
    FakeClock,
    FakeMetricsRegistry,
    FakeSearchTransport,
    echo_results,
    make_facet_count,
    make_fault,
    make_hit,
    make_search_result,
)

__all__ = [
    "FakeClock",
    "FakeMetricsRegistry",
    "FakeSearchTransport",
    "echo_results",
    "make_facet_count",
    "make_fault",
    "make_hit",
    "make_search_result",
]
