"""Application state – selections, telemetry and the search session."""
from facetsearch.application.state.selection import FacetSelectionState
from facetsearch.application.state.telemetry import CollectionTiming, PerformanceMetrics, TelemetryAggregator
from facetsearch.application.state.store import MultiSearchState
from facetsearch.application.state.session import MultiSearchSession

__all__ = [
    "CollectionTiming",
    "FacetSelectionState",
    "MultiSearchSession",
    "MultiSearchState",
    "PerformanceMetrics",
    "TelemetryAggregator",
]
