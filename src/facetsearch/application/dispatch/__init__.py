"""Application dispatch – batched multi-search execution."""
from facetsearch.application.dispatch.dispatcher import (
    DEFAULT_MAX_BATCH_SIZE,
    CollectionSelections,
    DispatchEntry,
    DispatchOutcome,
    MultiSearchDispatcher,
)
from facetsearch.application.dispatch.ports import SearchTransport

__all__ = [
    "CollectionSelections",
    "DEFAULT_MAX_BATCH_SIZE",
    "DispatchEntry",
    "DispatchOutcome",
    "MultiSearchDispatcher",
    "SearchTransport",
]
