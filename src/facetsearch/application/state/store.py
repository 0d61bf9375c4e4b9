"""Application state – the top-level state owned by one search session."""
from __future__ import annotations

import dataclasses

from facetsearch.application.query import QuerySpecification
from facetsearch.application.results.models import PerCollectionResult
from facetsearch.application.state.selection import FacetSelectionState
from facetsearch.application.state.telemetry import PerformanceMetrics
from facetsearch.kernel.errors import FacetSearchError, FieldError, InlineMessage


@dataclasses.dataclass
class MultiSearchState:
    """Mutated only by the dispatch cycle and by user actions, never concurrently.

    ``results`` maps specification id to its latest result, or ``None`` when
    the specification was not part of the last applied dispatch.
    """

    specifications: list[QuerySpecification] = dataclasses.field(default_factory=list)
    results: dict[str, PerCollectionResult | None] = dataclasses.field(default_factory=dict)
    selections: FacetSelectionState = dataclasses.field(default_factory=FacetSelectionState)
    loading: bool = False
    performance: PerformanceMetrics = dataclasses.field(default_factory=PerformanceMetrics)
    last_error: FacetSearchError | None = None
    rejected: dict[str, list[FieldError]] = dataclasses.field(default_factory=dict)
    _token: int = dataclasses.field(default=0, repr=False)

    def issue_token(self) -> int:
        self._token += 1
        return self._token

    @property
    def latest_token(self) -> int:
        return self._token

    def is_latest(self, token: int) -> bool:
        return token == self._token

    def index_of(self, spec_id: str) -> int:
        for index, spec in enumerate(self.specifications):
            if spec.id == spec_id:
                return index
        raise KeyError(spec_id)

    def specification(self, spec_id: str) -> QuerySpecification:
        return self.specifications[self.index_of(spec_id)]

    def ordered_results(self) -> list[PerCollectionResult]:
        """Present results in specification order."""
        return [r for spec in self.specifications if (r := self.results.get(spec.id)) is not None]

    def messages(self) -> list[InlineMessage]:
        """Every problem to show, batch-wide first, then per specification in order."""
        out = [self.last_error.inline()] if self.last_error is not None else []
        for spec in self.specifications:
            out.extend(error.inline(spec.id) for error in self.rejected.get(spec.id, ()))
            result = self.results.get(spec.id)
            if result is not None and result.error is not None:
                out.append(result.error.inline(spec.id))
        return out


__all__ = ["MultiSearchState"]
