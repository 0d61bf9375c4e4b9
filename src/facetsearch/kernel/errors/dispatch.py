"""Dispatch errors – whole-batch failures and inline per-collection faults."""

from __future__ import annotations

import dataclasses
from typing import Any

from facetsearch.kernel.errors.base import FacetSearchError, InlineMessage


class DispatchError(FacetSearchError):
    """The batched request failed as a whole; no partial results exist."""

    default_code = "dispatch_error"
    default_user_message = "Search is unavailable right now. Showing the last results."


class BatchTooLargeError(DispatchError):
    """More searches were enabled than one batch may carry."""

    default_code = "batch_too_large"
    default_user_message = "Too many searches are enabled at once. Disable some and try again."

    def __init__(self, size: int, limit: int, **kwargs: Any) -> None:
        super().__init__(
            f"Multi-search batch of {size} searches exceeds the limit of {limit}",
            detail={"size": size, "limit": limit},
            **kwargs,
        )
        self.size = size
        self.limit = limit


@dataclasses.dataclass(frozen=True)
class PerCollectionFault:
    """One collection inside a successful batch reported a fault.

    Carried inline in that position's result; never raised.
    """

    message: str
    status_code: int | None = None
    code: str = "per_collection_fault"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "status_code": self.status_code}

    def inline(self, spec_id: str) -> InlineMessage:
        return InlineMessage(self.code, self.message, spec_id)


__all__ = ["BatchTooLargeError", "DispatchError", "PerCollectionFault"]
