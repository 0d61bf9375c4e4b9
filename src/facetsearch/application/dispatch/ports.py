"""Application dispatch – outbound port to the search engine."""
from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class SearchTransport(Protocol):
    """Sends one batched multi-search request.

    Implementations return the decoded JSON body (``{"results": [...]}``) and
    raise :class:`~facetsearch.kernel.errors.InfrastructureError` subclasses
    when the request as a whole fails.
    """

    async def multi_search(self, searches: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]: ...


__all__ = ["SearchTransport"]
