"""Testing fakes – scripted in-memory SearchTransport."""
from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Callable, Mapping, Sequence

from facetsearch.kernel.errors import InfrastructureError

Responder = Callable[[list[dict[str, Any]]], Mapping[str, Any]]


def echo_results(searches: list[dict[str, Any]]) -> dict[str, Any]:
    """Default responder: one empty result per search."""
    return {"results": [make_search_result() for _ in searches]}


class FakeSearchTransport:
    """Records every batch and answers from a script.

    Queued items are consumed one per call: a mapping is returned as the
    body, an exception is raised, a callable is invoked with the searches.
    With an empty queue the default responder answers. ``gate()`` makes the
    next call wait on an :class:`asyncio.Event`, so tests can control the
    order in which concurrent calls resolve.
    """

    def __init__(self, default: Responder = echo_results) -> None:
        self.requests: list[list[dict[str, Any]]] = []
        self._queue: deque[Mapping[str, Any] | BaseException | Responder] = deque()
        self._gates: deque[asyncio.Event | None] = deque()
        self._default = default

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def respond_with(self, *responses: Mapping[str, Any] | BaseException | Responder) -> "FakeSearchTransport":
        self._queue.extend(responses)
        return self

    def fail_with(self, error: InfrastructureError) -> "FakeSearchTransport":
        return self.respond_with(error)

    def gate(self) -> asyncio.Event:
        """Hold the next call until the returned event is set."""
        event = asyncio.Event()
        self._gates.append(event)
        return event

    def pass_through(self) -> None:
        """Let the next call resolve without waiting."""
        self._gates.append(None)

    async def multi_search(self, searches: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
        batch = [dict(s) for s in searches]
        self.requests.append(batch)
        script = self._queue.popleft() if self._queue else self._default
        gate = self._gates.popleft() if self._gates else None
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if isinstance(script, BaseException):
            raise script
        if callable(script):
            return script(batch)
        return script


def make_search_result(
    *,
    found: int = 0,
    hits: Sequence[Mapping[str, Any]] = (),
    facet_counts: Sequence[Mapping[str, Any]] = (),
    search_time_ms: int = 1,
    page: int = 1,
    out_of: int | None = None,
) -> dict[str, Any]:
    """One successful ``results[]`` entry in engine shape."""
    return {
        "found": found,
        "out_of": found if out_of is None else out_of,
        "page": page,
        "search_time_ms": search_time_ms,
        "hits": [dict(h) for h in hits],
        "facet_counts": [dict(f) for f in facet_counts],
    }


def make_hit(document: Mapping[str, Any], **extra: Any) -> dict[str, Any]:
    return {"document": dict(document), "highlights": [], **extra}


def make_facet_count(field_name: str, counts: Mapping[str, int], stats: Mapping[str, Any] | None = None) -> dict[str, Any]:
    return {
        "field_name": field_name,
        "counts": [{"value": v, "count": c, "highlighted": v} for v, c in counts.items()],
        "stats": dict(stats or {}),
    }


def make_fault(message: str = "Not found.", code: int = 404) -> dict[str, Any]:
    return {"error": message, "code": code}


__all__ = [
    "FakeSearchTransport",
    "echo_results",
    "make_facet_count",
    "make_fault",
    "make_hit",
    "make_search_result",
]
