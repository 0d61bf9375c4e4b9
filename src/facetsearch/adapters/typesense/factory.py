"""Typesense adapter – wire a session from settings."""
from __future__ import annotations

import httpx

from facetsearch.adapters.typesense.client import HttpxTypesenseClient
from facetsearch.application.dispatch import MultiSearchDispatcher
from facetsearch.application.state import MultiSearchSession
from facetsearch.config.settings.typesense import TypesenseSettings
from facetsearch.kernel.time import Clock, SystemClock
from facetsearch.observability.metrics import Metrics


def create_session(
    settings: TypesenseSettings,
    *,
    clock: Clock | None = None,
    metrics: Metrics | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[MultiSearchSession, HttpxTypesenseClient]:
    """Build the client, dispatcher and session described by *settings*.

    The client is returned alongside the session so the caller can close it.
    """
    clock = clock or SystemClock()
    client = HttpxTypesenseClient.from_settings(settings, transport=transport)
    dispatcher = MultiSearchDispatcher(
        client,
        clock=clock,
        metrics=metrics,
        max_batch_size=settings.max_batch_size,
        highlight_start_tag=settings.highlight_start_tag,
        highlight_end_tag=settings.highlight_end_tag,
    )
    return MultiSearchSession(dispatcher, clock=clock, metrics=metrics), client


__all__ = ["create_session"]
