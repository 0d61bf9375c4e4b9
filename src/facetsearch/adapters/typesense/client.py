"""Typesense adapter – async httpx client with node failover.

Transient failures (timeouts, connection errors, 5xx) are retried with
``tenacity``; each retry moves on to the next node. Client errors (4xx)
and undecodable bodies fail at once.
"""
from __future__ import annotations

from typing import Any, Mapping, Sequence
from urllib.parse import quote

import httpx
import tenacity

from facetsearch.config.settings.typesense import TypesenseNode, TypesenseSettings
from facetsearch.kernel.errors import ExternalServiceError, SerializationError, TransportTimeoutError
from facetsearch.observability.logging import get_logger

API_KEY_HEADER = "X-TYPESENSE-API-KEY"
SERVICE = "typesense"

_log = get_logger(__name__)


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, TransportTimeoutError):
        return True
    return isinstance(exc, ExternalServiceError) and exc.is_transient


class HttpxTypesenseClient:
    """Implements :class:`~facetsearch.application.dispatch.SearchTransport`."""

    def __init__(
        self,
        nodes: Sequence[TypesenseNode],
        api_key: str,
        *,
        timeout: float = 10.0,
        num_retries: int = 3,
        retry_interval_seconds: float = 0.1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not nodes:
            raise ValueError("at least one Typesense node is required")
        self._nodes = list(nodes)
        self._current = 0
        self._num_retries = num_retries
        self._retry_interval_seconds = retry_interval_seconds
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={API_KEY_HEADER: api_key, "Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: TypesenseSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpxTypesenseClient":
        return cls(
            settings.nodes,
            settings.query_api_key,
            timeout=settings.connection_timeout_seconds,
            num_retries=settings.num_retries,
            retry_interval_seconds=settings.retry_interval_seconds,
            transport=transport,
        )

    @property
    def nodes(self) -> list[TypesenseNode]:
        return list(self._nodes)

    @property
    def current_node(self) -> TypesenseNode:
        return self._nodes[self._current]

    async def __aenter__(self) -> "HttpxTypesenseClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def multi_search(
        self,
        searches: Sequence[Mapping[str, Any]],
        common_params: Mapping[str, Any] | None = None,
    ) -> Any:
        return await self._request(
            "POST",
            "/multi_search",
            json={"searches": [dict(s) for s in searches]},
            params=dict(common_params) if common_params else None,
        )

    async def retrieve_collection(self, name: str) -> Any:
        return await self._request("GET", f"/collections/{quote(name, safe='')}")

    async def list_collections(self) -> Any:
        return await self._request("GET", "/collections")

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        retrying = tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._num_retries + 1),
            wait=tenacity.wait_fixed(self._retry_interval_seconds),
            retry=tenacity.retry_if_exception(is_transient),
            before_sleep=self._before_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._send(self.current_node, method, path, **kwargs)
        return self._decode(response, method, path)

    async def _send(self, node: TypesenseNode, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{node.url}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(
                f"Typesense request timed out: {method} {path}",
                detail={"node": node.url},
                cause=exc,
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise ExternalServiceError(
                SERVICE,
                f"HTTP {status} from {method} {path}: {_error_message(exc.response)}",
                status_code=status,
                detail={"node": node.url},
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(
                SERVICE,
                f"{method} {path} failed: {exc}",
                detail={"node": node.url},
                cause=exc,
            ) from exc

    def _before_retry(self, retry_state: tenacity.RetryCallState) -> None:
        failed = self.current_node
        self._current = (self._current + 1) % len(self._nodes)
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        _log.warning(
            "typesense.retrying",
            attempt=retry_state.attempt_number,
            failed_node=failed.url,
            next_node=self.current_node.url,
            error=getattr(exc, "code", type(exc).__name__),
        )

    @staticmethod
    def _decode(response: httpx.Response, method: str, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise SerializationError(
                f"Typesense returned a non-JSON body for {method} {path}",
                payload_type="json",
                cause=exc,
            ) from exc


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text[:200]


__all__ = ["API_KEY_HEADER", "HttpxTypesenseClient", "is_transient"]
