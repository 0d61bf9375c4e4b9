"""Infrastructure errors – transport and payload failures."""

from __future__ import annotations

from typing import Any

from facetsearch.kernel.errors.base import FacetSearchError


class InfrastructureError(FacetSearchError):
    """I/O failure that is not a rule violation."""

    default_code = "infrastructure_error"
    default_user_message = "The search service could not be reached."


class TransportTimeoutError(InfrastructureError):
    """A request to the search engine exceeded the transport deadline."""

    default_code = "transport_timeout"


class ExternalServiceError(InfrastructureError):
    """The search engine was unreachable or returned an unexpected response."""

    default_code = "external_service_error"

    def __init__(
        self,
        service: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"External service '{service}' error", **kwargs)
        self.service = service
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        """Connection failures and 5xx responses are worth another attempt."""
        return self.status_code is None or self.status_code >= 500


class SerializationError(InfrastructureError):
    """A payload could not be decoded into the expected shape."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = [
    "ExternalServiceError",
    "InfrastructureError",
    "SerializationError",
    "TransportTimeoutError",
]
