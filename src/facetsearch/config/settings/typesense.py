"""Config settings – connection and request defaults for a Typesense cluster.

Environment variables (prefix ``TYPESENSE_``)::

    TYPESENSE_API_KEY                     required
    TYPESENSE_URL                         http://localhost:8108
    TYPESENSE_SEARCH_API_KEY              search-only key, preferred for queries
    TYPESENSE_ADDITIONAL_NODES            JSON list of URLs or {host, port, protocol}
    TYPESENSE_CONNECTION_TIMEOUT_SECONDS  10
    TYPESENSE_NUM_RETRIES                 3
    TYPESENSE_RETRY_INTERVAL_SECONDS      0.1
    TYPESENSE_MAX_BATCH_SIZE              50
    TYPESENSE_HIGHLIGHT_START_TAG         <mark>
    TYPESENSE_HIGHLIGHT_END_TAG           </mark>
"""
from __future__ import annotations

import dataclasses
import json
from typing import Any, ClassVar
from urllib.parse import urlsplit

from facetsearch.config.settings.base import Settings
from facetsearch.config.validation import InvalidSettingValueError
from facetsearch.observability.logging import get_logger

_log = get_logger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclasses.dataclass(frozen=True)
class TypesenseNode:
    host: str
    port: int = 8108
    protocol: str = "http"

    @property
    def url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"

    @classmethod
    def from_url(cls, url: str) -> "TypesenseNode":
        parts = urlsplit(url.strip())
        if parts.scheme not in _DEFAULT_PORTS or not parts.hostname:
            raise ValueError(f"not an http(s) URL: {url!r}")
        return cls(host=parts.hostname, port=parts.port or _DEFAULT_PORTS[parts.scheme], protocol=parts.scheme)

    @classmethod
    def from_value(cls, value: Any) -> "TypesenseNode":
        if isinstance(value, str):
            return cls.from_url(value)
        if isinstance(value, dict) and value.get("host"):
            protocol = str(value.get("protocol", "http"))
            if protocol not in _DEFAULT_PORTS:
                raise ValueError(f"unsupported protocol {protocol!r}")
            return cls(host=str(value["host"]), port=int(value.get("port", 8108)), protocol=protocol)
        raise ValueError(f"not a node description: {value!r}")


@dataclasses.dataclass
class TypesenseSettings(Settings):
    _prefix: ClassVar[str] = "TYPESENSE"

    api_key: str
    url: str = "http://localhost:8108"
    search_api_key: str = ""
    additional_nodes: str = ""
    connection_timeout_seconds: float = 10.0
    num_retries: int = 3
    retry_interval_seconds: float = 0.1
    max_batch_size: int = 50
    highlight_start_tag: str = "<mark>"
    highlight_end_tag: str = "</mark>"

    def _validate(self) -> None:
        if not self.api_key.strip():
            raise InvalidSettingValueError("TYPESENSE_API_KEY", "", "must not be empty")
        try:
            TypesenseNode.from_url(self.url)
        except ValueError as exc:
            raise InvalidSettingValueError("TYPESENSE_URL", self.url, str(exc)) from exc
        if self.connection_timeout_seconds <= 0:
            raise InvalidSettingValueError(
                "TYPESENSE_CONNECTION_TIMEOUT_SECONDS", self.connection_timeout_seconds, "must be positive"
            )
        if self.num_retries < 0:
            raise InvalidSettingValueError("TYPESENSE_NUM_RETRIES", self.num_retries, "must not be negative")
        if self.retry_interval_seconds < 0:
            raise InvalidSettingValueError(
                "TYPESENSE_RETRY_INTERVAL_SECONDS", self.retry_interval_seconds, "must not be negative"
            )
        if self.max_batch_size < 1:
            raise InvalidSettingValueError("TYPESENSE_MAX_BATCH_SIZE", self.max_batch_size, "must be at least 1")
        if not self.highlight_start_tag or not self.highlight_end_tag:
            raise InvalidSettingValueError("TYPESENSE_HIGHLIGHT_START_TAG", self.highlight_start_tag, "tags must not be empty")

    @property
    def query_api_key(self) -> str:
        """Key sent with searches: the search-only key when configured."""
        return self.search_api_key or self.api_key

    @property
    def nodes(self) -> list[TypesenseNode]:
        """The primary node followed by any valid additional nodes, without duplicates."""
        nodes = [TypesenseNode.from_url(self.url)]
        for node in self._additional():
            if node not in nodes:
                nodes.append(node)
        return nodes

    def _additional(self) -> list[TypesenseNode]:
        if not self.additional_nodes.strip():
            return []
        try:
            raw = json.loads(self.additional_nodes)
        except json.JSONDecodeError:
            _log.warning("settings.additional_nodes_ignored", reason="invalid JSON")
            return []
        if not isinstance(raw, list):
            _log.warning("settings.additional_nodes_ignored", reason="expected a JSON list")
            return []
        nodes: list[TypesenseNode] = []
        for item in raw:
            try:
                nodes.append(TypesenseNode.from_value(item))
            except (TypeError, ValueError) as exc:
                _log.warning("settings.additional_node_ignored", node=item, reason=str(exc))
        return nodes


__all__ = ["TypesenseNode", "TypesenseSettings"]
