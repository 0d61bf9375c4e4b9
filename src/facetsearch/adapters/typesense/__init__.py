"""Typesense adapter – HTTP transport, schema source and session wiring."""
from facetsearch.adapters.typesense.client import API_KEY_HEADER, HttpxTypesenseClient, is_transient
from facetsearch.adapters.typesense.factory import create_session
from facetsearch.adapters.typesense.schema_source import TypesenseSchemaSource

__all__ = ["API_KEY_HEADER", "HttpxTypesenseClient", "TypesenseSchemaSource", "create_session", "is_transient"]
