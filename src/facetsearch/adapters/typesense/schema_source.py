"""Typesense adapter – collection schemas over HTTP."""
from __future__ import annotations

from facetsearch.adapters.typesense.client import HttpxTypesenseClient
from facetsearch.application.schema import CollectionSchema
from facetsearch.kernel.errors import SerializationError


class TypesenseSchemaSource:
    """Implements :class:`~facetsearch.application.schema.SchemaSource`."""

    def __init__(self, client: HttpxTypesenseClient) -> None:
        self._client = client

    async def get_schema(self, collection: str) -> CollectionSchema:
        return CollectionSchema.from_dict(await self._client.retrieve_collection(collection))

    async def list_schemas(self) -> list[CollectionSchema]:
        payload = await self._client.list_collections()
        if not isinstance(payload, list):
            raise SerializationError("collection list must be an array", payload_type="collections")
        return [CollectionSchema.from_dict(item) for item in payload]


__all__ = ["TypesenseSchemaSource"]
