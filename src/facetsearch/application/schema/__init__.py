"""Application schema – collection fields and query-builder choices."""
from facetsearch.application.schema.builder import QueryBuilderField, SchemaSource, field_label, query_builder_fields
from facetsearch.application.schema.models import CollectionField, CollectionSchema

__all__ = [
    "CollectionField",
    "CollectionSchema",
    "QueryBuilderField",
    "SchemaSource",
    "field_label",
    "query_builder_fields",
]
