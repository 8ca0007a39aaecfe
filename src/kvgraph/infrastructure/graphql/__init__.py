"""GraphQL query layer generated from model schemas."""

from kvgraph.infrastructure.graphql.model_fields import (
    build_count_type,
    build_mutation_fields,
    build_object_type,
    build_query_fields,
    build_schema,
)

__all__ = [
    "build_count_type",
    "build_object_type",
    "build_query_fields",
    "build_mutation_fields",
    "build_schema",
]
