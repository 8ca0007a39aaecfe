"""GraphQL fields generated from model schemas.

Each model contributes three query fields and three mutation fields:

    user(id: ID): user
    users(limit: Int = 50, skip: Int = 0): [user]
    count_user: user_count
    create_user(...fields without id): user
    update_user(id: ID!, ...fields): user
    delete_user(id: ID!): ID

Resolvers call straight into the model; model errors surface as GraphQL
errors carrying the exception message.
"""

from typing import TYPE_CHECKING, Any

from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLField,
    GraphQLFloat,
    GraphQLID,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLResolveInfo,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLString,
)

from kvgraph.domain.entities.field_schema import FieldSchema, FieldType

if TYPE_CHECKING:
    from kvgraph.infrastructure.persistence.model import Model

DEFAULT_LIMIT = 50

SCALAR_TYPES: dict[FieldType, GraphQLScalarType] = {
    FieldType.ID: GraphQLID,
    FieldType.STRING: GraphQLString,
    FieldType.INT: GraphQLInt,
    FieldType.FLOAT: GraphQLFloat,
    FieldType.BOOLEAN: GraphQLBoolean,
}


def scalar_type(field: FieldSchema) -> GraphQLScalarType:
    return SCALAR_TYPES[field.type]


def build_object_type(model: "Model") -> GraphQLObjectType:
    """Build the output type mirroring the model's fields."""
    return GraphQLObjectType(
        name=model.model_name,
        description=model.model_name,
        fields=lambda: {
            name: GraphQLField(scalar_type(field), description=field.description)
            for name, field in model.fields().items()
        },
    )


def build_count_type(model: "Model") -> GraphQLObjectType:
    """Build the `<name>_count` type returned by the count query."""
    return GraphQLObjectType(
        name=f"{model.model_name}_count",
        fields={"count": GraphQLField(GraphQLInt)},
    )


def _input_arguments(model: "Model", include_id: bool) -> dict[str, GraphQLArgument]:
    arguments = {}
    for name, field in model.fields().items():
        if field.primary:
            if include_id:
                arguments[name] = GraphQLArgument(GraphQLNonNull(scalar_type(field)))
            continue
        arguments[name] = GraphQLArgument(scalar_type(field), description=field.description)
    return arguments


def build_query_fields(model: "Model") -> dict[str, GraphQLField]:
    """Build the single, list and count query fields of a model."""
    name = model.model_name
    object_type = model.schema()

    async def resolve_one(root: Any, info: GraphQLResolveInfo, id: str | None = None) -> Any:
        if not id:
            return None
        return await model.get(id)

    async def resolve_many(
        root: Any,
        info: GraphQLResolveInfo,
        limit: int | None = DEFAULT_LIMIT,
        skip: int | None = 0,
    ) -> Any:
        # An explicit null falls back to the argument default
        return await model.find(
            limit=DEFAULT_LIMIT if limit is None else limit,
            skip=0 if skip is None else skip,
        )

    async def resolve_count(root: Any, info: GraphQLResolveInfo) -> Any:
        return {"count": await model.count()}

    return {
        name: GraphQLField(
            object_type,
            args={"id": GraphQLArgument(GraphQLID)},
            resolve=resolve_one,
        ),
        f"{name}s": GraphQLField(
            GraphQLList(object_type),
            args={
                "limit": GraphQLArgument(GraphQLInt, default_value=DEFAULT_LIMIT),
                "skip": GraphQLArgument(GraphQLInt, default_value=0),
            },
            resolve=resolve_many,
        ),
        f"count_{name}": GraphQLField(model.count_schema(), resolve=resolve_count),
    }


def build_mutation_fields(model: "Model") -> dict[str, GraphQLField]:
    """Build the create, update and delete mutation fields of a model."""
    name = model.model_name
    object_type = model.schema()

    async def resolve_create(root: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        return await model.save(None, args)

    async def resolve_update(root: Any, info: GraphQLResolveInfo, id: str, **args: Any) -> Any:
        return await model.save(id, args)

    async def resolve_delete(root: Any, info: GraphQLResolveInfo, id: str) -> Any:
        return await model.delete(id)

    return {
        f"create_{name}": GraphQLField(
            object_type,
            args=_input_arguments(model, include_id=False),
            resolve=resolve_create,
        ),
        f"update_{name}": GraphQLField(
            object_type,
            args=_input_arguments(model, include_id=True),
            resolve=resolve_update,
        ),
        f"delete_{name}": GraphQLField(
            GraphQLID,
            args={"id": GraphQLArgument(GraphQLNonNull(GraphQLID))},
            resolve=resolve_delete,
        ),
    }


def build_schema(*models: "Model") -> GraphQLSchema:
    """Assemble a schema exposing the fields of every given model.

    Raises:
        ValueError: If two models generate the same field name.
    """
    query_fields: dict[str, GraphQLField] = {}
    mutation_fields: dict[str, GraphQLField] = {}

    for model in models:
        for target, fields in ((query_fields, model.query()), (mutation_fields, model.mutation())):
            duplicates = target.keys() & fields.keys()
            if duplicates:
                raise ValueError(f"Duplicate GraphQL fields: {', '.join(sorted(duplicates))}")
            target.update(fields)

    if not query_fields:
        raise ValueError("At least one model is required to build a schema")

    return GraphQLSchema(
        query=GraphQLObjectType("Query", query_fields),
        mutation=GraphQLObjectType("Mutation", mutation_fields),
    )
