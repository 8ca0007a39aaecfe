"""Unit tests for generated GraphQL fields, executed against the memory store."""

import pytest
from graphql import GraphQLObjectType, GraphQLSchema, graphql, print_schema

from kvgraph.infrastructure.graphql.model_fields import build_schema


@pytest.fixture
def schema(users, tags):
    return build_schema(users, tags)


async def execute(schema, source: str, **variables):
    return await graphql(schema, source, variable_values=variables or None)


CREATE_USER = """
mutation ($email: String, $password: String, $name: String) {
  create_user(email: $email, password: $password, name: $name) { id email name }
}
"""


class TestSchemaShape:
    def test_generated_fields(self, schema) -> None:
        sdl = print_schema(schema)

        assert "user(id: ID): user" in sdl
        assert "users(limit: Int = 50, skip: Int = 0): [user]" in sdl
        assert "count_user: user_count" in sdl
        assert "delete_user(id: ID!): ID" in sdl
        assert "create_tag(label: String, active: Boolean): tag" in sdl
        assert "update_tag(id: ID!, label: String, active: Boolean): tag" in sdl

    def test_object_type_mirrors_fields(self, users) -> None:
        assert list(users.schema().fields) == ["id", "email", "password", "name", "age"]
        assert users.schema() is users.schema()

    def test_generated_types_are_shared_across_calls(self, users) -> None:
        first, second = users.query(), users.query()

        assert first["count_user"].type is second["count_user"].type
        assert first["user"].type is second["user"].type

    def test_duplicate_models_rejected(self, users) -> None:
        with pytest.raises(ValueError, match="Duplicate GraphQL fields"):
            build_schema(users, users)

    def test_at_least_one_model_required(self) -> None:
        with pytest.raises(ValueError):
            build_schema()


class TestResolvers:
    @pytest.mark.asyncio
    async def test_create_then_query(self, schema) -> None:
        created = await execute(
            schema, CREATE_USER, email="Ann@Example.com", password="secret1", name="Ann"
        )
        assert created.errors is None
        user_id = created.data["create_user"]["id"]

        result = await execute(
            schema,
            "query ($id: ID) { user(id: $id) { id email } users { id } count_user { count } }",
            id=user_id,
        )

        assert result.errors is None
        assert result.data == {
            "user": {"id": user_id, "email": "ann@example.com"},
            "users": [{"id": user_id}],
            "count_user": {"count": 1},
        }

    @pytest.mark.asyncio
    async def test_missing_id_resolves_to_null(self, schema) -> None:
        result = await execute(schema, '{ user { id } other: user(id: "nope") { id } }')

        assert result.errors is None
        assert result.data == {"user": None, "other": None}

    @pytest.mark.asyncio
    async def test_validation_error_surfaces_message(self, schema) -> None:
        await execute(schema, CREATE_USER, email="a@b.co", password="secret1")

        result = await execute(schema, CREATE_USER, email="a@b.co", password="secret1")

        assert result.data == {"create_user": None}
        assert result.errors[0].message == "email already exists"

    @pytest.mark.asyncio
    async def test_update_is_partial(self, schema) -> None:
        created = await execute(schema, CREATE_USER, email="a@b.co", password="secret1", name="A")
        user_id = created.data["create_user"]["id"]

        result = await execute(
            schema,
            'mutation ($id: ID!) { update_user(id: $id, name: "B") { email name } }',
            id=user_id,
        )

        assert result.errors is None
        assert result.data["update_user"] == {"email": "a@b.co", "name": "B"}

    @pytest.mark.asyncio
    async def test_paging_arguments(self, schema) -> None:
        for label in ["one", "two", "three"]:
            await execute(schema, f'mutation {{ create_tag(label: "{label}") {{ id }} }}')

        result = await execute(schema, "{ tags(limit: 1, skip: 1) { label } }")

        assert result.data == {"tags": [{"label": "two"}]}

    @pytest.mark.asyncio
    async def test_delete(self, schema) -> None:
        created = await execute(schema, CREATE_USER, email="a@b.co", password="secret1")
        user_id = created.data["create_user"]["id"]

        deleted = await execute(
            schema, "mutation ($id: ID!) { delete_user(id: $id) }", id=user_id
        )
        again = await execute(
            schema, "mutation ($id: ID!) { delete_user(id: $id) }", id=user_id
        )
        count = await execute(schema, "{ count_user { count } }")

        assert deleted.data == {"delete_user": user_id}
        assert again.errors[0].message == f"user not found: {user_id}"
        assert count.data == {"count_user": {"count": 0}}

    @pytest.mark.asyncio
    async def test_null_paging_arguments_use_defaults(self, schema) -> None:
        for label in ["one", "two"]:
            await execute(schema, f'mutation {{ create_tag(label: "{label}") {{ id }} }}')

        result = await execute(schema, "{ tags(limit: null, skip: null) { label } }")

        assert result.errors is None
        assert result.data == {"tags": [{"label": "two"}, {"label": "one"}]}

    @pytest.mark.asyncio
    async def test_query_fields_compose_into_custom_schema(self, users) -> None:
        query_fields = users.query()
        schema = GraphQLSchema(
            query=GraphQLObjectType(
                "Query",
                {
                    "count_user": query_fields["count_user"],
                    "count_user_again": users.query()["count_user"],
                },
            )
        )

        result = await execute(schema, "{ count_user { count } count_user_again { count } }")

        assert result.errors is None
        assert result.data == {"count_user": {"count": 0}, "count_user_again": {"count": 0}}
