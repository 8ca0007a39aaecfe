"""Unit tests for the FieldSchema entity."""

import dataclasses

import pytest

from kvgraph.domain.entities.field_schema import ID_FIELD, FieldSchema, FieldType


class TestFieldSchema:
    def test_defaults(self) -> None:
        field = FieldSchema()

        assert field.type == FieldType.STRING
        assert not (field.unique or field.index or field.required or field.password)
        assert field.min_length == 0
        assert field.default_value is None

    def test_id_field(self) -> None:
        assert ID_FIELD.type == FieldType.ID
        assert ID_FIELD.primary and ID_FIELD.index and ID_FIELD.auto_id

    def test_is_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            FieldSchema().unique = True

    def test_negative_min_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="min_length"):
            FieldSchema(password=True, min_length=-1)

    def test_primary_password_rejected(self) -> None:
        with pytest.raises(ValueError):
            FieldSchema(primary=True, password=True)
