"""Field schema entity for declarative model definitions.

A model subclass declares one FieldSchema per field as a class attribute.
The flags drive validation, uniqueness keys, secondary indexes and the
GraphQL type of the field.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    """Supported value types for model fields."""

    ID = "id"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldSchema:
    """Declarative description of one model field.

    Attributes:
        type: Value type, used for the GraphQL type.
        primary: The field holds the document id.
        index: Maintain a secondary index entry for the field's value.
        unique: At most one document may hold a given value.
        auto_id: Caller-supplied values are ignored on create.
        required: A truthy value must be supplied on create.
        email: Values must be valid email addresses.
        password: Values are stored as one-way hashes.
        lowercase: String values are lowercased before anything else.
        min_length: Minimum length of a password on create.
        default_value: Used when the field is absent from the candidate.
        description: Exposed in the GraphQL schema.
    """

    type: FieldType = FieldType.STRING
    primary: bool = False
    index: bool = False
    unique: bool = False
    auto_id: bool = False
    required: bool = False
    email: bool = False
    password: bool = False
    lowercase: bool = False
    min_length: int = 0
    default_value: Any = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.min_length < 0:
            raise ValueError("min_length cannot be negative")
        if self.primary and self.password:
            raise ValueError("A primary field cannot be a password field")


# Implicit first field of every model
ID_FIELD = FieldSchema(type=FieldType.ID, primary=True, index=True, auto_id=True)
