"""Field-level document checks.

Pure helpers used by the model layer while validating a candidate document.
Nothing here talks to the store; uniqueness is checked by the model itself.
"""

import re
from typing import Any

from kvgraph.domain.entities.field_schema import FieldSchema

# Address grammar accepted for email fields: dotted local part or quoted
# string, then either a bracketed IPv4 literal or a dotted domain name.
EMAIL_PATTERN = re.compile(
    r'^(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}])"
    r"|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)


def is_email(value: Any) -> bool:
    """Check whether a value is a syntactically valid email address."""
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def is_blank(value: Any) -> bool:
    """Falsy values count as missing, booleans never do."""
    return not isinstance(value, bool) and not value


def required_message(field_name: str) -> str:
    return f"{field_name} is required"


def password_length_message(field_name: str, min_length: int) -> str:
    return f"{field_name} must be at least {min_length} characters."


def email_message(field_name: str) -> str:
    return f"{field_name} must be a valid email address"


def unique_message(field_name: str) -> str:
    return f"{field_name} already exists"


def normalize(value: Any, field: FieldSchema) -> Any:
    """Apply value transforms declared on the field."""
    if field.lowercase and isinstance(value, str):
        return value.lower()
    return value


def password_is_acceptable(value: Any, field: FieldSchema) -> bool:
    """Check that a submitted password is present and long enough."""
    return isinstance(value, str) and value != "" and len(value) >= field.min_length


def check_field(
    field_name: str, field: FieldSchema, value: Any, is_create: bool
) -> list[str]:
    """Run the stateless checks for one field.

    Args:
        field_name: Name used in messages.
        field: The field's schema.
        value: The normalized, not yet hashed value.
        is_create: Whether the document is being created.

    Returns:
        Messages for every failed check, empty when the value is acceptable.
    """
    errors: list[str] = []

    if field.password:
        if is_create and not password_is_acceptable(value, field):
            errors.append(password_length_message(field_name, field.min_length))
    elif is_create and field.required and is_blank(value):
        errors.append(required_message(field_name))

    if field.email and not is_blank(value) and not is_email(value):
        errors.append(email_message(field_name))

    return errors
