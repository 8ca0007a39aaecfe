"""Domain entities."""

from kvgraph.domain.entities.field_schema import ID_FIELD, FieldSchema, FieldType
from kvgraph.domain.entities.hook_context import AbortHookException, HookContext, HookResult

__all__ = [
    "FieldSchema",
    "FieldType",
    "ID_FIELD",
    "AbortHookException",
    "HookContext",
    "HookResult",
]
