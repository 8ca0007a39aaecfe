"""kvgraph - declarative models over a key-value store with generated GraphQL fields.

Example:
    >>> from kvgraph import FieldSchema, Model, RedisStore, build_schema
    >>>
    >>> class User(Model):
    ...     email = FieldSchema(required=True, email=True, unique=True, lowercase=True)
    ...     password = FieldSchema(password=True, min_length=6)
    >>>
    >>> store = RedisStore.from_url("redis://localhost:6379/0")
    >>> schema = build_schema(User(store))
"""

__version__ = "0.1.0"

from kvgraph.core.exceptions import (
    HookAbortedError,
    KvGraphError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from kvgraph.core.hooks import HookDecorator, HookEvent, HookRegistry
from kvgraph.domain.entities import AbortHookException, FieldSchema, FieldType, HookContext
from kvgraph.infrastructure.graphql import build_schema
from kvgraph.infrastructure.persistence import (
    Batch,
    BatchResult,
    KeyValueStore,
    MemoryStore,
    Model,
    RedisStore,
    create_store,
)

__all__ = [
    "__version__",
    # Models
    "Model",
    "FieldSchema",
    "FieldType",
    # Stores
    "KeyValueStore",
    "Batch",
    "BatchResult",
    "MemoryStore",
    "RedisStore",
    "create_store",
    # Query layer
    "build_schema",
    # Hooks
    "HookRegistry",
    "HookDecorator",
    "HookEvent",
    "HookContext",
    "AbortHookException",
    # Exceptions
    "KvGraphError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
    "HookAbortedError",
]
