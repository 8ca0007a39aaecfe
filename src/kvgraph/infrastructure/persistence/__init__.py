"""Persistence: store backends and the Model base class."""

from kvgraph.infrastructure.persistence.memory_store import MemoryStore
from kvgraph.infrastructure.persistence.model import Document, Model
from kvgraph.infrastructure.persistence.redis_store import RedisStore, create_store
from kvgraph.infrastructure.persistence.store import Batch, BatchResult, KeyValueStore

__all__ = [
    "Batch",
    "BatchResult",
    "Document",
    "KeyValueStore",
    "MemoryStore",
    "Model",
    "RedisStore",
    "create_store",
]
