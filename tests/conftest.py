"""Pytest configuration for all tests."""

import itertools

import pytest
import structlog

from kvgraph.core.hooks import HookRegistry
from kvgraph.domain.entities.field_schema import FieldSchema, FieldType
from kvgraph.infrastructure.persistence.memory_store import MemoryStore
from kvgraph.infrastructure.persistence.model import Model


class User(Model):
    """Model used across the persistence and GraphQL tests."""

    __model_name__ = "user"
    __collection__ = "users"

    email = FieldSchema(required=True, email=True, unique=True, lowercase=True)
    password = FieldSchema(password=True, min_length=6)
    name = FieldSchema(index=True)
    age = FieldSchema(type=FieldType.INT)


class Tag(Model):
    label = FieldSchema(required=True, unique=True, index=True)
    active = FieldSchema(type=FieldType.BOOLEAN, index=True)


class StepClock:
    """Deterministic clock returning 1, 2, 3, ... on each call."""

    def __init__(self) -> None:
        self._ticks = itertools.count(1)

    def __call__(self) -> float:
        return float(next(self._ticks))


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def hook_registry() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def users(store: MemoryStore) -> User:
    return User(store, namespace="test", clock=StepClock())


@pytest.fixture
def tags(store: MemoryStore) -> Tag:
    return Tag(store, namespace="test", clock=StepClock())


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop logging configuration bound to a test's captured streams."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
