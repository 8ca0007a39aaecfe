"""Base abstractions for key-value store backends.

The model layer only needs a small command set: hashes for document values,
strings for uniqueness keys and sorted sets for membership and secondary
indexes. Commands can be issued one at a time or queued into a Batch that
the backend submits as one unit and answers with one result per command.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from kvgraph.core.exceptions import StoreError

Score = float | str
Command = tuple[str, tuple[Any, ...]]


@dataclass(slots=True)
class BatchResult:
    """Per-command outcome of an executed batch.

    `results[i]` is the reply to the i-th queued command, or the StoreError
    it failed with.
    """

    results: list[Any] = field(default_factory=list)

    @property
    def errors(self) -> list[tuple[int, StoreError]]:
        return [
            (index, result)
            for index, result in enumerate(self.results)
            if isinstance(result, StoreError)
        ]

    @property
    def ok(self) -> bool:
        return not self.errors


class Batch:
    """Accumulates store commands for one round trip.

    Commands are applied in queue order. The backend makes the batch
    atomic with respect to other clients but does not roll back commands
    that already ran when a later one fails.

    Example:
        batch = store.batch()
        batch.hset("app:users:values:1", {"id": '"1"'})
        batch.zadd("app:users:keys", 1700000000.0, "1")
        result = await batch.execute()
    """

    def __init__(self, store: "KeyValueStore") -> None:
        self._store = store
        self._commands: list[Command] = []

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def commands(self) -> list[Command]:
        return list(self._commands)

    def _queue(self, command: str, *args: Any) -> "Batch":
        self._commands.append((command, args))
        return self

    def hgetall(self, key: str) -> "Batch":
        return self._queue("hgetall", key)

    def hset(self, key: str, mapping: dict[str, str]) -> "Batch":
        return self._queue("hset", key, mapping)

    def get(self, key: str) -> "Batch":
        return self._queue("get", key)

    def set(self, key: str, value: str) -> "Batch":
        return self._queue("set", key, value)

    def delete(self, key: str) -> "Batch":
        return self._queue("delete", key)

    def zadd(self, key: str, score: float, member: str) -> "Batch":
        return self._queue("zadd", key, score, member)

    def zrem(self, key: str, member: str) -> "Batch":
        return self._queue("zrem", key, member)

    async def execute(self, raise_on_error: bool = True) -> BatchResult:
        """Submit all queued commands.

        Args:
            raise_on_error: Raise the first per-command StoreError after the
                whole batch ran. When False, failures are only reported in
                the returned BatchResult.

        Raises:
            StoreError: If the batch could not be submitted, or a command
                failed and raise_on_error is set.
        """
        if not self._commands:
            return BatchResult()

        result = await self._store.execute_batch(self._commands)
        if raise_on_error and result.errors:
            _, error = result.errors[0]
            raise error
        return result


class KeyValueStore(ABC):
    """Abstract base class for store backends."""

    def batch(self) -> Batch:
        """Start a new batch bound to this store."""
        return Batch(self)

    @abstractmethod
    async def execute_batch(self, commands: list[Command]) -> BatchResult:
        """Run queued commands as one unit and collect one result per command."""
        ...

    @abstractmethod
    async def hgetall(self, key: str) -> dict[str, str]:
        """Return every field of a hash, empty when the key does not exist."""
        ...

    @abstractmethod
    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        ...

    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        ...

    @abstractmethod
    async def delete(self, key: str) -> int:
        ...

    @abstractmethod
    async def zadd(self, key: str, score: float, member: str) -> int:
        ...

    @abstractmethod
    async def zrem(self, key: str, member: str) -> int:
        ...

    @abstractmethod
    async def zrevrangebyscore(
        self, key: str, max: Score, min: Score, skip: int, limit: int
    ) -> list[str]:
        """Return members with min <= score <= max, highest score first."""
        ...

    @abstractmethod
    async def zcount(self, key: str, min: Score, max: Score) -> int:
        ...

    @abstractmethod
    async def zrangebylex(self, key: str, min: str, max: str) -> list[str]:
        """Return members between two lexicographic bounds ("[a", "(a", "-", "+")."""
        ...

    async def close(self) -> None:
        """Release backend resources. Backends without any may keep the default."""
