"""In-memory store backend.

Keeps strings, hashes and sorted sets in process memory with Redis reply
semantics for the commands the model layer uses. Suitable for tests and
for printing schemas without a server; data is lost with the process.
"""

import math
from typing import Any

from kvgraph.core.exceptions import StoreError
from kvgraph.infrastructure.persistence.store import BatchResult, Command, KeyValueStore, Score

WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"


class _Hash(dict):
    """Hash value."""


class _SortedSet(dict):
    """Sorted set value: member -> score."""


def _parse_score(bound: Score) -> tuple[float, bool]:
    """Parse a score bound into (value, exclusive)."""
    if isinstance(bound, str):
        text = bound.strip().lower()
        exclusive = text.startswith("(")
        if exclusive:
            text = text[1:]
        if text in {"+inf", "inf"}:
            return math.inf, exclusive
        if text == "-inf":
            return -math.inf, exclusive
        try:
            return float(text), exclusive
        except ValueError:
            raise StoreError("ERR min or max is not a float") from None
    return float(bound), False


def _in_score_range(score: float, low: Score, high: Score) -> bool:
    low_value, low_exclusive = _parse_score(low)
    high_value, high_exclusive = _parse_score(high)
    above = score > low_value if low_exclusive else score >= low_value
    below = score < high_value if high_exclusive else score <= high_value
    return above and below


def _in_lex_range(member: str, low: str, high: str) -> bool:
    def satisfies(bound: str, is_low: bool) -> bool:
        if bound == "-":
            return is_low
        if bound == "+":
            return not is_low
        if not bound or bound[0] not in "[(":
            raise StoreError("ERR min or max not valid string range item")
        inclusive = bound[0] == "["
        value = bound[1:]
        if is_low:
            return member >= value if inclusive else member > value
        return member <= value if inclusive else member < value

    return satisfies(low, True) and satisfies(high, False)


class MemoryStore(KeyValueStore):
    """Store backend holding all data in a dictionary.

    Every command runs to completion without awaiting, so a batch is never
    interleaved with other coroutines on the same event loop.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def _typed(self, key: str, kind: type) -> Any:
        value = self._data.get(key)
        if value is not None and not isinstance(value, kind):
            raise StoreError(WRONGTYPE)
        return value

    def _run(self, command: str, args: tuple[Any, ...]) -> Any:
        handler = getattr(self, f"_cmd_{command}", None)
        if handler is None:
            raise ValueError(f"Unsupported store command: {command}")
        return handler(*args)

    def _cmd_hgetall(self, key: str) -> dict[str, str]:
        return dict(self._typed(key, _Hash) or {})

    def _cmd_hset(self, key: str, mapping: dict[str, str]) -> int:
        if not mapping:
            raise StoreError("ERR wrong number of arguments for 'hset' command")
        target = self._typed(key, _Hash)
        if target is None:
            target = self._data[key] = _Hash()
        added = sum(1 for field in mapping if field not in target)
        target.update({field: str(value) for field, value in mapping.items()})
        return added

    def _cmd_get(self, key: str) -> str | None:
        return self._typed(key, str)

    def _cmd_set(self, key: str, value: str) -> bool:
        self._data[key] = str(value)
        return True

    def _cmd_delete(self, key: str) -> int:
        return 1 if self._data.pop(key, None) is not None else 0

    def _cmd_zadd(self, key: str, score: float, member: str) -> int:
        target = self._typed(key, _SortedSet)
        if target is None:
            target = self._data[key] = _SortedSet()
        added = 0 if member in target else 1
        target[member] = float(score)
        return added

    def _cmd_zrem(self, key: str, member: str) -> int:
        target = self._typed(key, _SortedSet)
        if not target or member not in target:
            return 0
        del target[member]
        if not target:
            del self._data[key]
        return 1

    def _cmd_zrevrangebyscore(
        self, key: str, max: Score, min: Score, skip: int, limit: int
    ) -> list[str]:
        target = self._typed(key, _SortedSet) or {}
        ordered = sorted(target.items(), key=lambda item: (item[1], item[0]), reverse=True)
        members = [member for member, score in ordered if _in_score_range(score, min, max)]
        if limit < 0:
            return members[skip:]
        return members[skip : skip + limit]

    def _cmd_zcount(self, key: str, min: Score, max: Score) -> int:
        target = self._typed(key, _SortedSet) or {}
        return sum(1 for score in target.values() if _in_score_range(score, min, max))

    def _cmd_zrangebylex(self, key: str, min: str, max: str) -> list[str]:
        target = self._typed(key, _SortedSet) or {}
        return sorted(member for member in target if _in_lex_range(member, min, max))

    async def execute_batch(self, commands: list[Command]) -> BatchResult:
        results: list[Any] = []
        for command, args in commands:
            try:
                results.append(self._run(command, args))
            except StoreError as e:
                results.append(e)
        return BatchResult(results=results)

    async def hgetall(self, key: str) -> dict[str, str]:
        return self._cmd_hgetall(key)

    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        return self._cmd_hset(key, mapping)

    async def get(self, key: str) -> str | None:
        return self._cmd_get(key)

    async def set(self, key: str, value: str) -> bool:
        return self._cmd_set(key, value)

    async def delete(self, key: str) -> int:
        return self._cmd_delete(key)

    async def zadd(self, key: str, score: float, member: str) -> int:
        return self._cmd_zadd(key, score, member)

    async def zrem(self, key: str, member: str) -> int:
        return self._cmd_zrem(key, member)

    async def zrevrangebyscore(
        self, key: str, max: Score, min: Score, skip: int, limit: int
    ) -> list[str]:
        return self._cmd_zrevrangebyscore(key, max, min, skip, limit)

    async def zcount(self, key: str, min: Score, max: Score) -> int:
        return self._cmd_zcount(key, min, max)

    async def zrangebylex(self, key: str, min: str, max: str) -> list[str]:
        return self._cmd_zrangebylex(key, min, max)

    def keys(self) -> list[str]:
        """Return every key currently held, sorted."""
        return sorted(self._data)

    def flush(self) -> None:
        """Drop all data."""
        self._data.clear()
