"""Redis store backend built on redis.asyncio.

Batches are sent as one MULTI/EXEC pipeline: Redis runs the queued
commands back to back without interleaving other clients, and a failing
command does not undo the ones before it.
"""

from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from kvgraph.core.config import Settings
from kvgraph.core.exceptions import StoreError
from kvgraph.core.logging import get_logger
from kvgraph.infrastructure.persistence.store import BatchResult, Command, KeyValueStore, Score

logger = get_logger(__name__)


def _apply(target: Any, command: str, args: tuple[Any, ...]) -> Any:
    """Translate a store command into the redis-py call on a client or pipeline."""
    if command == "hset":
        key, mapping = args
        return target.hset(key, mapping=mapping)
    if command == "zadd":
        key, score, member = args
        return target.zadd(key, {member: score})
    if command == "zrevrangebyscore":
        key, max_score, min_score, skip, limit = args
        return target.zrevrangebyscore(key, max_score, min_score, start=skip, num=limit)
    if command in {"hgetall", "get", "set", "delete", "zrem", "zcount", "zrangebylex"}:
        return getattr(target, command)(*args)
    raise ValueError(f"Unsupported store command: {command}")


class RedisStore(KeyValueStore):
    """Store backend talking to a Redis server.

    The client is created and closed by the application entry point and
    shared by every model bound to this store.
    """

    def __init__(self, client: redis.Redis) -> None:
        """Initialize the store with a redis client.

        Args:
            client: A redis.asyncio client created with decode_responses=True.
        """
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        return cls(redis.from_url(url, decode_responses=True))

    @property
    def client(self) -> redis.Redis:
        return self._client

    async def _call(self, command: str, *args: Any) -> Any:
        try:
            return await _apply(self._client, command, args)
        except RedisError as e:
            logger.error("Store command failed", command=command, error=str(e))
            raise StoreError(str(e)) from e

    async def execute_batch(self, commands: list[Command]) -> BatchResult:
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for command, args in commands:
                    _apply(pipe, command, args)
                replies = await pipe.execute(raise_on_error=False)
        except RedisError as e:
            logger.error("Store batch failed", command_count=len(commands), error=str(e))
            raise StoreError(str(e)) from e

        results = [
            StoreError(str(reply)) if isinstance(reply, Exception) else reply
            for reply in replies
        ]
        failed = sum(isinstance(r, StoreError) for r in results)
        if failed:
            logger.warning(
                "Store batch completed with errors",
                command_count=len(commands),
                failed_count=failed,
            )
        return BatchResult(results=results)

    async def hgetall(self, key: str) -> dict[str, str]:
        return await self._call("hgetall", key)

    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        return await self._call("hset", key, mapping)

    async def get(self, key: str) -> str | None:
        return await self._call("get", key)

    async def set(self, key: str, value: str) -> bool:
        return bool(await self._call("set", key, value))

    async def delete(self, key: str) -> int:
        return await self._call("delete", key)

    async def zadd(self, key: str, score: float, member: str) -> int:
        return await self._call("zadd", key, score, member)

    async def zrem(self, key: str, member: str) -> int:
        return await self._call("zrem", key, member)

    async def zrevrangebyscore(
        self, key: str, max: Score, min: Score, skip: int, limit: int
    ) -> list[str]:
        return await self._call("zrevrangebyscore", key, max, min, skip, limit)

    async def zcount(self, key: str, min: Score, max: Score) -> int:
        return await self._call("zcount", key, min, max)

    async def zrangebylex(self, key: str, min: str, max: str) -> list[str]:
        return await self._call("zrangebylex", key, min, max)

    async def close(self) -> None:
        await self._client.aclose()


def create_store(settings: Settings) -> RedisStore:
    """Build the Redis store configured by the application settings."""
    logger.info("Creating redis store", namespace=settings.namespace)
    return RedisStore.from_url(settings.redis_url)
