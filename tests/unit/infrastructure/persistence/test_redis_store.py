"""Unit tests for the Redis store backend with a mocked client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError, ResponseError

from kvgraph.core.config import Settings
from kvgraph.core.exceptions import StoreError
from kvgraph.infrastructure.persistence.redis_store import RedisStore, create_store


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def pipe(client: MagicMock) -> MagicMock:
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[])
    client.pipeline.return_value.__aenter__.return_value = pipe
    return pipe


class TestRedisStoreCommands:
    @pytest.mark.asyncio
    async def test_hset_passes_mapping(self, client: MagicMock) -> None:
        client.hset = AsyncMock(return_value=1)

        assert await RedisStore(client).hset("k", {"a": "1"}) == 1
        client.hset.assert_awaited_once_with("k", mapping={"a": "1"})

    @pytest.mark.asyncio
    async def test_zadd_passes_member_score_mapping(self, client: MagicMock) -> None:
        client.zadd = AsyncMock(return_value=1)

        await RedisStore(client).zadd("z", 12.5, "m")

        client.zadd.assert_awaited_once_with("z", {"m": 12.5})

    @pytest.mark.asyncio
    async def test_zrevrangebyscore_uses_start_and_num(self, client: MagicMock) -> None:
        client.zrevrangebyscore = AsyncMock(return_value=["b", "a"])

        result = await RedisStore(client).zrevrangebyscore("z", "+inf", "-inf", 5, 10)

        assert result == ["b", "a"]
        client.zrevrangebyscore.assert_awaited_once_with("z", "+inf", "-inf", start=5, num=10)

    @pytest.mark.asyncio
    async def test_plain_commands_forwarded(self, client: MagicMock) -> None:
        client.zrangebylex = AsyncMock(return_value=["a:1"])
        client.zcount = AsyncMock(return_value=4)

        store = RedisStore(client)

        assert await store.zrangebylex("i", "[a:", "[a:\xff") == ["a:1"]
        assert await store.zcount("z", "-inf", "+inf") == 4
        client.zrangebylex.assert_awaited_once_with("i", "[a:", "[a:\xff")

    @pytest.mark.asyncio
    async def test_redis_error_wrapped(self, client: MagicMock) -> None:
        client.get = AsyncMock(side_effect=ConnectionError("down"))

        with pytest.raises(StoreError, match="down"):
            await RedisStore(client).get("k")

    @pytest.mark.asyncio
    async def test_close_closes_client(self, client: MagicMock) -> None:
        client.aclose = AsyncMock()

        await RedisStore(client).close()

        client.aclose.assert_awaited_once()


class TestRedisStoreBatch:
    @pytest.mark.asyncio
    async def test_batch_runs_in_transaction(self, client: MagicMock, pipe: MagicMock) -> None:
        pipe.execute.return_value = [1, True]
        store = RedisStore(client)

        result = await store.batch().hset("h", {"a": "1"}).set("k", "v").execute()

        assert result.results == [1, True]
        client.pipeline.assert_called_once_with(transaction=True)
        pipe.hset.assert_called_once_with("h", mapping={"a": "1"})
        pipe.set.assert_called_once_with("k", "v")
        pipe.execute.assert_awaited_once_with(raise_on_error=False)

    @pytest.mark.asyncio
    async def test_per_command_errors_become_store_errors(
        self, client: MagicMock, pipe: MagicMock
    ) -> None:
        pipe.execute.return_value = [ResponseError("WRONGTYPE"), 1]
        store = RedisStore(client)

        result = await store.batch().hgetall("k").zadd("z", 1.0, "m").execute(raise_on_error=False)

        assert isinstance(result.results[0], StoreError)
        assert result.results[1] == 1
        pipe.zadd.assert_called_once_with("z", {"m": 1.0})

    @pytest.mark.asyncio
    async def test_failed_submission_raises(self, client: MagicMock, pipe: MagicMock) -> None:
        pipe.execute.side_effect = ConnectionError("down")

        with pytest.raises(StoreError, match="down"):
            await RedisStore(client).batch().get("k").execute()


class TestCreateStore:
    def test_from_url_decodes_responses(self) -> None:
        with patch(
            "kvgraph.infrastructure.persistence.redis_store.redis.from_url"
        ) as mock_from_url:
            store = create_store(Settings(redis_url="redis://cache:6379/2"))

        mock_from_url.assert_called_once_with("redis://cache:6379/2", decode_responses=True)
        assert store.client is mock_from_url.return_value
