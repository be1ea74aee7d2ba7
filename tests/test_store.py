from unittest.mock import AsyncMock, patch

import pytest
import redis.exceptions

from signalstash.store import AppState, RedisStore


def test_invalid_url_raises():
    with pytest.raises(ValueError):
        RedisStore("notaurl")


def test_app_state_holds_values():
    store = RedisStore("redis://localhost:6379")
    state = AppState(redis=store, sensor_datum_prefix="test-prefix")
    assert state.redis is store
    assert state.sensor_datum_prefix == "test-prefix"


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [True, "PONG"])
async def test_check_connectivity_accepts_pong(reply):
    store = RedisStore("redis://localhost:6379")
    with patch(
        "redis.asyncio.Redis.execute_command", new_callable=AsyncMock
    ) as execute:
        execute.return_value = reply
        result = await store.check_connectivity()
    assert result is None
    assert execute.await_count == 1
    assert execute.await_args.args == ("PING",)


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [False, "NOPE"])
async def test_check_connectivity_rejects_other_reply(reply):
    store = RedisStore("redis://localhost:6379")
    with patch(
        "redis.asyncio.Redis.execute_command", new_callable=AsyncMock
    ) as execute:
        execute.return_value = reply
        with pytest.raises(RuntimeError, match="Unexpected PING response"):
            await store.check_connectivity()


@pytest.mark.asyncio
async def test_check_connectivity_unreachable_server():
    store = RedisStore("redis://localhost:1")
    with pytest.raises(redis.exceptions.ConnectionError):
        await store.check_connectivity()


@pytest.mark.asyncio
async def test_ts_add_sends_command_with_labels():
    store = RedisStore("redis://localhost:6379")
    with patch(
        "redis.asyncio.Redis.execute_command", new_callable=AsyncMock
    ) as execute:
        execute.return_value = 10
        result = await store.ts_add(
            "pfx:dev:SOUND_PRESSURE_LEVEL", 10, 1.5, "dev", "SOUND_PRESSURE_LEVEL"
        )
    assert result is None
    assert execute.await_count == 1
    assert execute.await_args.args == (
        "TS.ADD",
        "pfx:dev:SOUND_PRESSURE_LEVEL",
        10,
        1.5,
        "labels",
        "device_id",
        "dev",
        "domain",
        "SOUND_PRESSURE_LEVEL",
    )


@pytest.mark.asyncio
async def test_ts_add_propagates_errors():
    store = RedisStore("redis://localhost:6379")
    with patch(
        "redis.asyncio.Redis.execute_command",
        new_callable=AsyncMock,
        side_effect=redis.exceptions.ResponseError("unknown command"),
    ):
        with pytest.raises(redis.exceptions.ResponseError):
            await store.ts_add("k", 1, 2.0, "dev", "UNSPECIFIED")


@pytest.mark.asyncio
async def test_connection_is_reused():
    store = RedisStore("redis://localhost:6379")
    first = await store.connection()
    second = await store.connection()
    assert first is second