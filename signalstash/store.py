"""Redis time-series storage and shared application state."""

from __future__ import annotations

from dataclasses import dataclass

import redis.asyncio

REDIS_CMD_TS_ADD = "TS.ADD"
PING_CMD = "PING"
PONG_CMD = "PONG"
REDIS_LABEL_DEVICE_ID = "device_id"
REDIS_LABEL_DOMAIN = "domain"
REDIS_LABELS_LABEL = "labels"


class RedisStore:
    """A handle on a Redis server holding sensor time series."""

    def __init__(self, url: str) -> None:
        """Parse the URL; raises ValueError if it is not a Redis URL. No connection is made yet."""
        self._client = redis.asyncio.from_url(url, decode_responses=True)

    async def connection(self) -> redis.asyncio.Redis:
        """Return a pooled client for issuing commands."""
        return self._client

    async def check_connectivity(self) -> None:
        """Ping the server; raise if it cannot be reached or answers unexpectedly."""
        conn = await self.connection()
        pong = await conn.execute_command(PING_CMD)
        if pong is True or pong == PONG_CMD:
            return
        raise RuntimeError(f"Unexpected PING response: {pong}")

    async def ts_add(
        self, key: str, timestamp: int, datum: float, device_id: str, domain: str
    ) -> None:
        """Append a sample to a time series, labelling it with device and domain."""
        conn = await self.connection()
        await conn.execute_command(
            REDIS_CMD_TS_ADD,
            key,
            timestamp,
            datum,
            REDIS_LABELS_LABEL,
            REDIS_LABEL_DEVICE_ID,
            device_id,
            REDIS_LABEL_DOMAIN,
            domain,
        )


@dataclass(frozen=True)
class AppState:
    """State shared by all request handlers."""

    redis: RedisStore
    sensor_datum_prefix: str