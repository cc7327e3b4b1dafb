"""Redis backed key-value store."""
from __future__ import annotations

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ...config import Settings
from ...exceptions import BackendError
from .base import KeyValueBackend

LOGGER = logging.getLogger(__name__)


class RedisBackend(KeyValueBackend):
    """Keep one token per username as plain redis string keys."""

    name = "redis"

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisBackend":
        client = Redis.from_url(settings.redis.url, decode_responses=True)
        LOGGER.info(
            "Redis backend configured | host=%s port=%d db=%d",
            settings.redis.host,
            settings.redis.port,
            settings.redis.db,
        )
        return cls(client)

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(key, value)
        except RedisError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def delete(self, key: str) -> int:
        try:
            return int(await self._client.delete(key))
        except RedisError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def keys(self) -> list[str]:
        try:
            return [key async for key in self._client.scan_iter(match="*")]
        except RedisError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisBackend"]
