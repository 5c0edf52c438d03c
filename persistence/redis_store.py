from __future__ import annotations

import logging
from typing import Any

from redis import asyncio as aioredis
from redis.commands.json.path import Path as JsonPath
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from .errors import DocumentDecodeError, StoreUnavailableError
from .interfaces import DocumentStore

logger = logging.getLogger(__name__)


class RedisJsonDocumentStore(DocumentStore):
    """
    Stores each document as a RedisJSON value under its own key.

    - get/set always address the whole document (root path).
    - keys() walks SCAN rather than KEYS so enumeration never blocks the server.
    - Transport failures surface as StoreUnavailableError; a key holding something
      that is not a JSON object surfaces as DocumentDecodeError.
    """

    def __init__(self, client: aioredis.Redis):
        self._client = client

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        socket_timeout: float | None = 5.0,
        socket_connect_timeout: float | None = 5.0,
    ) -> "RedisJsonDocumentStore":
        client = aioredis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_connect_timeout,
        )
        return cls(client)

    @property
    def client(self) -> aioredis.Redis:
        return self._client

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            doc = await self._client.json().get(key, JsonPath.root_path())
        except ResponseError as e:
            if "WRONGTYPE" in str(e):
                raise DocumentDecodeError(key, "key does not hold a JSON document") from e
            raise StoreUnavailableError(f"JSON.GET {key} failed: {e}") from e
        except ValueError as e:
            raise DocumentDecodeError(key, str(e)) from e
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailableError(f"redis unreachable during JSON.GET {key}: {e}") from e
        except RedisError as e:
            raise StoreUnavailableError(f"JSON.GET {key} failed: {e}") from e

        if doc is None:
            return None
        if not isinstance(doc, dict):
            raise DocumentDecodeError(key, f"expected a JSON object, got {type(doc).__name__}")
        return doc

    async def set(self, key: str, doc: dict[str, Any]) -> None:
        try:
            await self._client.json().set(key, JsonPath.root_path(), doc)
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailableError(f"redis unreachable during JSON.SET {key}: {e}") from e
        except RedisError as e:
            raise StoreUnavailableError(f"JSON.SET {key} failed: {e}") from e

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self._client.delete(*keys))
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailableError(f"redis unreachable during DEL: {e}") from e
        except RedisError as e:
            raise StoreUnavailableError(f"DEL failed: {e}") from e

    async def keys(self, prefix: str) -> list[str]:
        # SCAN may return a key more than once; keep first-seen order.
        seen: dict[str, None] = {}
        try:
            async for key in self._client.scan_iter(match=f"{prefix}*"):
                seen.setdefault(key, None)
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailableError(f"redis unreachable during SCAN {prefix}*: {e}") from e
        except RedisError as e:
            raise StoreUnavailableError(f"SCAN {prefix}* failed: {e}") from e
        return list(seen)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("redis ping failed: %r", e)
            return False

    async def close(self) -> None:
        await self._client.aclose()
