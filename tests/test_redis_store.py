from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from persistence.errors import DocumentDecodeError, StoreUnavailableError
from persistence.redis_store import RedisJsonDocumentStore


def _fake_client(scan_keys: list[str] | None = None) -> MagicMock:
    client = MagicMock()
    json_cmds = MagicMock()
    json_cmds.get = AsyncMock(return_value=None)
    json_cmds.set = AsyncMock(return_value=True)
    client.json.return_value = json_cmds
    client.delete = AsyncMock(return_value=0)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()

    async def _scan_iter(match=None, **kwargs):
        for key in scan_keys or []:
            yield key

    client.scan_iter = MagicMock(side_effect=_scan_iter)
    return client


def test_get_returns_document_or_none():
    async def _run():
        client = _fake_client()
        store = RedisJsonDocumentStore(client)

        assert await store.get("voter:1") is None

        client.json.return_value.get.return_value = {"VoterId": 1}
        assert await store.get("voter:1") == {"VoterId": 1}
        client.json.return_value.get.assert_awaited_with("voter:1", ".")

    asyncio.run(_run())


def test_set_writes_whole_document_at_root():
    async def _run():
        client = _fake_client()
        store = RedisJsonDocumentStore(client)
        doc = {"VoterId": 1, "Name": "A", "Email": "a@x", "VoteHistory": []}
        await store.set("voter:1", doc)
        client.json.return_value.set.assert_awaited_once_with("voter:1", ".", doc)

    asyncio.run(_run())


def test_delete_counts_and_skips_empty_call():
    async def _run():
        client = _fake_client()
        store = RedisJsonDocumentStore(client)

        assert await store.delete() == 0
        client.delete.assert_not_awaited()

        client.delete.return_value = 2
        assert await store.delete("voter:1", "voter:2") == 2
        client.delete.assert_awaited_once_with("voter:1", "voter:2")

    asyncio.run(_run())


def test_keys_scans_prefix_without_duplicates():
    async def _run():
        client = _fake_client(scan_keys=["voter:1", "voter:2", "voter:1", "voter:3"])
        store = RedisJsonDocumentStore(client)
        assert await store.keys("voter:") == ["voter:1", "voter:2", "voter:3"]
        client.scan_iter.assert_called_once_with(match="voter:*")

    asyncio.run(_run())


@pytest.mark.parametrize("exc", [RedisConnectionError("refused"), RedisTimeoutError("slow")])
def test_transport_errors_become_store_unavailable(exc):
    async def _run():
        client = _fake_client()
        client.json.return_value.get.side_effect = exc
        client.json.return_value.set.side_effect = exc
        client.delete.side_effect = exc
        store = RedisJsonDocumentStore(client)

        with pytest.raises(StoreUnavailableError):
            await store.get("voter:1")
        with pytest.raises(StoreUnavailableError):
            await store.set("voter:1", {})
        with pytest.raises(StoreUnavailableError):
            await store.delete("voter:1")

    asyncio.run(_run())


def test_wrong_type_key_is_decode_error():
    async def _run():
        client = _fake_client()
        client.json.return_value.get.side_effect = ResponseError(
            "WRONGTYPE Operation against a key holding the wrong kind of value"
        )
        store = RedisJsonDocumentStore(client)
        with pytest.raises(DocumentDecodeError):
            await store.get("voter:1")

    asyncio.run(_run())


def test_non_object_document_is_decode_error():
    async def _run():
        client = _fake_client()
        client.json.return_value.get.return_value = [1, 2, 3]
        store = RedisJsonDocumentStore(client)
        with pytest.raises(DocumentDecodeError):
            await store.get("voter:1")

    asyncio.run(_run())


def test_ping_never_raises_and_close_releases_client():
    async def _run():
        client = _fake_client()
        store = RedisJsonDocumentStore(client)
        assert await store.ping() is True

        client.ping.side_effect = RedisConnectionError("down")
        assert await store.ping() is False

        await store.close()
        client.aclose.assert_awaited_once()

    asyncio.run(_run())


def test_from_url_builds_client_without_connecting():
    store = RedisJsonDocumentStore.from_url("redis://localhost:6379/0", socket_timeout=1.0)
    pool_kwargs = store.client.connection_pool.connection_kwargs
    assert pool_kwargs["host"] == "localhost"
    assert pool_kwargs["socket_timeout"] == 1.0
    assert pool_kwargs["decode_responses"] is True
