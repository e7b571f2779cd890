"""Tests for session tokens and session stores."""

import asyncio
import pytest
import pytest_asyncio
import time
from contextlib import suppress
from unittest.mock import AsyncMock, patch

from redis.exceptions import ConnectionError as RedisConnectionError

import server.session as session_module
from server.session import (
    InMemorySessionStore,
    RedisSessionStore,
    SessionSigner,
    extract_session_id,
    get_session_signer,
    get_session_store,
    set_session_store,
)


class TestSessionSigner:
    """Tests for SessionSigner class."""

    def test_sign_and_unsign(self):
        signer = SessionSigner(secret_key="test-secret")

        token = signer.sign("session-456")

        assert token != "session-456"
        assert signer.unsign(token, max_age=3600) == "session-456"

    def test_unsign_invalid_token_returns_none(self):
        signer = SessionSigner(secret_key="test-secret")
        assert signer.unsign("invalid-token-data", max_age=3600) is None

    def test_unsign_wrong_secret_returns_none(self):
        token = SessionSigner(secret_key="secret-one").sign("session")
        assert SessionSigner(secret_key="secret-two").unsign(token, max_age=3600) is None

    def test_unsign_expired_token_returns_none(self):
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("session")
        original_time = time.time

        with patch("time.time", lambda: original_time() + 7200):
            assert signer.unsign(token, max_age=3600) is None

    def test_get_session_signer_returns_singleton(self):
        session_module._session_signer = None
        assert get_session_signer() is get_session_signer()

    def test_extract_session_id(self):
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("abc")

        with patch("server.session.get_session_signer", return_value=signer):
            assert extract_session_id(token) == "abc"

    def test_extract_session_id_missing_or_tampered(self):
        assert extract_session_id(None) is None
        assert extract_session_id("") is None
        assert extract_session_id("not-a-token") is None


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore class."""

    @pytest_asyncio.fixture
    async def store(self):
        return InMemorySessionStore()

    @pytest.mark.asyncio
    async def test_set_and_get_session(self, store):
        await store.set("s1", {"balance": "100"}, ttl=3600)
        assert await store.get("s1") == {"balance": "100"}

    @pytest.mark.asyncio
    async def test_get_returns_copy(self, store):
        """Mutating loaded data does not change the stored session."""
        await store.set("s1", {"cards": [1, 2]}, ttl=3600)

        loaded = await store.get("s1")
        loaded["cards"].append(3)

        assert await store.get("s1") == {"cards": [1, 2]}

    @pytest.mark.asyncio
    async def test_get_nonexistent_returns_none(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_delete_session(self, store):
        await store.set("s1", {"a": 1}, ttl=3600)
        await store.delete("s1")
        assert await store.get("s1") is None
        # Deleting twice is fine
        await store.delete("s1")

    @pytest.mark.asyncio
    async def test_exists(self, store):
        assert await store.exists("s1") is False
        await store.set("s1", {}, ttl=3600)
        assert await store.exists("s1") is True

    @pytest.mark.asyncio
    async def test_session_expiration(self, store):
        await store.set("s1", {"a": 1}, ttl=1)
        time.sleep(1.5)
        assert await store.get("s1") is None

    @pytest.mark.asyncio
    async def test_cleanup_expired(self, store):
        await store.set("short-1", {}, ttl=1)
        await store.set("short-2", {}, ttl=1)
        await store.set("long", {}, ttl=3600)
        time.sleep(1.5)

        assert await store.cleanup_expired() == 2
        assert await store.exists("long") is True

    @pytest.mark.asyncio
    async def test_get_or_create_creates_once(self, store):
        calls = []

        def factory():
            calls.append(1)
            return {"balance": "1000"}

        data, created = await store.get_or_create("s1", factory)
        assert created is True
        assert data == {"balance": "1000"}

        data, created = await store.get_or_create("s1", factory)
        assert created is False
        assert data == {"balance": "1000"}
        assert len(calls) == 1

    def test_create_session_id_is_uuid(self):
        session_id = InMemorySessionStore().create_session_id()
        assert len(session_id) == 36
        assert session_id.count("-") == 4


class TestRedisSessionStore:
    """Tests for RedisSessionStore against a mocked client."""

    @pytest.mark.asyncio
    async def test_set_uses_setex_with_prefix(self):
        client = AsyncMock()
        store = RedisSessionStore(client)

        await store.set("s1", {"a": 1}, ttl=60)

        client.setex.assert_awaited_once_with("fairjack:session:s1", 60, '{"a": 1}')

    @pytest.mark.asyncio
    async def test_get_decodes_json(self):
        client = AsyncMock()
        client.get.return_value = b'{"a": 1}'
        store = RedisSessionStore(client)

        assert await store.get("s1") == {"a": 1}

    @pytest.mark.asyncio
    async def test_get_missing(self):
        client = AsyncMock()
        client.get.return_value = None
        assert await RedisSessionStore(client).get("s1") is None


class TestGetSessionStore:
    """Tests for backend selection."""

    @pytest.mark.asyncio
    async def test_memory_backend_by_default(self):
        set_session_store(None)
        try:
            store = await get_session_store()
            assert isinstance(store, InMemorySessionStore)
            assert await get_session_store() is store
        finally:
            set_session_store(None)

    @pytest.mark.asyncio
    async def test_unreachable_redis_falls_back_to_memory(self):
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("refused")
        fake_config = type("Cfg", (), {})()
        fake_config.session = type("S", (), {"backend": "redis", "ttl": 60})()
        fake_config.redis = type("R", (), {"url": "redis://nowhere:6379/0"})()

        set_session_store(None)
        try:
            with patch.object(session_module, "config", fake_config), patch(
                "server.session.redis.from_url", return_value=client
            ):
                store = await get_session_store()
            assert isinstance(store, InMemorySessionStore)
        finally:
            set_session_store(None)


class TestExpirySweep:
    """Background eviction for the in-memory store."""

    @pytest.mark.asyncio
    async def test_sweep_forever_evicts_expired(self):
        store = InMemorySessionStore()
        await store.set("stale", {}, ttl=1)
        await store.set("live", {}, ttl=3600)

        sweeper = asyncio.create_task(store.sweep_forever(0.05))
        await asyncio.sleep(1.3)
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper

        assert "stale" not in store._entries
        assert "live" in store._entries
