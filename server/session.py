"""Session storage with Redis backend and in-memory fallback."""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from redis.exceptions import RedisError

from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key, salt="fairjack-session")

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to the session TTL)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session.ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionStore(ABC):
    """
    Key-value store of serialized GameSessions, keyed by raw session id.

    Implementations must give read-your-writes consistency for one id.
    """

    @abstractmethod
    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Stored data for `session_id`, or None when absent or expired."""

    @abstractmethod
    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Store `data`, replacing any previous value; expires after `ttl` seconds."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Forget a session. Unknown ids are ignored."""

    @abstractmethod
    async def exists(self, session_id: str) -> bool:
        """Whether a live session is stored under `session_id`."""

    async def get_or_create(
        self,
        session_id: str,
        default_factory: Callable[[], dict[str, Any]],
    ) -> tuple[dict[str, Any], bool]:
        """
        Load a session, creating it from `default_factory` when absent.

        Returns:
            The session data and whether it was just created
        """
        data = await self.get(session_id)
        if data is not None:
            return data, False

        data = default_factory()
        await self.set(session_id, data)
        return data, True

    def create_session_id(self) -> str:
        """Create a new raw session ID."""
        return str(uuid4())


class InMemorySessionStore(SessionStore):
    """
    Process-local store for development and tests.

    Entries are kept as JSON text so every read hands back a fresh copy.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, float]] = {}

    def _live(self, session_id: str) -> str | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        payload, deadline = entry
        if deadline <= time.monotonic():
            del self._entries[session_id]
            return None
        return payload

    async def get(self, session_id: str) -> dict[str, Any] | None:
        payload = self._live(session_id)
        return json.loads(payload) if payload is not None else None

    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        deadline = time.monotonic() + (ttl or config.session.ttl)
        self._entries[session_id] = (json.dumps(data), deadline)

    async def delete(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    async def exists(self, session_id: str) -> bool:
        return self._live(session_id) is not None

    async def cleanup_expired(self) -> int:
        """Drop every expired entry and return how many went."""
        now = time.monotonic()
        stale = [sid for sid, (_, deadline) in self._entries.items() if deadline <= now]
        for sid in stale:
            del self._entries[sid]
        if stale:
            logger.debug("Evicted %d expired sessions", len(stale))
        return len(stale)

    async def sweep_forever(self, interval: float) -> None:
        """Run `cleanup_expired` every `interval` seconds until cancelled."""
        while True:
            await asyncio.sleep(interval)
            await self.cleanup_expired()


class RedisSessionStore(SessionStore):
    """Sessions as JSON strings under `fairjack:session:<id>`, expired by Redis."""

    KEY_PREFIX = "fairjack:session:"

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client

    def _key(self, session_id: str) -> str:
        return self.KEY_PREFIX + session_id

    async def get(self, session_id: str) -> dict[str, Any] | None:
        raw = await self._redis.get(self._key(session_id))
        return json.loads(raw) if raw is not None else None

    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        await self._redis.setex(self._key(session_id), ttl or config.session.ttl, json.dumps(data))

    async def delete(self, session_id: str) -> None:
        await self._redis.delete(self._key(session_id))

    async def exists(self, session_id: str) -> bool:
        return bool(await self._redis.exists(self._key(session_id)))


# Global session store instance
_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """Get or create the configured session store."""
    global _session_store

    if _session_store is not None:
        return _session_store

    if config.session.backend == "redis":
        redis_client = redis.from_url(config.redis.url)
        try:
            await redis_client.ping()
        except (RedisError, OSError) as exc:
            logger.warning("Redis unavailable at %s (%s); using in-memory sessions", config.redis.url, exc)
        else:
            logger.info("Using Redis session store at %s", config.redis.url)
            _session_store = RedisSessionStore(redis_client)
            return _session_store

    _session_store = InMemorySessionStore()
    return _session_store


def set_session_store(store: SessionStore | None) -> None:
    """Replace the global session store (None resets to the configured one)."""
    global _session_store
    _session_store = store


def extract_session_id(token: str | None) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    if not token:
        return None
    signer = get_session_signer()
    return signer.unsign(token)
