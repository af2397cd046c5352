"""Where browser sessions live between requests.

Redis when it is configured and answers a ping, process memory otherwise.
Both stores keep a session only until its ``expires_at``.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

import redis.asyncio as redis
from loguru import logger
from pydantic import ValidationError
from redis.exceptions import RedisError

from src.storefront.core.models.session import UserSession
from src.storefront.runtime.config.config_data import RedisConfig

KEY_PREFIX = "storefront:session:"

# The in-memory store sweeps expired entries once per this many saves
SWEEP_EVERY = 100


class SessionStorageError(Exception):
    """The session store could not be reached."""


def _seconds_left(user_session: UserSession) -> int:
    return max(1, user_session.expires_at - int(time.time()))


class SessionStorage(ABC):
    """Persistence for :class:`UserSession` records, keyed by session id."""

    @abstractmethod
    async def save(self, user_session: UserSession) -> None:
        """Insert or replace a session. It disappears at its ``expires_at``."""

    @abstractmethod
    async def load(self, session_id: str) -> UserSession | None:
        """The stored session, or None if it is unknown, expired or unreadable."""

    @abstractmethod
    async def delete(self, session_id: str) -> None: ...

    @abstractmethod
    async def purge_expired(self) -> int:
        """Remove expired sessions; returns how many were removed."""

    @abstractmethod
    def is_available(self) -> bool: ...


class InMemorySessionStorage(SessionStorage):
    """Single-process store. Sessions are lost on restart."""

    def __init__(self) -> None:
        # session id -> (serialized session, expiry as epoch seconds)
        self._entries: dict[str, tuple[str, float]] = {}
        self._saves = 0

    async def save(self, user_session: UserSession) -> None:
        self._saves += 1
        if self._saves % SWEEP_EVERY == 0:
            await self.purge_expired()
        self._entries[user_session.id] = (
            user_session.model_dump_json(),
            time.time() + _seconds_left(user_session),
        )

    async def load(self, session_id: str) -> UserSession | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None

        payload, expires = entry
        if time.time() > expires:
            del self._entries[session_id]
            return None

        try:
            return UserSession.model_validate_json(payload)
        except ValidationError:
            logger.warning("Dropping unreadable session {}", session_id)
            del self._entries[session_id]
            return None

    async def delete(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    async def purge_expired(self) -> int:
        now = time.time()
        expired = [sid for sid, (_, expires) in self._entries.items() if now > expires]
        for session_id in expired:
            del self._entries[session_id]
        return len(expired)

    def is_available(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._entries)


class RedisSessionStorage(SessionStorage):
    """Sessions as JSON strings under ``storefront:session:<id>`` with a Redis TTL."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client
        self._available = True

    async def _call(self, operation: str, *args):
        try:
            result = await getattr(self._redis, operation)(*args)
        except (RedisError, OSError) as e:
            self._available = False
            raise SessionStorageError(f"Redis {operation} failed: {e}") from e
        self._available = True
        return result

    async def save(self, user_session: UserSession) -> None:
        await self._call(
            "setex",
            KEY_PREFIX + user_session.id,
            _seconds_left(user_session),
            user_session.model_dump_json(),
        )

    async def load(self, session_id: str) -> UserSession | None:
        payload = await self._call("get", KEY_PREFIX + session_id)
        if payload is None:
            return None
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")

        try:
            return UserSession.model_validate_json(payload)
        except ValidationError:
            logger.warning("Dropping unreadable session {}", session_id)
            await self.delete(session_id)
            return None

    async def delete(self, session_id: str) -> None:
        await self._call("delete", KEY_PREFIX + session_id)

    async def purge_expired(self) -> int:
        # Redis expires keys itself
        return 0

    def is_available(self) -> bool:
        return self._available

    async def ping(self) -> bool:
        try:
            await self._call("ping")
        except SessionStorageError:
            return False
        return True


async def create_session_storage(config: RedisConfig) -> SessionStorage:
    """Use Redis when configured and reachable, otherwise in-memory storage."""
    if not config.enabled or not config.url:
        logger.info("Redis not configured; using in-memory session storage")
        return InMemorySessionStorage()

    client = redis.from_url(
        config.connection_string,
        encoding="utf-8",
        decode_responses=config.decode_responses,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    storage = RedisSessionStorage(client)
    if await storage.ping():
        logger.info("Session storage: Redis at {}", config.url)
        return storage

    logger.warning("Redis at {} unavailable, using in-memory session storage", config.url)
    await client.aclose()
    return InMemorySessionStorage()
