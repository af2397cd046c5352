"""Session storage backends."""

from .session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
    SessionStorage,
    SessionStorageError,
    create_session_storage,
)

__all__ = [
    "InMemorySessionStorage",
    "RedisSessionStorage",
    "SessionStorage",
    "SessionStorageError",
    "create_session_storage",
]
