"""Backend capability layer: interface, implementations and factory."""

from loguru import logger

from src.storefront.runtime.config.config_data import BackendConfig

from .base import AuthEvent, AuthListener, StoreBackend
from .errors import (
    AdminCredentialsMissing,
    AuthenticationError,
    BackendError,
    UniqueViolationError,
)
from .memory import InMemoryBackend


async def create_backend(config: BackendConfig) -> StoreBackend:
    """Build the configured backend.

    The in-memory backend is seeded with ``config.seed_users`` so a development
    server has an account to sign in with.
    """
    if config.provider == "supabase":
        from .supabase_backend import SupabaseBackend

        return await SupabaseBackend.connect(config.supabase)

    backend = InMemoryBackend()
    for seed in config.seed_users:
        await backend.sign_up(seed.email, seed.password)
        logger.info("Seeded in-memory user {}", seed.email)
    logger.warning("Using in-memory backend; data is lost on restart")
    return backend


__all__ = [
    "AdminCredentialsMissing",
    "AuthEvent",
    "AuthListener",
    "AuthenticationError",
    "BackendError",
    "InMemoryBackend",
    "StoreBackend",
    "UniqueViolationError",
    "create_backend",
]
