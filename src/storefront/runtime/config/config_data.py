"""Typed view of ``config.yaml``.

Each section of the file maps to one model below; :class:`ConfigData` is the
``config:`` root. Every field has a default so an empty file is a valid
development setup against the in-memory backend.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LOCAL_FRONTENDS = ["http://localhost:3000", "http://localhost:5173"]


class CORSConfig(BaseModel):
    """Browsers allowed to call the API with the session cookie."""

    origins: list[str] = Field(default_factory=lambda: list(LOCAL_FRONTENDS))
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    environment: Literal["development", "production", "test"] = "development"
    host: str = "localhost"
    port: int = 8000
    session_max_age: int = Field(
        default=3600, gt=0, description="Lifetime of an admin browser session, in seconds"
    )
    cors: CORSConfig = Field(default_factory=CORSConfig)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["json", "plain"] = Field(
        default="json", description="Format of the file sink; the console is always plain"
    )
    file: str | None = Field(default="logs/app.log", description="None disables the file sink")
    max_size_mb: int = Field(default=10, description="Rotate the file at this size")
    backup_count: int = Field(default=5, description="Rotated files kept")


class RedisConfig(BaseModel):
    """Optional shared store for browser sessions."""

    enabled: bool = False
    url: str = Field(default="", description="redis:// URL, credentials included")
    password: str | None = Field(
        default=None, description="Spliced into the URL when it carries none"
    )
    decode_responses: bool = True

    @property
    def connection_string(self) -> str:
        if not self.password or "@" in self.url or "://" not in self.url:
            return self.url
        scheme, rest = self.url.split("://", 1)
        return f"{scheme}://:{self.password}@{rest}"


class SupabaseConfig(BaseModel):
    """Supabase project credentials."""

    url: str = Field(default="", description="Supabase project URL")
    anon_key: str = Field(default="", description="Public anon API key")
    service_role_key: str | None = Field(
        default=None,
        description="Service-role key; required for user listing and deletion",
    )


class SeedUserConfig(BaseModel):
    """Account created in the in-memory backend at startup."""

    email: str
    password: str


class BackendConfig(BaseModel):
    """Backend-as-a-service selection."""

    provider: Literal["supabase", "memory"] = Field(
        default="memory", description="Which backend implementation to use"
    )
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    seed_users: list[SeedUserConfig] = Field(
        default_factory=list,
        description="Accounts created when the in-memory backend starts",
    )


class StoreConfig(BaseModel):
    """Storefront behaviour."""

    whatsapp_number: str = Field(
        default="1234567890",
        description="Ordering contact, country code without '+'",
    )
    featured_limit: int = Field(
        default=4, ge=0, description="Maximum featured products shown in the gallery"
    )


class SecurityConfig(BaseModel):
    """Session cookie attributes."""

    session_cookie_name: str = "storefront_session"
    secure_cookies: bool = Field(
        default=True, description="Mark the cookie Secure; only honoured in production"
    )
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"


class ConfigData(BaseModel):
    """The ``config:`` root of ``config.yaml``."""

    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
