# backend/outbound_impact/core/config.py

from __future__ import annotations

from functools import lru_cache
from typing import Literal
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_SCHEMES = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "postgresql+asyncpg": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
    "sqlite+aiosqlite": "sqlite+aiosqlite",
}


_LIBPQ_ONLY_PARAMS = frozenset({"sslmode", "channel_binding"})


def _drop_libpq_params(url: str) -> str:
    # libpq-style TLS params would reach asyncpg.connect() as unknown kwargs;
    # TLS is configured through connect_args instead
    parts = urlsplit(url)
    if not parts.query:
        return url
    kept = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in _LIBPQ_ONLY_PARAMS]
    return urlunsplit(parts._replace(query=urlencode(kept)))


def _query_param(url: str, name: str) -> str | None:
    for k, v in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if k == name:
            return v
    return None


def to_async_url(url: str) -> str:
    """
    Hosted providers hand out postgres:// or postgresql:// URLs.
    Rewrite the scheme to the async driver SQLAlchemy should use.
    """
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ValueError("DATABASE_URL must look like <scheme>://...")
    driver = _ASYNC_SCHEMES.get(scheme.lower())
    if driver is None:
        raise ValueError(
            f"Unsupported DATABASE_URL scheme {scheme!r}. "
            f"Allowed: {', '.join(sorted(_ASYNC_SCHEMES))}"
        )
    return f"{driver}://{rest}"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------
    # Environment
    # -----------------------------
    # Use: development | staging | production
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    DATABASE_URL: str

    # strict: verify certificate + host name
    # permissive: encrypted, certificate not verified (self-signed managed hosts)
    DATABASE_SSL: Literal["strict", "permissive"] = "strict"
    ALLOW_PERMISSIVE_SSL: bool = False
    DATABASE_CONNECT_TIMEOUT: float = 30.0

    # -----------------------------
    # Passwords
    # -----------------------------
    BCRYPT_ROUNDS: int = 12

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return _drop_libpq_params(to_async_url(self.DATABASE_URL.strip()))

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL_ASYNC.startswith("sqlite")

    @property
    def ssl_disabled(self) -> bool:
        # sslmode=disable in the URL is the explicit opt-out for local servers
        return (_query_param(self.DATABASE_URL, "sslmode") or "").lower() == "disable"

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        env = (self.ENVIRONMENT or "").strip().lower()

        # Validates the scheme early so a typo fails before any connect attempt.
        to_async_url(self.DATABASE_URL.strip())

        if env in {"staging", "production"}:
            if self.DATABASE_SSL == "permissive" and not self.ALLOW_PERMISSIVE_SSL:
                raise ValueError(
                    "DATABASE_SSL=permissive is refused in staging/production "
                    "unless ALLOW_PERMISSIVE_SSL=true."
                )

        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            raise ValueError(f"BCRYPT_ROUNDS must be between 4 and 31, got {self.BCRYPT_ROUNDS}.")


@lru_cache
def get_settings() -> Settings:
    """
    Built on first use, not at import time: the CLIs validate their
    arguments before the environment is consulted.
    """
    return Settings()
