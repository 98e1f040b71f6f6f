"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every value can be overridden by an environment variable of the same name
    - Ledger policy values are validated at startup: a negative starting balance
      or a non-positive deadline never reaches the engines
    - get_settings() is cached (lru_cache): one Settings instance per process

Design Decisions:
    - Development defaults for everything, including the signing key; production
      deployments must set JWT_SIGNING_KEY
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Ledger store
    database_url: str = "postgresql+asyncpg://merchshop:merchshop@db:5432/merchshop"
    database_pool_size: int = Field(default=20, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)

    # Auth
    jwt_signing_key: str = Field(default="merchshop-dev-signing-key", min_length=1)
    jwt_token_ttl_minutes: int = Field(default=24 * 60, gt=0)

    # Coins granted on first sign-in
    starting_balance: int = Field(default=1000, ge=0)

    # Serialization conflicts
    conflict_max_retries: int = Field(default=3, ge=0)
    conflict_base_delay_ms: int = Field(default=25, ge=1)
    conflict_max_delay_ms: int = Field(default=1000, ge=1)
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    cors_origins: list[str] = ["http://localhost:3000"]

    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, v: str) -> str:
        """Bare postgresql:// URLs select psycopg2; the engine needs asyncpg."""
        for prefix in ("postgres://", "postgresql://"):
            if isinstance(v, str) and v.startswith(prefix):
                return "postgresql+asyncpg://" + v[len(prefix):]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
