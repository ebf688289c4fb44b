# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Process configuration, read from the environment and ``.env``.

Each concern is its own settings section so it can be built on its own in
tests (``TokenConfig(secret=...)``) while ``AppConfig`` assembles them all.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ENV = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore",
                          validate_by_name=True)

_PLACEHOLDER_SECRETS = {"dev", "development", "test", "secret", "change-me", "changeme"}
_MIN_PRODUCTION_SECRET_LENGTH = 32
_HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class LoggingConfig(BaseSettings):
    model_config = _ENV

    level: str = Field("INFO", alias="LOG_LEVEL")
    debug: bool = Field(False, alias="DEBUG_LOGGING")
    # Unset: <package>/instance/app.log
    file: str | None = Field(None, alias="LOG_FILE")
    rotation: str = Field("10 MB", alias="LOG_ROTATION")
    retention: str = Field("14 days", alias="LOG_RETENTION")
    json_file: bool = Field(False, alias="LOG_JSON")

    @property
    def effective_level(self) -> str:
        return "DEBUG" if self.debug else self.level.upper()


class DatabaseConfig(BaseSettings):
    model_config = _ENV

    url: str = Field("sqlite:///authcore.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")


class TokenConfig(BaseSettings):
    """Signing material. Frozen: the secret cannot change after startup."""

    model_config = SettingsConfigDict(**_ENV, frozen=True)

    secret: str | None = Field(None, alias="JWT_SECRET")
    ttl_seconds: int = Field(24 * 60 * 60, ge=1, alias="TOKEN_TTL_SECONDS")
    leeway_seconds: int = Field(60, ge=0, alias="TOKEN_LEEWAY_SECONDS")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")

    @field_validator("algorithm")
    @classmethod
    def _hmac_only(cls, value: str) -> str:
        value = value.upper()
        if value not in _HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(_HMAC_ALGORITHMS)}")
        return value


class HasherConfig(BaseSettings):
    model_config = _ENV

    # Argon2id cost; None keeps the argon2-cffi default.
    time_cost: int | None = Field(None, ge=1, alias="HASHER_TIME_COST")
    memory_cost: int | None = Field(None, ge=8, alias="HASHER_MEMORY_COST")
    parallelism: int | None = Field(None, ge=1, alias="HASHER_PARALLELISM")

    # Worker pool
    workers: int = Field(4, ge=1, alias="HASHER_WORKERS")
    queue_size: int = Field(32, ge=0, alias="HASHER_QUEUE_SIZE")
    queue_timeout: float = Field(5.0, ge=0.0, alias="HASHER_QUEUE_TIMEOUT")
    task_timeout: float = Field(30.0, ge=0.1, alias="HASHER_TASK_TIMEOUT")


class SecurityConfig(BaseSettings):
    model_config = _ENV

    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, gt=0, alias="RL_WINDOW")
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(**_ENV, validate_assignment=True)

    app_env: str = Field("development", alias="APP_ENV")
    host: str = Field("127.0.0.1", alias="HOST")
    port: int = Field(8080, ge=1, le=65535, alias="PORT")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    token: TokenConfig = Field(default_factory=TokenConfig)
    hasher: HasherConfig = Field(default_factory=HasherConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    @model_validator(mode="after")
    def _refuse_weak_secret_in_production(self) -> "AppConfig":
        if not self.is_production():
            return self

        # shared.errors imports this module.
        from authcore.shared.errors.base import ConfigError

        secret = self.token.secret or ""
        if secret.lower() in _PLACEHOLDER_SECRETS or len(secret) < _MIN_PRODUCTION_SECRET_LENGTH:
            raise ConfigError(
                "insecure_jwt_secret",
                hint="JWT_SECRET must be a random value of at least "
                f"{_MIN_PRODUCTION_SECRET_LENGTH} characters in production",
            )
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "HasherConfig",
    "LoggingConfig",
    "SecurityConfig",
    "TokenConfig",
    "load_config",
]
