# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class _EnvGroup(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


class DatabaseConfig(_EnvGroup):
    url: str = Field("sqlite:///authapi.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")


class CacheConfig(_EnvGroup):
    backend: Literal["redis", "memory"] = Field("memory", alias="CACHE_BACKEND")
    redis_url: str = Field("redis://localhost:6379/0", alias="REDIS_URL")
    # Minutes a session record lives in the cache after login.
    session_ttl_minutes: int = Field(60, ge=1, alias="SESSION_CACHE_EXPIRES_IN")
    store_full_snapshot: bool = Field(False, alias="SESSION_STORE_FULL_SNAPSHOT")

    @field_validator("store_full_snapshot", mode="before")
    @classmethod
    def _parse_snapshot_flag(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class TokenConfig(_EnvGroup):
    # Keys are PEM documents, either raw or base64-encoded.
    access_private_key: str = Field("", alias="ACCESS_TOKEN_PRIVATE_KEY")
    access_public_key: str = Field("", alias="ACCESS_TOKEN_PUBLIC_KEY")
    refresh_private_key: str = Field("", alias="REFRESH_TOKEN_PRIVATE_KEY")
    refresh_public_key: str = Field("", alias="REFRESH_TOKEN_PUBLIC_KEY")
    access_ttl_minutes: int = Field(15, ge=1, alias="ACCESS_TOKEN_EXPIRES_IN")
    refresh_ttl_minutes: int = Field(60, ge=1, alias="REFRESH_TOKEN_EXPIRES_IN")
    algorithm: str = Field("RS256", alias="JWT_ALGORITHM")

    def has_keys(self) -> bool:
        return all(
            (
                self.access_private_key,
                self.access_public_key,
                self.refresh_private_key,
                self.refresh_public_key,
            )
        )


class SecurityConfig(_EnvGroup):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    # werkzeug method string, e.g. "scrypt" or "pbkdf2:sha256:600000"
    password_hash_method: str = Field("scrypt", alias="PASSWORD_HASH_METHOD")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _cache_config_factory() -> CacheConfig:
    return CacheConfig()  # type: ignore[call-arg]


def _token_config_factory() -> TokenConfig:
    return TokenConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    port: int = Field(8000, ge=1, le=65535, alias="PORT")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    cache: CacheConfig = Field(default_factory=_cache_config_factory)
    tokens: TokenConfig = Field(default_factory=_token_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if not self.tokens.has_keys():
            print(
                "\n❌ CRITICAL SECURITY ERROR: token signing keys are missing in production!\n"
                "   Set ACCESS_TOKEN_PRIVATE_KEY, ACCESS_TOKEN_PUBLIC_KEY,\n"
                "   REFRESH_TOKEN_PRIVATE_KEY and REFRESH_TOKEN_PUBLIC_KEY.\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if self.cache.backend == "memory":
            warnings.append("⚠️  Sessions live in process memory (set CACHE_BACKEND=redis)")
        if self.cache.store_full_snapshot:
            warnings.append("⚠️  Session records include the password hash")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "CacheConfig",
    "DatabaseConfig",
    "SecurityConfig",
    "TokenConfig",
    "load_config",
]
