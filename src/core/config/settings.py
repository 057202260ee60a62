#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
screenshot gateway. All configuration is centralized here to ensure
consistency across modules.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Secrets held as SecretStr so they never render in logs or reprs
- Easy testing with override mechanisms

Author: System Architect
Date: 2025-12-05
"""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """
    Redis configuration for the shared artifact store.

    STAGE-0.1: Redis connection configuration
    """

    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum pooled connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class UpstreamSettings(BaseSettings):
    """
    Rendering service configuration.

    STAGE-0.2: Upstream (Browser Rendering API) configuration
    """

    UPSTREAM_BASE_URL: str = Field(
        default="https://api.cloudflare.com/client/v4",
        description="Base URL of the rendering API",
    )
    CF_ACCOUNT_ID: str = Field(default="", description="Account that owns the rendering quota")
    CF_API_TOKEN: SecretStr = Field(default=SecretStr(""), description="Bearer token for the rendering API")
    UPSTREAM_TIMEOUT: float = Field(
        default=60.0, description="HTTP timeout for one render call (seconds)"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class SecuritySettings(BaseSettings):
    """
    Request signing configuration.

    STAGE-0.3: Shared secret used by the signature verifier
    """

    SCREENSHOT_SECRET: SecretStr = Field(
        default=SecretStr(""), description="Shared HMAC secret for signed requests"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CacheSettings(BaseSettings):
    """
    Artifact cache configuration.

    STAGE-4: Cache backend and TTL configuration
    """

    CACHE_BACKEND: Literal["redis", "memory"] = Field(
        default="redis", description="Artifact store backend"
    )
    CACHE_ARTIFACT_TTL: int = Field(
        default=31_536_000, description="Artifact TTL in the store (seconds, 0 = no expiry)"
    )
    CACHE_L1_MAX_SIZE: int = Field(default=256, description="In-process LRU max artifacts")
    CACHE_KEY_NAMESPACE: str = Field(
        default="localhost", description="Host suffix of derived cache-key URIs"
    )
    SINGLE_FLIGHT_ENABLED: bool = Field(
        default=True, description="Collapse concurrent misses for the same key"
    )
    BACKGROUND_DRAIN_TIMEOUT: float = Field(
        default=10.0, description="Seconds to wait for pending cache writes on shutdown"
    )
    REQUEST_TIMEOUT: float = Field(
        default=0.0, description="Overall upstream wait deadline (seconds, 0 disables)"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Screenshot Gateway", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from src.core.config.settings import get_settings

        settings = get_settings()
        redis_host = settings.redis.REDIS_HOST
        secret = settings.security.SCREENSHOT_SECRET.get_secret_value()
    """

    # Redis settings
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum pooled connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    # Upstream settings
    UPSTREAM_BASE_URL: str = Field(
        default="https://api.cloudflare.com/client/v4",
        description="Base URL of the rendering API",
    )
    CF_ACCOUNT_ID: str = Field(default="", description="Account that owns the rendering quota")
    CF_API_TOKEN: SecretStr = Field(default=SecretStr(""), description="Bearer token for the rendering API")
    UPSTREAM_TIMEOUT: float = Field(default=60.0, description="HTTP timeout for one render call (seconds)")

    # Security settings
    SCREENSHOT_SECRET: SecretStr = Field(
        default=SecretStr(""), description="Shared HMAC secret for signed requests"
    )

    # Cache settings
    CACHE_BACKEND: Literal["redis", "memory"] = Field(default="redis", description="Artifact store backend")
    CACHE_ARTIFACT_TTL: int = Field(
        default=31_536_000, description="Artifact TTL in the store (seconds, 0 = no expiry)"
    )
    CACHE_L1_MAX_SIZE: int = Field(default=256, description="In-process LRU max artifacts")
    CACHE_KEY_NAMESPACE: str = Field(default="localhost", description="Host suffix of derived cache-key URIs")
    SINGLE_FLIGHT_ENABLED: bool = Field(default=True, description="Collapse concurrent misses for the same key")
    BACKGROUND_DRAIN_TIMEOUT: float = Field(
        default=10.0, description="Seconds to wait for pending cache writes on shutdown"
    )
    REQUEST_TIMEOUT: float = Field(default=0.0, description="Overall upstream wait deadline (seconds, 0 disables)")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Screenshot Gateway", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    # Nested configuration views
    @property
    def redis(self) -> RedisSettings:
        """Get Redis settings."""
        return RedisSettings(
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_MAX_CONNECTIONS=self.REDIS_MAX_CONNECTIONS,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
            REDIS_HEALTH_CHECK_INTERVAL=self.REDIS_HEALTH_CHECK_INTERVAL,
        )

    @property
    def upstream(self) -> UpstreamSettings:
        """Get rendering service settings."""
        return UpstreamSettings(
            UPSTREAM_BASE_URL=self.UPSTREAM_BASE_URL,
            CF_ACCOUNT_ID=self.CF_ACCOUNT_ID,
            CF_API_TOKEN=self.CF_API_TOKEN,
            UPSTREAM_TIMEOUT=self.UPSTREAM_TIMEOUT,
        )

    @property
    def security(self) -> SecuritySettings:
        """Get request signing settings."""
        return SecuritySettings(SCREENSHOT_SECRET=self.SCREENSHOT_SECRET)

    @property
    def cache(self) -> CacheSettings:
        """Get cache settings."""
        return CacheSettings(
            CACHE_BACKEND=self.CACHE_BACKEND,
            CACHE_ARTIFACT_TTL=self.CACHE_ARTIFACT_TTL,
            CACHE_L1_MAX_SIZE=self.CACHE_L1_MAX_SIZE,
            CACHE_KEY_NAMESPACE=self.CACHE_KEY_NAMESPACE,
            SINGLE_FLIGHT_ENABLED=self.SINGLE_FLIGHT_ENABLED,
            BACKGROUND_DRAIN_TIMEOUT=self.BACKGROUND_DRAIN_TIMEOUT,
            REQUEST_TIMEOUT=self.REQUEST_TIMEOUT,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> ApplicationSettings:
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.3: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (secret rotation, tests).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
