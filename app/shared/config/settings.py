# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and tells the plant catalog how to reach its database and cache, how long cached
# answers stay fresh, and which language to fall back to.
#
# 🧪 Purpose (Technical Summary):
# pydantic-settings BaseSettings for the catalog engine: store and pool sizing, Redis
# connection, one cache TTL per operation class, fallback language, search bounds and
# the default operation deadline. Cross-field rules are checked once at load time.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - app.shared.infrastructure.database (engine and pool sizing)
# - app.shared.config.redis (connection pool, TTL table)
# - app.modules.plant_catalog.application.engine (engine wiring)

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Largest page any search may request.
PAGE_SIZE_CEILING = 100

_CHOICES = {
    "ENVIRONMENT": frozenset({"development", "staging", "production", "test"}),
    "LOG_LEVEL": frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}),
    "LOG_FORMAT": frozenset({"json", "text"}),
}


class Settings(BaseSettings):
    """
    Catalog engine settings, read from the environment with a .env fallback.

    Every field has a default so an engine can be built without any environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Plant Catalog Engine", description="Application name")
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log output format (json or text)")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: Optional[str] = Field(None, description="Async SQLAlchemy connection URL")
    DB_HOST: str = Field(default="localhost", description="Database host")
    DB_PORT: int = Field(default=5432, description="Database port")
    DB_NAME: str = Field(default="plant_catalog", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="", description="Database password")

    # Connection Pool Settings
    DB_POOL_SIZE: int = Field(default=10, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database pool overflow")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time")
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements")

    # =========================================================================
    # REDIS CONFIGURATION
    # =========================================================================

    REDIS_URL: Optional[str] = Field(None, description="Redis URL")
    REDIS_HOST: str = Field(default="localhost", description="Redis host")
    REDIS_PORT: int = Field(default=6379, description="Redis port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: Optional[str] = Field(None, description="Redis password")
    REDIS_MAX_CONNECTIONS: int = Field(default=20, description="Redis connection pool size")
    REDIS_SOCKET_TIMEOUT: float = Field(default=5.0, description="Redis socket timeout (seconds)")

    # =========================================================================
    # CACHE SETTINGS
    # =========================================================================

    CACHE_ENABLED: bool = Field(default=True, description="Enable the read-through cache")
    CACHE_NAMESPACE: str = Field(default="catalog", description="Prefix for every cache key")
    CACHE_PLANT_TTL: int = Field(default=3600, description="Single plant / batch / names TTL")
    CACHE_SEARCH_TTL: int = Field(default=900, description="Search and count TTL")
    CACHE_COMPANION_TTL: int = Field(default=3600, description="Companion list TTL")
    CACHE_GROWING_CONDITIONS_TTL: int = Field(default=7200, description="Growing conditions TTL")
    CACHE_PHYSICAL_CHARACTERISTICS_TTL: int = Field(
        default=7200,
        description="Physical characteristics TTL"
    )
    LOOKUP_CACHE_TTL: int = Field(default=86400, description="Language/family/genus snapshot TTL")

    # =========================================================================
    # LOCALIZATION & SEARCH
    # =========================================================================

    DEFAULT_LANGUAGE: str = Field(default="en", description="Fallback language code")
    SEARCH_DEFAULT_LIMIT: int = Field(default=20, description="Default page size")
    SEARCH_MAX_QUERY_LENGTH: int = Field(default=200, description="Longest free-text query")

    DEFAULT_OPERATION_TIMEOUT: Optional[float] = Field(
        default=None,
        description="Deadline (seconds) applied when a caller passes none"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT", "LOG_LEVEL", "LOG_FORMAT")
    @classmethod
    def validate_choice(cls, v: str, info: ValidationInfo) -> str:
        """Normalize case and reject values outside the allowed set."""
        normalized = v.upper() if info.field_name == "LOG_LEVEL" else v.lower()
        allowed = _CHOICES[info.field_name]
        if normalized not in allowed:
            raise ValueError(f"{info.field_name} must be one of {sorted(allowed)}")
        return normalized

    @field_validator("DEFAULT_LANGUAGE")
    @classmethod
    def validate_default_language(cls, v: str) -> str:
        """Default language must be an ISO 639 code."""
        if not re.fullmatch(r"[a-z]{2,3}", v):
            raise ValueError("DEFAULT_LANGUAGE must be a 2-3 letter lowercase language code")
        return v

    @field_validator("SEARCH_MAX_QUERY_LENGTH")
    @classmethod
    def validate_query_length(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("SEARCH_MAX_QUERY_LENGTH must be positive")
        return v

    @field_validator(
        "CACHE_PLANT_TTL",
        "CACHE_SEARCH_TTL",
        "CACHE_COMPANION_TTL",
        "CACHE_GROWING_CONDITIONS_TTL",
        "CACHE_PHYSICAL_CHARACTERISTICS_TTL",
        "LOOKUP_CACHE_TTL",
    )
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        """Redis SET EX rejects a non-positive expiry."""
        if v <= 0:
            raise ValueError("Cache TTLs must be positive")
        return v

    @model_validator(mode="after")
    def validate_search_bounds(self) -> "Settings":
        if not 0 < self.SEARCH_DEFAULT_LIMIT <= PAGE_SIZE_CEILING:
            raise ValueError(f"SEARCH_DEFAULT_LIMIT must be between 1 and {PAGE_SIZE_CEILING}")
        if self.DEFAULT_OPERATION_TIMEOUT is not None and self.DEFAULT_OPERATION_TIMEOUT <= 0:
            raise ValueError("DEFAULT_OPERATION_TIMEOUT must be positive when set")
        return self

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def database_url(self) -> str:
        """Get the database URL, preferring explicit DATABASE_URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def redis_url(self) -> str:
        """Get the Redis URL with optional password."""
        if self.REDIS_URL:
            return self.REDIS_URL
        if self.REDIS_PASSWORD:
            return (
                f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:"
                f"{self.REDIS_PORT}/{self.REDIS_DB}"
            )
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
