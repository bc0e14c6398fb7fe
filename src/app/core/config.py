"""Application Configuration Module.

Implements 12-factor app configuration using pydantic-settings.
All configuration is loaded from environment variables with sensible defaults.

Environment file loading priority:
1. If APP_ENV is set, loads .env.{APP_ENV} (e.g., .env.dev, .env.prod)
2. Falls back to .env if specific file doesn't exist
3. Environment variables always override file values
"""
import os
import warnings
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_env_file() -> str | tuple[str, ...]:
    """
    Determine which .env file(s) to load based on APP_ENV.

    Priority (later files override earlier):
    1. .env (base defaults)
    2. .env.{APP_ENV} (environment-specific overrides)

    Returns:
        Tuple of env file paths to load (in order of priority)
    """
    app_env = os.getenv("APP_ENV", "").lower()

    env_to_file = {
        "dev": "dev",
        "development": "dev",
        "prod": "prod",
        "production": "prod",
        "staging": "staging",
        "test": "test",
    }

    file_suffix = env_to_file.get(app_env, app_env)

    env_files: list[str] = []

    if Path(".env").exists():
        env_files.append(".env")

    if file_suffix:
        env_specific = f".env.{file_suffix}"
        if Path(env_specific).exists():
            env_files.append(env_specific)

    if env_files:
        return tuple(env_files)
    return ".env"  # Default even if doesn't exist


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Set APP_ENV=dev to load .env.dev, APP_ENV=prod to load .env.prod.
    """

    model_config = SettingsConfigDict(
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Application Settings
    # ========================================
    APP_NAME: str = Field(
        default="trainee-roster-service",
        description="Application name used in logging and metrics"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Semantic version of the application"
    )
    APP_ENV: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (never enable in production)"
    )

    # ========================================
    # Logging
    # ========================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )

    # ========================================
    # Database Configuration (PostgreSQL)
    # ========================================
    DATABASE_URL: str = Field(
        default="",
        description="PostgreSQL database connection URL (SQLAlchemy asyncpg format). Required in production."
    )
    DATABASE_POOL_SIZE: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Database connection pool size"
    )
    DATABASE_MAX_OVERFLOW: int = Field(
        default=10,
        ge=0,
        description="Max overflow connections beyond pool size"
    )
    DATABASE_POOL_TIMEOUT: int = Field(
        default=30,
        ge=1,
        description="Timeout for getting connection from pool (seconds)"
    )
    DATABASE_ECHO: bool = Field(
        default=False,
        description="Echo SQL statements to logs"
    )

    # ========================================
    # Security Configuration
    # ========================================
    SECRET_KEY: str = Field(
        default="change-me-in-production-use-strong-random-key",
        min_length=32,
        description="Secret key for JWT signature verification"
    )

    # ========================================
    # CORS Configuration
    # ========================================
    CORS_ORIGINS: str = Field(
        default="*",
        description=(
            "Comma-separated list of allowed CORS origins. "
            "Browsers reject credentials when the server echoes the wildcard '*'."
        ),
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=False,
        description="Allow credentials in CORS requests. Must be False when CORS_ORIGINS='*'.",
    )
    CORS_ALLOW_METHODS: str = Field(
        default="GET,POST,PUT,DELETE,OPTIONS,PATCH",
        description="Comma-separated list of allowed HTTP methods"
    )

    # ========================================
    # Roster Import / Export
    # ========================================
    MAX_FILE_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum roster upload size in MB"
    )
    ROSTER_IMPORT_MAX_ROWS: int = Field(
        default=5000,
        ge=1,
        description="Maximum number of data rows accepted in a single roster import"
    )
    ROSTER_DEFAULT_STATUS: Literal["active", "inactive"] = Field(
        default="active",
        description="Lifecycle status stamped on imported trainees whose row has no valid status"
    )
    ROSTER_EXPORT_FILENAME_PREFIX: str = Field(
        default="trainees-export",
        min_length=1,
        description="Prefix of the exported CSV file name; the current date is appended"
    )

    # Computed Properties
    # ========================================
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def cors_methods_list(self) -> list[str]:
        """Parse CORS methods from comma-separated string."""
        return [method.strip() for method in self.CORS_ALLOW_METHODS.split(",")]

    @property
    def max_file_size_bytes(self) -> int:
        """Convert MB to bytes."""
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    # ========================================
    # Validators
    # ========================================
    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Require DATABASE_URL; warn (not silently substitute) when absent in dev."""
        if not v:
            warnings.warn(
                "DATABASE_URL is not set. The application will fail on first DB access.",
                UserWarning,
                stacklevel=2,
            )
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate settings for production environment."""
        if self.CORS_ORIGINS.strip() == "*" and self.CORS_ALLOW_CREDENTIALS:
            raise ValueError(
                "CORS_ALLOW_CREDENTIALS cannot be True when CORS_ORIGINS is '*'. "
                "Set CORS_ORIGINS to an explicit comma-separated list of origins."
            )

        if self.is_production:
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if "change-me" in self.SECRET_KEY.lower():
                raise ValueError("SECRET_KEY must be changed in production")
            if not self.DATABASE_URL:
                raise ValueError("DATABASE_URL must be set in production")
            if "localhost" in self.DATABASE_URL or "127.0.0.1" in self.DATABASE_URL:
                raise ValueError("DATABASE_URL must not point to localhost in production")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings instance.

    ``lru_cache`` ensures ``Settings()`` is constructed exactly once.
    Tests can reset it via ``get_settings.cache_clear()``.
    """
    return Settings()


settings = get_settings()
