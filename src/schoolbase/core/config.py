"""Configuration management for SchoolBase.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_DEFAULT_SECRET = "change-me-in-production-use-openssl-rand-hex-32"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SCHOOLBASE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application Settings
    app_name: str = "SchoolBase"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 4000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./sb_data/schoolbase.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Security Settings
    session_secret: str = Field(
        default=INSECURE_DEFAULT_SECRET,
        description="Secret key for session token signing",
    )
    session_ttl_minutes: int | None = Field(
        default=None,
        description="Session token lifetime; tokens never expire when unset",
    )
    password_hash_time_cost: int = 3
    password_hash_memory_cost: int = 65536  # KiB
    password_hash_parallelism: int = 4

    # Identifier Allocation
    allocation_max_attempts: int = Field(default=50, ge=1)

    # Verification Settings
    two_factor_ttl_minutes: int = Field(default=10, ge=1)

    # Tenancy Settings
    school_validity_months: int = Field(default=4, ge=1)
    default_max_students: int = 100
    default_max_teachers: int = 10

    # Mail Settings
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_timeout: int = 10
    mail_from_email: str = "noreply@schoolbase.local"
    mail_from_name: str = "SchoolBase"

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    cors_allow_headers: list[str] = Field(default=["Content-Type", "Authorization"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Superadmin Settings
    superadmin_email: str | None = Field(
        default=None,
        description="Email for initial superadmin creation (auto-created on startup if set)",
    )
    superadmin_password: str | None = Field(
        default=None,
        description="Password for initial superadmin creation (auto-created on startup if set)",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @model_validator(mode="after")
    def validate_session_secret(self) -> "Settings":
        """Refuse to start in production with the development signing secret."""
        if self.environment == "production" and self.uses_insecure_secret:
            raise ValueError(
                "SCHOOLBASE_SESSION_SECRET must be set in production. "
                "Generate one with: openssl rand -hex 32"
            )
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    @property
    def uses_insecure_secret(self) -> bool:
        """Whether the signing secret is still the development fallback."""
        return self.session_secret == INSECURE_DEFAULT_SECRET

    @property
    def smtp_configured(self) -> bool:
        """Whether enough SMTP settings are present to deliver real mail."""
        return bool(self.smtp_host)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
