"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with validation.
"""
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./devfolio.db",
        description="Async database URL (postgresql+asyncpg://... in production)"
    )
    database_url_sync: str = Field(
        default="sqlite:///./devfolio.db",
        description="Sync database URL for Alembic"
    )

    # Security
    jwt_secret: str = Field(
        default="change-me-in-production-this-is-only-a-dev-secret",
        min_length=32,
        description="JWT secret key (min 32 chars)"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    jwt_expiration_days: int = Field(default=30, description="JWT expiration time in days")

    # CORS
    allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(default=True, description="Enable per-client rate limiting")
    rate_limit_auth: str = Field(default="10/minute", description="Rate limit for login and registration")
    rate_limit_messages: str = Field(default="30/minute", description="Rate limit for sending messages")

    # Messaging
    message_max_length: int = Field(default=2000, description="Maximum message length in characters")
    messages_page_size: int = Field(default=50, description="Default page size for message history")
    projects_page_size: int = Field(default=12, description="Default page size for project listings")
    threads_page_size: int = Field(default=10, description="Default page size for thread listings")
    comments_page_size: int = Field(default=20, description="Default page size for thread comments")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format: json or text")

    def get_allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level so logging accepts it."""
        return v.upper()


# Global settings instance
settings = Settings()
