"""Configuration management for URL shortener."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from shortlink.shortcode import MIN_CODE_LENGTH, MAX_CODE_LENGTH


class Config(BaseSettings):
    """Application configuration."""

    environment: str = Field(
        default="development",
        description="Deployment environment (development, test, production)"
    )

    # Database settings
    db_type: str = Field(
        default="memory",
        description="Storage backend: memory or postgres (redis is reserved)"
    )

    database_url: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection URL, required when db_type=postgres"
    )

    db_pool_min_size: int = Field(default=1, ge=1)

    db_pool_max_size: int = Field(default=10, ge=1)

    db_query_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for single-row database operations"
    )

    db_bulk_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for list and cleanup database operations"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=3000,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes (each has its own store)"
    )

    # URL shortener settings
    base_url: str = Field(
        ...,
        min_length=1,
        description="Base URL for generating short URLs"
    )

    short_code_length: int = Field(
        default=6,
        ge=MIN_CODE_LENGTH,
        le=MAX_CODE_LENGTH,
        description="Length of generated short codes"
    )

    max_collision_retries: int = Field(
        default=5,
        ge=0,
        description="Extra attempts when a generated code is already taken"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("db_type")
    @classmethod
    def normalize_db_type(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def server_address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"


def load_config() -> Config:
    """Load configuration from environment and .env."""
    return Config()


def load_test_config() -> Config:
    """Load configuration from environment and .env.test."""
    return Config(_env_file=".env.test")
