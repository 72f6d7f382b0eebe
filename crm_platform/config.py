"""
Platform Configuration Management

Centralizes configuration for the CRM tenant account service.
Supports multiple environments (local, dev, prod) with secrets injected via environment.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported deployment environments."""

    LOCAL = "local"
    DEV = "dev"
    PROD = "prod"


class PlatformConfig(BaseSettings):
    """
    Platform-wide configuration settings.

    Loads from environment variables with .env file support.
    All secrets should be injected via environment in production.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(default=Environment.LOCAL)

    # Platform Database (stores tenant documents)
    platform_mongo_db_url: str = Field(default="mongodb://localhost:27017")
    platform_mongo_db_name: str = Field(default="crm_platform")
    tenants_collection_name: str = Field(default="tenants")

    # Security
    jwt_secret_key: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiry_hours: int = Field(default=24)

    # Logging
    log_level: str = Field(default="INFO")

    # CORS Configuration
    allowed_origins: str = Field(default="http://localhost:5173,http://localhost:3000")

    # Credentials issued to tenants
    api_key_prefix: str = Field(default="nk_")
    api_key_token_bytes: int = Field(default=24, ge=16)
    webhook_secret_bytes: int = Field(default=24, ge=16)
    default_api_key_name: str = Field(default="Nova Chave")
    default_webhook_events: list[str] = Field(default_factory=lambda: ["lead.created"])

    # Concurrency control on tenant document saves (off = last write wins)
    enable_optimistic_locking: bool = Field(default=False)

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Ensure secret key is properly set in non-local environments."""
        env = info.data.get("environment", Environment.LOCAL)
        if env != Environment.LOCAL and v == "change-me-in-production":
            raise ValueError("jwt_secret_key must be set in non-local environments")
        return v

    def get_allowed_origins_list(self) -> list[str]:
        """Parse CORS allowed origins into a list."""
        if self.environment == Environment.LOCAL:
            return ["*"]  # Allow all in local development
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PROD

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == Environment.LOCAL


@lru_cache()
def get_config() -> PlatformConfig:
    """
    Get cached platform configuration.

    Uses lru_cache to ensure config is loaded only once.
    """
    return PlatformConfig()
