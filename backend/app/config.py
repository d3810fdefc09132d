"""Application configuration using pydantic-settings"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import logging

logger = logging.getLogger(__name__)

# Stable development key so tokens survive restarts.
# Production MUST override this via the SECRET_KEY environment variable.
_DEV_SECRET_KEY = "dev-secret-key-for-local-development-only-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Property Analyst"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # API
    API_PREFIX: str = "/api"
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./property_analyst.db"
    DATABASE_ECHO: bool = False

    # JWT Authentication
    SECRET_KEY: str = _DEV_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Password Requirements
    PASSWORD_MIN_LENGTH: int = 8

    # Map link resolution
    RESOLVE_URL_TIMEOUT_SECONDS: float = 10.0

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        environment = info.data.get("ENVIRONMENT", "development")
        if environment == "production":
            if v == _DEV_SECRET_KEY:
                raise ValueError(
                    "SECRET_KEY must be set via environment variable in production. "
                    "Do not use the default development key."
                )
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production")
        elif v == _DEV_SECRET_KEY:
            logger.warning(
                "Using default development SECRET_KEY. Override it via the "
                "SECRET_KEY environment variable before deploying."
            )
        return v

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
