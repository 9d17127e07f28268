# hrms/core/config.py - Environment-driven settings for the HRMS API
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr
from typing import List


class Settings(BaseSettings):
    """
    Settings for the HRMS API, loaded from the environment and an optional .env file
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database Settings
    DATABASE_URL: str = Field(
        "sqlite+aiosqlite:///./hrms.db",
        description="SQLAlchemy async database URL (postgresql+asyncpg or sqlite+aiosqlite)"
    )
    DB_POOL_SIZE: int = Field(20, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(0, description="Database max overflow connections")
    DB_ECHO: bool = Field(False, description="Echo SQL statements")
    CREATE_TABLES_ON_STARTUP: bool = Field(True, description="Run metadata.create_all during startup")

    # JWT Authentication Settings
    JWT_SECRET_KEY: SecretStr = Field(
        SecretStr("change-me-in-production-use-strong-secret"),
        description="Secret key for signing JWT tokens"
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # Password hashing
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31, description="bcrypt cost factor")

    # Application Settings
    APP_NAME: str = "HRMS Backend API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field("development", description="Environment name")
    LOG_LEVEL: str = Field("INFO", description="Log level")

    # Logging Configuration
    ENABLE_JSON_LOGGING: bool = Field(True, description="Enable JSON structured logging")

    # CORS Settings
    CORS_ORIGINS: str = Field(
        "http://localhost:3000,https://hrms-frontend-sand.vercel.app,https://hrms-frontend.vercel.app",
        description="Comma-separated list of allowed CORS origins"
    )

    # Rate Limiting Settings
    RATE_LIMIT_ENABLED: bool = Field(True, description="Enable rate limiting")
    DEFAULT_RATE_LIMIT: str = Field("1000 per 15 minutes", description="Default rate limit per client IP")

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS_ORIGINS string to list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def should_use_json_logging(self) -> bool:
        """Use JSON logging in production or when explicitly enabled"""
        return self.ENVIRONMENT == "production" or self.ENABLE_JSON_LOGGING

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")
