# schooldesk/core/config.py - Centralized settings management using Pydantic
from pydantic import Field, validator, EmailStr
from pydantic_settings import BaseSettings
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

PLACEHOLDER_SECRET = "change_me_now_change_me_now_change_me"


class Settings(BaseSettings):
    """Application settings with validation and type safety"""

    # Application Environment
    ENV: str = Field(default="dev", description="Environment: dev, test, staging, prod")
    DEBUG: bool = Field(default=False, description="Debug mode")
    API_TITLE: str = Field(default="SchoolDesk API", description="API title")
    API_VERSION: str = Field(default="1.0.0", description="API version")

    # Database Configuration
    DATABASE_URL: str = Field(..., description="Database connection URL")
    DATABASE_ECHO: bool = Field(default=False, description="Echo SQL queries")
    DATABASE_POOL_SIZE: int = Field(default=5, ge=1, le=100, description="Connection pool size")
    DATABASE_MAX_OVERFLOW: int = Field(default=10, ge=0, le=100, description="Max overflow connections")
    DATABASE_POOL_TIMEOUT: int = Field(default=30, ge=1, le=300, description="Pool timeout in seconds")
    DATABASE_POOL_RECYCLE: int = Field(default=3600, ge=300, description="Pool recycle time in seconds")

    # Session (JWT) Configuration
    JWT_SECRET: str = Field(default=PLACEHOLDER_SECRET, min_length=32, description="Session signing secret")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=720, ge=1, le=10080, description="Session lifetime")
    JWT_ISSUER: str = Field(default="schooldesk", description="JWT issuer")
    JWT_AUDIENCE: str = Field(default="schooldesk-users", description="JWT audience")
    SESSION_COOKIE_NAME: str = Field(default="schooldesk_session", description="Session cookie name")
    SESSION_COOKIE_SECURE: bool = Field(default=True, description="Secure session cookies")
    SESSION_COOKIE_SAMESITE: str = Field(default="lax", description="SameSite cookie attribute")

    # CORS Configuration
    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="CORS allowed origins"
    )

    # Email Configuration (SMTP)
    SMTP_HOST: Optional[str] = Field(default=None, description="SMTP server host")
    SMTP_PORT: int = Field(default=587, ge=1, le=65535, description="SMTP server port")
    SMTP_USER: Optional[str] = Field(default=None, description="SMTP username")
    SMTP_PASSWORD: Optional[str] = Field(default=None, description="SMTP password")
    SMTP_FROM_EMAIL: Optional[EmailStr] = Field(default=None, description="From email address")
    SMTP_USE_TLS: bool = Field(default=True, description="Use TLS for SMTP")

    # SMS gateway
    SMS_GATEWAY_URL: Optional[str] = Field(default=None, description="SMS gateway endpoint")
    SMS_API_KEY: Optional[str] = Field(default=None, description="SMS gateway API key")
    SMS_SENDER_ID: Optional[str] = Field(default=None, description="SMS sender id")

    # Payment gateway
    PAYMENT_GATEWAY: Optional[str] = Field(default=None, description="Payment gateway name")
    PAYMENT_GATEWAY_KEY: Optional[str] = Field(default=None, description="Payment gateway key")
    PAYMENT_GATEWAY_SECRET: Optional[str] = Field(default=None, description="Payment gateway secret")

    # Security Configuration
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=15, description="BCrypt rounds")

    # Listing
    DEFAULT_PAGE_SIZE: int = Field(default=20, ge=1, le=100, description="Default page size")
    MAX_PAGE_SIZE: int = Field(default=100, ge=1, le=1000, description="Largest accepted page size")

    # Library
    LIBRARY_LOAN_DAYS: int = Field(default=14, ge=1, le=365, description="Default book loan period")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignore extra environment variables

    @validator("ENV")
    def validate_environment(cls, v):
        allowed_envs = ["dev", "development", "test", "staging", "prod", "production"]
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENV must be one of: {allowed_envs}")
        return v.lower()

    @validator("DATABASE_URL")
    def validate_database_url(cls, v):
        allowed_prefixes = (
            "postgresql://",
            "postgresql+psycopg2://",
            "postgresql+psycopg://",
            "sqlite://",
        )
        if not v.startswith(allowed_prefixes):
            raise ValueError("DATABASE_URL must be a valid database connection string (postgresql, postgresql+psycopg, postgresql+psycopg2, or sqlite)")
        return v

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed_levels}")
        return v.upper()

    @validator("CORS_ORIGINS", pre=True)
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.ENV in ["dev", "development"]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.ENV in ["prod", "production"]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def get_cors_config(self) -> dict:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.CORS_ORIGINS,
            "allow_credentials": True,
            "allow_methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization", "Accept", "Origin"],
        }


settings = Settings()


def validate_critical_settings():
    """Validate settings that must be correct before serving traffic"""
    critical_errors = []

    if settings.is_production and settings.JWT_SECRET == PLACEHOLDER_SECRET:
        critical_errors.append("JWT_SECRET must be set to a secure value in production")

    if settings.is_production and not settings.SESSION_COOKIE_SECURE:
        critical_errors.append("SESSION_COOKIE_SECURE must be enabled in production")

    if not settings.SMTP_HOST:
        logger.warning("SMTP is not configured. Outgoing email is disabled.")

    if critical_errors:
        error_msg = "Critical configuration errors:\n" + "\n".join(f"  - {error}" for error in critical_errors)
        raise ValueError(error_msg)


validate_critical_settings()

__all__ = ["settings", "Settings"]
