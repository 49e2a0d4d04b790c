"""
Configuration management for the FastAPI application.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Chef Site API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Backend API for the restaurant website and admin dashboard"

    # "production" enables the Secure flag on the session cookie
    ENVIRONMENT: str = "development"

    # CORS Configuration
    # Credentials (the session cookie) are allowed, so origins must be explicit
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5500",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5500",
        "http://127.0.0.1:8000",
    ]

    # Database Configuration
    # Empty means "not configured": the app boots but database endpoints fail
    DATABASE_URL: str = ""
    DB_ECHO: bool = False

    # Session Configuration
    # SESSION_SECRET signs the session cookie (generate with: openssl rand -hex 32)
    SESSION_SECRET: str = "change-this-session-secret-in-production"
    SESSION_COOKIE_NAME: str = "sid"
    SESSION_MAX_AGE_DAYS: int = 30

    # SMTP / Email
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    SMTP_USE_TLS: bool = True
    NOTIFY_EMAIL: str = "info@privatechefstefan.co.za"
    SITE_NAME: str = "Private Chef Stefan"

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024
    MAX_GALLERY_FILES: int = 10

    # Sitemap
    SITE_URL: str = "https://chefstefan.co.za"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"

    # Seed data created on first start
    SEED_DEFAULT_DATA: bool = True
    DEFAULT_ADMIN_EMAIL: str = "info@privatechefstefan.co.za"
    DEFAULT_ADMIN_PASSWORD: str = ""

    @property
    def cookie_secure(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def async_database_url(self) -> str:
        """DATABASE_URL with the async driver selected for PostgreSQL URLs."""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        return url

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Global settings instance
settings = Settings()
