"""
Configuration management using Pydantic settings.
Handles database URL, dashboard auth secrets, object storage credentials and currency rates.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Optional, List, Dict
from functools import lru_cache


DEFAULT_DATABASE_URL = "postgresql+asyncpg://postgres:postgres@db:5432/propzing"


class Settings(BaseSettings):
    """Application settings loaded from the environment and .env file."""

    # Application configuration
    app_name: str = "Propzing Listing Admin API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False
    auto_create_tables: bool = True

    # Database configuration
    database_url: str = DEFAULT_DATABASE_URL

    # Individual database components for flexibility
    postgres_db: str = "propzing"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "db"
    postgres_port: int = 5432

    # Dashboard session tokens
    jwt_secret_key: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    dashboard_session_minutes: int = 60

    # Dashboard two-factor authentication
    totp_issuer: str = "Propzing"
    totp_account_name: str = "dashboard"
    totp_valid_window: int = 2

    # Object storage (Cloudflare R2, S3 compatible)
    cloudflare_account_id: Optional[str] = None
    r2_access_key_id: Optional[str] = None
    r2_secret_access_key: Optional[str] = None
    r2_bucket_name: Optional[str] = None
    r2_bucket_public_domain: Optional[str] = None
    upload_secret: Optional[str] = None
    presigned_url_expiry: int = 300

    # Upload limits
    max_image_size: int = 5 * 1024 * 1024  # 5MB
    max_file_size: int = 50 * 1024 * 1024  # 50MB

    # Local upload fallback for development
    upload_dir: str = "./uploads"
    local_upload_base_url: str = "/uploads"

    # Currency conversion (1 unit of currency = X base currency)
    base_currency: str = "AED"
    exchange_rates: Dict[str, float] = {
        "USD": 3.67,
        "EUR": 4.0,
        "GBP": 4.6,
        "INR": 0.044,
    }

    # Reference data
    manual_entry_source: str = "manual-entry"

    # API configuration
    api_v1_prefix: str = "/api/v1"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8000"]

    # Pagination defaults
    default_page_size: int = 10
    max_page_size: int = 100

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000

    @model_validator(mode="after")
    def build_database_url(self):
        """Build database URL from components if not provided directly."""
        url = self.database_url
        if not url or url == DEFAULT_DATABASE_URL:
            url = (
                f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )

        # Ensure async driver is used
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)

        self.database_url = url
        return self

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v):
        """Validate JWT secret key strength."""
        if not v:
            raise ValueError("JWT_SECRET_KEY is required")
        if len(v) < 32 and v != "your-secret-key-change-in-production":
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("exchange_rates")
    @classmethod
    def normalize_exchange_rates(cls, v):
        """Store currency codes upper-cased and reject non-positive rates."""
        rates = {}
        for code, rate in v.items():
            if rate <= 0:
                raise ValueError(f"Exchange rate for {code} must be positive")
            rates[code.upper()] = rate
        return rates

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing" or self.testing

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def storage_configured(self) -> bool:
        """Whether all object storage credentials are present."""
        return all([
            self.cloudflare_account_id,
            self.r2_access_key_id,
            self.r2_secret_access_key,
            self.r2_bucket_name,
            self.r2_bucket_public_domain,
        ])

    @property
    def r2_endpoint_url(self) -> Optional[str]:
        """S3 API endpoint for the configured Cloudflare account."""
        if not self.cloudflare_account_id:
            return None
        return f"https://{self.cloudflare_account_id}.r2.cloudflarestorage.com"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
