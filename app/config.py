# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Validated once at startup so a missing key or an out-of-range value
    fails the boot instead of the first request that needs it.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration (record store + auth)
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Supabase JWT secret for verifying HS256 access tokens"
    )

    CONTACTS_TABLE: str = Field(
        default="contact_info",
        min_length=1,
        description="Name of the table holding contact records"
    )

    # -------------------------------------------------------------------------
    # AWS S3 Configuration (image uploads)
    # -------------------------------------------------------------------------

    AWS_REGION: str = Field(
        default="us-east-1",
        description="Region of the upload bucket"
    )

    AWS_ACCESS_KEY_ID: str | None = Field(
        default=None,
        description="Access key used to sign upload URLs (falls back to the boto3 credential chain)"
    )

    AWS_SECRET_ACCESS_KEY: str | None = Field(
        default=None,
        description="Secret key used to sign upload URLs"
    )

    AWS_BUCKET_NAME: str = Field(
        ...,
        description="Bucket that receives uploaded images"
    )

    UPLOAD_MODE: Literal["put", "post"] = Field(
        default="put",
        description="put = single pre-signed PUT URL, post = policy-based form upload"
    )

    UPLOAD_URL_EXPIRES_SECONDS: int = Field(
        default=60,
        ge=60,
        le=3600,
        description="Lifetime of an upload authorization in seconds"
    )

    UPLOAD_KEY_PREFIX: str = Field(
        default="",
        description="Prefix prepended to every uploaded object key (e.g. 'contacts/')"
    )

    ALLOWED_UPLOAD_TYPES: str = Field(
        default="image/",
        description="Allowed MIME types or type prefixes (comma-separated)"
    )

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum upload size in MB (enforced by the POST policy)"
    )

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    DEFAULT_PAGE_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Page size used when a listing request does not specify one"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    REQUIRE_AUTH: bool = Field(
        default=True,
        description="Require a Supabase access token on every API route"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list of origins."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_upload_types_list(self) -> list[str]:
        """
        Parse ALLOWED_UPLOAD_TYPES into a list.

        Example: "image/, application/pdf" -> ["image/", "application/pdf"]
        """
        return [t.strip().lower() for t in self.ALLOWED_UPLOAD_TYPES.split(",") if t.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
