"""
Shared configuration management for the Portal card API.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local", validation_alias="PORTAL_ENV")
    log_level: str = Field(default="info")

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    cors_origin: str = Field(default="*")

    # Upstream card platform
    gnosispay_api_url: str = Field(default="https://api.gnosispay.com")
    upstream_timeout_seconds: float = Field(default=30.0)

    # Local user store
    database_url: str = Field(default="postgresql://localhost:5432/portal")
    jwt_secret: str = Field(default="change-me")
    jwt_expires_in_seconds: int = Field(default=86400)

    # Email
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_secure: bool = Field(default=False)
    smtp_user: Optional[str] = Field(default=None)
    smtp_pass: Optional[str] = Field(default=None)
    smtp_from: Optional[str] = Field(default=None)
    email_cta_url: str = Field(default="https://portalfi.com")

    # SMS
    twilio_account_sid: Optional[str] = Field(default=None)
    twilio_auth_token: Optional[str] = Field(default=None)
    twilio_phone_number: Optional[str] = Field(default=None)
    app_name: str = Field(default="Portalfi")
    otp_expiry_minutes: int = Field(default=10)

    @property
    def cors_origins(self) -> List[str]:
        """CORS_ORIGIN may hold a single origin or a comma separated list."""
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]


class PortalConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "portal"


@lru_cache()
def get_config() -> PortalConfig:
    """Get the process-wide configuration."""
    return PortalConfig()
