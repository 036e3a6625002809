"""
Configuration for the Mini Program Client.

Uses Pydantic settings for environment-based configuration. The cloud
environment identifier and service name are loaded once at startup and never
mutated afterwards.
"""

from __future__ import annotations

from pathlib import Path

from community_core.config_enums import Environment
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class MiniAppClientSettings(BaseSettings):
    """Configuration settings for the Mini Program Client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MINIAPP_CLIENT_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Service identity
    SERVICE_NAME: str = "miniapp-client"

    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        validation_alias="ENVIRONMENT",
        description="Runtime environment for the client",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    DEBUG: bool = Field(default=False, description="Log full gateway response bodies")

    # Cloud hosting gateway
    GATEWAY_BASE_URL: str = Field(
        default="https://api.weixin.qq.com",
        description="Cloud hosting entrypoint all gateway calls are sent to",
    )
    CLOUD_ENV_ID: str = Field(
        default="your-cloud-env-id",
        description="Cloud hosting environment ID (console -> environment management)",
    )
    CLOUD_SERVICE_NAME: str = Field(
        default="your-service-name",
        description="Cloud hosting service name, sent as X-WX-SERVICE",
    )
    APP_ID: str | None = Field(default=None, description="Mini program AppID (debug only)")
    API_VERSION: str = Field(default="v1", description="Backend API version")
    DEFAULT_TIMEOUT_MS: int = Field(
        default=10000, gt=0, description="Per-call timeout when a request sets none"
    )

    # Cloud storage
    STORAGE_API_URL: str = Field(
        default="https://api.weixin.qq.com/tcb/uploadfile",
        description="Endpoint issuing cloud storage upload tickets",
    )
    STORAGE_ACCESS_TOKEN: SecretStr = Field(
        default=SecretStr(""), description="Access token for the cloud storage API"
    )

    # Persisted state
    PROFILE_STORE_PATH: Path = Field(
        default=Path.home() / ".miniapp_client" / "userInfo.json",
        description="File holding the registered user's profile",
    )

    # UI pacing
    REDIRECT_DELAY_SECONDS: float = Field(
        default=0.1, ge=0, description="Delay before redirecting to registration"
    )
    POST_SUCCESS_DELAY_SECONDS: float = Field(
        default=1.5, ge=0, description="Delay that lets success notices show before navigating"
    )

    # Publishing
    MAX_IMAGES_PER_POST: int = Field(default=9, gt=0)
    MAX_IMAGE_BYTES: int = Field(default=10 * 1024 * 1024, gt=0)

    # Registration
    REQUIRE_AVATAR: bool = Field(
        default=True, description="Registration requires an explicitly chosen avatar"
    )


# Global settings instance
settings = MiniAppClientSettings()
