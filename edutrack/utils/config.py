# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()


class ApiSettings(BaseSettings):
    """Collection and content service settings."""

    model_config = SettingsConfigDict(env_prefix="EDUTRACK_API_")

    base_url: str = Field(
        default="http://localhost:5000/api", description="Base URL of the learning API"
    )
    timeout_seconds: float = Field(default=10.0, description="HTTP request timeout in seconds")


class TrackingSettings(BaseSettings):
    """Event recorder settings."""

    model_config = SettingsConfigDict(env_prefix="TRACKING_")

    user_id: Optional[str] = Field(default=None, description="Default user id for tracked events")
    session_id: Optional[str] = Field(
        default=None, description="Fixed session id (a new one is generated when unset)"
    )
    batch_size: int = Field(
        default=1, ge=1, description="Events buffered before sending (1 sends immediately)"
    )


class AnalyticsSettings(BaseSettings):
    """Statistics computation settings."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    timezone: Optional[str] = Field(
        default=None,
        description="IANA zone for calendar-day logic (host-local zone when unset)",
    )
    cache_enabled: bool = Field(
        default=False, description="Share memoized statistics through Valkey"
    )
    cache_ttl_seconds: int = Field(default=300, description="TTL for cached statistics")
    settle_delay_ms: int = Field(
        default=500, description="Delay before loading statistics after a write"
    )


class ValkeySettings(BaseSettings):
    """Valkey (Redis-compatible) connection settings for the statistics cache."""

    model_config = SettingsConfigDict(env_prefix="VALKEY_")

    host: str = Field(default="localhost", description="Valkey host")
    port: int = Field(default=6379, description="Valkey port")
    password: Optional[str] = Field(default=None, description="Valkey password")
    db: int = Field(default=0, description="Valkey database number")
    ssl: bool = Field(default=False, description="Use SSL/TLS connection")

    @property
    def url(self) -> str:
        """Build Valkey connection URL."""
        scheme = "rediss" if self.ssl else "redis"
        if self.password:
            return f"{scheme}://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"{scheme}://{self.host}:{self.port}/{self.db}"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    api: ApiSettings = Field(default_factory=ApiSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    valkey: ValkeySettings = Field(default_factory=ValkeySettings)

    # General settings
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def settle_delay_seconds(self) -> float:
        """Settle delay in seconds."""
        return self.analytics.settle_delay_ms / 1000.0


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
