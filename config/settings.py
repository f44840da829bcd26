"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Catalog credentials - required at first use, not at startup
    discogs_consumer_key: str | None = Field(None, description="Discogs API consumer key")
    discogs_consumer_secret: str | None = Field(
        None, description="Discogs API consumer secret"
    )
    setlistfm_api_key: str | None = Field(None, description="Setlist.fm API key")

    discogs_user_agent: str = Field(
        default="SoundCheckd/1.0 +https://soundcheckd.co",
        description="User-Agent sent to Discogs (required by their API terms)",
    )

    # Application Configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to run the server on")
    log_level: str = Field(default="INFO", description="Logging level")

    # Feature Flags
    enable_telemetry: bool = Field(default=True, description="Enable PostHog telemetry")

    # PostHog Configuration
    posthog_api_key: str | None = Field(None, description="PostHog API key for telemetry")
    posthog_host: str = Field(default="https://us.i.posthog.com", description="PostHog host URL")

    # Sentry Configuration
    sentry_dsn: str | None = Field(None, description="Sentry DSN for error tracking")

    # Artist Image Cache Configuration
    artist_cache_ttl: int = Field(
        default=604800, description="TTL in seconds for the artist image cache (default: 7 days)"
    )

    # Rate Limiting Configuration
    catalog_request_delay: float = Field(
        default=1.1,
        description="Seconds to wait before follow-up Discogs requests in one operation",
    )
    discogs_rate_limit: int = Field(
        default=55, description="Max Discogs API requests per minute (stay under 60/min limit)"
    )
    setlistfm_rate_limit: int = Field(
        default=120, description="Max Setlist.fm API requests per minute"
    )
    http_timeout: float = Field(default=10.0, description="Outbound HTTP timeout in seconds")

    # Application Metadata
    app_name: str = Field(default="SoundCheckd-Catalog", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def discogs_configured(self) -> bool:
        """Whether both Discogs credentials are present."""
        return bool(self.discogs_consumer_key and self.discogs_consumer_secret)

    @property
    def setlistfm_configured(self) -> bool:
        """Whether the Setlist.fm API key is present."""
        return bool(self.setlistfm_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
