"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="CP Profile Cards")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    version: str = Field(default="1.0.0")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Codeforces
    codeforces_base_url: str = Field(default="https://codeforces.com/api")
    codeforces_api_key: str = Field(
        default="",
        description="Codeforces API key used to sign user.info requests",
    )
    codeforces_api_secret: str = Field(
        default="",
        description="Codeforces API secret (server-side only, keep secret)",
    )

    # CodeChef
    codechef_base_url: str = Field(
        default="https://codechef-api.vercel.app",
        description="Community CodeChef API returning profile, rating and heatmap data",
    )

    # Upstream HTTP behaviour
    user_agent: str = Field(default="CP-Profile-Cards/1.0")
    upstream_timeout_seconds: float = Field(default=10.0)
    avatar_timeout_seconds: float = Field(default=5.0)
    upstream_max_retries: int = Field(default=3, ge=1)
    retry_backoff_seconds: float = Field(
        default=1.0,
        description="Base delay; attempt n waits n * base before retrying",
    )

    # Caching
    profile_cache_ttl_seconds: int = Field(default=300)
    card_cache_max_age: int = Field(
        default=300,
        description="max-age sent in Cache-Control for successful cards",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool | None = Field(
        default=None,
        description="Force JSON logs; defaults to JSON in production only",
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )
    card_rate_limit: str = Field(default="100/minute")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def codeforces_signing_enabled(self) -> bool:
        """Signed requests need both halves of the credential pair."""
        return bool(self.codeforces_api_key and self.codeforces_api_secret)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
