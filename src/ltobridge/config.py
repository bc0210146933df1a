"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Bridge client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LTO_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Bridge API
    # ======================
    host: str = Field(
        default="https://bridge.lto.network", description="Bridge API base URL"
    )
    http_timeout: float = Field(default=15.0, description="HTTP request timeout in seconds")
    stats_poll_interval: float = Field(
        default=60.0, description="Seconds between stats refreshes"
    )

    # ======================
    # Address cache
    # ======================
    cache_path: str = Field(
        default="./data/bridge_cache.json",
        description="File holding the persisted bridge address cache",
    )
    storage_key: str = Field(
        default="__bridge__", description="Storage key the cache is saved under"
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    @property
    def base_url(self) -> str:
        """Bridge host without a trailing slash."""
        return self.host.rstrip("/")

    def get_safe_dict(self) -> dict:
        """Return settings as a plain dict for display."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "host": self.base_url,
            "http_timeout": self.http_timeout,
            "stats_poll_interval": self.stats_poll_interval,
            "cache_path": self.cache_path,
            "storage_key": self.storage_key,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
