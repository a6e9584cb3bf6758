"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Reference data (DuckDB file). Optional: rooms can carry inline data instead.
    database_path: str = "data/draft_data.duckdb"

    # Draft timers, seconds per step
    ban_timer_seconds: int = 30
    pick_timer_seconds: int = 30
    tick_interval_seconds: float = 1.0

    # Playback pacing for streamed simulations
    simulation_step_delay_seconds: float = 0.6

    recommendation_limit: int = 5

    # Idle rooms are dropped after this long
    room_ttl_seconds: int = 60 * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
