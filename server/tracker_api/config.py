"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    data_path: str = os.getenv("DATA_PATH", os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

    @property
    def db_path(self) -> str:
        return os.path.join(self.data_path, "tracker.db")

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8082

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Text generation for the weekly coach summary; empty disables it
    commentary_url: str = ""
    commentary_timeout: float = 20.0

    # History windows
    streak_lookback_days: int = 365
    correlation_lookback_days: int = 90

    class Config:
        env_prefix = "TRACKER_"


@lru_cache
def get_settings() -> Settings:
    return Settings()
