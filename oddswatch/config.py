"""Application configuration using Pydantic settings."""

from datetime import datetime
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

HK_TZ = ZoneInfo("Asia/Hong_Kong")


def hk_now() -> datetime:
    """Current time in Hong Kong."""
    return datetime.now(HK_TZ)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ODDSWATCH_",
        extra="ignore",
    )

    # Snapshot files (odds, horse info, pace, predictions)
    data_dir: Path = Path("./data")

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Minimum alert priority included in exports
    priority_threshold: int = 300


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export for convenience
settings = get_settings()
