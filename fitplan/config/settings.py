"""Application configuration settings."""
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FITPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "FitPlan"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"

    # Data files
    catalog_path: Path = _PACKAGE_ROOT / "data" / "exercise_catalog.yaml"
    generation_config_path: Path = _PACKAGE_ROOT / "config" / "generation_config.yaml"

    # Generation taking longer than this is logged as a defect
    slow_generation_ms: float = 1000.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
