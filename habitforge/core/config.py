"""Configuration management for habitforge."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


StorageBackend = Literal["memory", "sqlite", "redis"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    storage_backend: StorageBackend = Field(
        default="sqlite", description="Key-value backend for snapshots (memory, sqlite or redis)"
    )
    sqlite_db_path: str = Field(default="./data/habitforge.db", description="SQLite file used by the sqlite backend")
    redis_url: str | None = Field(default=None, description="Redis connection URL (e.g., redis://localhost:6379)")
    redis_key_prefix: str = Field(default="habitforge", description="Prefix applied to every Redis key")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    # Progression Configuration
    default_task_xp: int = Field(
        default=10, gt=0, description="XP credited when a completed task id is missing from the catalog"
    )
    initial_streak_freezes: int = Field(default=1, ge=0, description="Streak freezes granted on a fresh profile")

    # Metrics Configuration
    default_chronological_age: int = Field(
        default=35, gt=0, description="Age used by bio-age and ROI calculators when none is given"
    )

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # Snapshot namespaces
    TASK_STORAGE_KEY: str = "task-storage"
    USER_STORAGE_KEY: str = "user-storage"
    SNAPSHOT_VERSION: int = 1

    # Streaks & Levels
    FALLBACK_LEVEL_TITLE: str = "Novice"

    # Bio-age
    BIO_AGE_WINDOW_DAYS: int = 7
    PERCENTILE_MIN: int = 1
    PERCENTILE_MAX: int = 99

    # Healthcare ROI
    HEALTHCARE_REDUCTION_FACTOR: float = 0.35  # 35% lower annual spend with a healthy lifestyle
    LIFE_EXPECTANCY_AGE: int = 85
    MIN_YEARS_REMAINING: int = 10
    DEFAULT_BREAK_EVEN_MONTHS: int = 12
    MONTHS_PER_YEAR: int = 12

    # Cost tiers
    DAYS_PER_MONTH: int = 30

    # Redis Configuration
    REDIS_MAX_CONNECTIONS: int = 10
    REDIS_MAX_RETRIES: int = 3
    REDIS_RETRY_BASE_DELAY_SECONDS: float = 0.1


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
