"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Every value has a default, so the import engine runs without any env.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # IMPORT ENGINE
    # ===================
    import_sample_rows: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Data rows sampled when inferring unlabeled quantity columns"
    )
    import_numeric_ratio: float = Field(
        default=0.6,
        gt=0,
        le=1,
        description="Share of sampled rows that must be numeric for a quantity column"
    )
    import_preview_limit: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Rows returned in the preview slice"
    )
    manual_location_sentinel: str = Field(
        default="use-from-file",
        min_length=1,
        description="Location id meaning 'take the location from the file'"
    )
    preview_ttl_minutes: int = Field(
        default=30,
        ge=1,
        le=24 * 60,
        description="Minutes a staged import preview stays available"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
