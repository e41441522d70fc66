"""
Application settings loaded from environment variables.

Uses pydantic-settings; a .env file in the working directory or its
parent is read as well.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    Missing SUPABASE_URL / SUPABASE_KEY fail validation at import.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_key: str = Field(..., description="Supabase anon key used by every service")

    # ===================
    # WAREHOUSE
    # ===================
    main_warehouse_id: int = Field(
        default=1,
        ge=1,
        description="Location used when a stock or conversion request names none"
    )

    # ===================
    # SERVER
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$"
    )
    debug: bool = Field(default=True, description="Expose /docs and error details")
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"
    )
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=8000, ge=1000, le=65535)
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Warehouse console origins allowed to call the API"
    )

    @property
    def is_production(self) -> bool:
        """JSON logs and no docs in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Call get_settings.cache_clear() to reload.
    """
    return Settings()


settings = get_settings()
