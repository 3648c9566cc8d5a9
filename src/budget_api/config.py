"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = True

    # Shared-secret header check (disabled when unset)
    x_api_key: str | None = None

    # Airtable
    airtable_token: str | None = None
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_timeout_seconds: float = 30.0
    airtable_page_size: int = 100
    airtable_base_id: str = "apphe47UUcVkLGMRM"
    airtable_transactions_table_id: str = "tbluB7cd68Oc843rn"
    airtable_categories_table_id: str = "tblLovH1h7C5npXlk"
    airtable_budgets_table_id: str = "tbldAjq4mmRMKT0gj"

    # Query defaults
    default_time_zone: str = "America/Los_Angeles"
    user_locale: str = "en-us"

    # Budget table field names
    budget_field_month: str = "Month"
    budget_field_category: str = "Category"
    budget_field_planned: str = "Planned $"
    budget_field_notes: str = "Notes"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
