"""Configuration management for mealmatch."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_host: str = "0.0.0.0"
    api_port: int = Field(4000, validation_alias=AliasChoices("PORT", "API_PORT"))
    environment: str = "development"
    log_level: str = "info"
    cors_origins: list[str] = ["*"]

    # Recipe providers
    spoonacular_api_key: str | None = None
    default_result_count: int = 12

    # USDA FoodData Central
    usda_api_key: str | None = Field(
        None, validation_alias=AliasChoices("FDC_API_KEY", "USDA_API_KEY")
    )

    # OpenAI (video generation)
    openai_api_key: str | None = None
    video_model: str = "sora-2"

    # Supabase (remote favorites/pantry/shopping list)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None

    # Local storage mirror
    local_state_db: str = "./data/local_state.db"

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def spoonacular_enabled(self) -> bool:
        return bool(self.spoonacular_api_key)

    @property
    def usda_enabled(self) -> bool:
        return bool(self.usda_api_key)

    @property
    def video_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def supabase_key(self) -> str | None:
        """Service role key when present, otherwise the anon key (RLS enforced)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    @property
    def supabase_enabled(self) -> bool:
        """Check if remote state sync is properly configured."""
        return bool(self.supabase_url and self.supabase_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
