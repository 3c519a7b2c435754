import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field("sqlite:///./recipe_discovery.db", alias="DATABASE_URL")
    auth_secret_key: str = Field("change-me", alias="AUTH_SECRET_KEY")
    auth_algorithm: str = Field("HS256", alias="AUTH_ALGORITHM")
    # GoTrue-compatible identity service (sign-in, sign-up, OAuth)
    auth_base_url: str | None = Field(None, alias="AUTH_BASE_URL")
    auth_api_key: str | None = Field(None, alias="AUTH_API_KEY")
    auth_timeout_seconds: int = Field(15, alias="AUTH_TIMEOUT_SECONDS")
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field("https://api.openai.com", alias="OPENAI_BASE_URL")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    openai_temperature: float = Field(0.7, alias="OPENAI_TEMPERATURE")
    generation_timeout_seconds: int = Field(60, alias="GENERATION_TIMEOUT_SECONDS")
    recent_recipes_limit: int = Field(3, alias="RECENT_RECIPES_LIMIT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings
