from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Manages all application settings. It automatically reads from
    environment variables or a .env file.
    """
    # Tell pydantic to load variables from a .env file
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Credentials are optional; a missing one makes the resolver skip that tier
    WAQI_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    APP_SECRET_KEY: str = "dev-secret-change-me"

    WAQI_BASE_URL: str = "https://api.waqi.info"
    SEARCH_MODEL: str = "gpt-4o-mini"
    AQI_TIER_TIMEOUT_SECONDS: float = 10.0
    HISTORY_LIMIT: int = 50
    LOG_LEVEL: str = "INFO"

# Create a single, reusable instance of the settings
settings = Settings()
