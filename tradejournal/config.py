"""Application configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All config from environment. Never hardcode secrets."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./tradejournal.db")

    # Optional JSON file storage instead of the database (browser export format accepted)
    journal_file: str = Field(default="")

    # AI coaching
    anthropic_api_key: str = Field(default="")
    ai_model: str = Field(default="claude-sonnet-4-6")
    ai_max_tokens: int = Field(default=400)

    # Presentation: decimals used when rendering money and ratios in API responses
    display_decimals: int = Field(default=2, ge=0, le=8)

    # App
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    allowed_hosts: str = Field(default="http://localhost:8000")


settings = Settings()
