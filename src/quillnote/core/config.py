"""
Application Configuration

Centralized settings management using Pydantic BaseSettings.
All values are loaded from environment variables or .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable binding.

    Required env vars (no defaults):
        JWT_SECRET_KEY

    Optional env vars:
        DATABASE_URL (local SQLite file), AUTO_CREATE_TABLES (True),
        LOG_LEVEL (INFO), JWT_ALGORITHM (HS256), SUMMARY_MODEL,
        AUTOSAVE_DELAY_SECONDS (2.0), SAVED_DISPLAY_SECONDS (2.0)
    """

    PROJECT_NAME: str = "Quillnote"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./quillnote.db"
    AUTO_CREATE_TABLES: bool = True

    # Auth (tokens are issued elsewhere, only verified here)
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"

    # AI summaries
    SUMMARY_MODEL: str = "gpt-4o-mini"

    # Draft autosave
    AUTOSAVE_DELAY_SECONDS: float = 2.0
    SAVED_DISPLAY_SECONDS: float = 2.0

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",  # Silently ignore unknown env vars
    )


settings = Settings()  # type: ignore[call-arg]
