from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class Settings(BaseSettings):
    # Basic Settings
    APP_NAME: str = "Adaptive Interviewer"
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT
    LOG_LEVEL: str = "DEBUG"

    # AI Settings
    OPENAI_API_KEY: Optional[str] = None
    AI_MODEL: str = "gpt-4o-mini"
    AI_TEMPERATURE: float = 0.4
    AI_MAX_RETRIES: int = 0
    AI_TIMEOUT_SECONDS: float = 30.0

    # Interview budgets
    MAX_QUESTIONS: int = 7
    MAX_FOLLOWUPS: int = 2

    # Persistence (in-memory store when unset)
    SESSION_STORE_DIR: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
