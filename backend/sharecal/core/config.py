from functools import lru_cache
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    PROJECT_NAME: str = "Sharecal API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "local"
    DATABASE_URL: str = "sqlite:///../sharecal.db"
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Keys of every calendar's timeslot preference matrix
    EVENT_TYPES: Annotated[List[str], NoDecode] = [
        "appointment",
        "meeting",
        "work",
        "sport",
        "party",
        "other",
    ]
    CALENDAR_NAME_MAX_LENGTH: int = 256
    DEFAULT_CALENDAR_NAME: str = "Main Calendar"

    @field_validator("BACKEND_CORS_ORIGINS", "EVENT_TYPES", mode="before")
    @classmethod
    def split_comma_separated(cls, value: List[str] | str) -> List[str]:
        """Allow both comma-separated strings and list inputs."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
