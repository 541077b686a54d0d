import logging
import os
from pydantic import BaseModel, Field, ConfigDict, field_validator

from src.domain.models import DEFAULT_PAGE_SIZE
from src.infrastructure.api_client import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS

DEFAULT_FAVORITES_DB_URL = "sqlite:///favorites.db"


class Settings(BaseModel):
    """Runtime configuration, read from the environment (and `.env` via load_dotenv)."""
    model_config = ConfigDict(frozen=True)

    api_url: str = Field(DEFAULT_API_URL, description="Base URL of the directory API")
    favorites_db_url: str = Field(DEFAULT_FAVORITES_DB_URL, description="SQLAlchemy URL of the favorite store")
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)
    request_timeout: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_url=os.getenv("DIRECTORY_API_URL", DEFAULT_API_URL),
            favorites_db_url=os.getenv("FAVORITES_DB_URL", DEFAULT_FAVORITES_DB_URL),
            page_size=os.getenv("PAGE_SIZE", DEFAULT_PAGE_SIZE),
            request_timeout=os.getenv("REQUEST_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level '{value}'.")
        return value
