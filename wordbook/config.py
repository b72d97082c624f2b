"""Application configuration management."""
from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    PROJECT_NAME: str = "Word Book"
    API_PREFIX: str = "/api"

    BACKEND_CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost", "http://localhost:3000"],
        description="Allowed CORS origins",
    )

    DATA_DIR: Path = Field(Path("./data"), description="Directory holding word-book documents")
    DATABASE_FILE: str = Field("db.json", description="JSON database file used by the database backend")
    STATE_FILE: str = Field("state.json", description="Single-document file served by /state")
    STORAGE_BACKEND: Literal["database", "files"] = Field(
        "database",
        description="'database' keeps every book in one JSON file, 'files' keeps one file per book",
    )
    SPEC_PREFIX: str = Field("wordbook/", description="Prefix every accepted document spec must carry")
    MAX_BODY_BYTES: int = Field(2 * 1024 * 1024, description="Largest accepted document upload")

    API_BASE_URL: AnyHttpUrl = Field(
        "http://localhost:7000", description="Backend base URL used by the sync client"
    )
    REQUEST_TIMEOUT_SECONDS: float = Field(10.0, description="Timeout for sync client HTTP calls")
    SEARCH_RESULT_LIMIT: int = Field(10, ge=1, description="Default number of search hits")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


settings = get_settings()
