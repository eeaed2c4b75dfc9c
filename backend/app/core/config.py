"""Application configuration and settings management."""
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="HACKSTARTER_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "Hackathon Starter"
    app_env: Literal["development", "staging", "production"] = "development"
    api_key: str = ""
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./hackstarter.db"

    # Security
    jwt_secret_key: str = "change-me-to-a-long-random-secret-key"
    access_token_expire_minutes: int = 60 * 24
    password_hash_scheme: str = "argon2"
    # Duplicate emails on register are answered with an empty id unless this is set
    register_conflict_on_duplicate: bool = False
    allowed_origins: Annotated[List[str], NoDecode] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @model_validator(mode="after")
    def _api_key_set_when_required(self) -> "Settings":
        if self.api_key_required and not self.api_key:
            raise ValueError(f"api_key must be set when app_env is {self.app_env}")
        return self

    @property
    def token_validity(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)

    @property
    def api_key_required(self) -> bool:
        return self.app_env != "development"


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()
