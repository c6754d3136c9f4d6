from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="", env_file=(".env", ".env.local"), extra="ignore"
    )

    app_name: str = Field(default="MovieCache")
    environment: Literal["local", "staging", "production", "test"] = Field(
        default="local"
    )
    debug: bool = Field(default=True)

    postgres_host: str = Field(default="127.0.0.1")
    postgres_port: int = Field(default=5432)
    postgres_db: str = Field(default="moviecache")
    postgres_user: str = Field(default="moviecache")
    postgres_password: str = Field(default="moviecache")

    omdb_api_url: str = Field(default="https://www.omdbapi.com/")
    omdb_api_key: str | None = Field(default=None)
    omdb_request_timeout: float = Field(default=10.0, gt=0.0)
    omdb_connect_timeout: float = Field(default=5.0, gt=0.0)

    cors_origins: list[str] = Field(default_factory=list)

    @property
    def database_uri(self) -> str:
        """Return a SQLAlchemy-compatible database URI."""

        user = self.postgres_user
        password = self.postgres_password
        host = self.postgres_host
        port = self.postgres_port
        db = self.postgres_db
        return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{db}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
