"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="MovieGrid", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    omdb_api_key: str | None = Field(default=None, alias="OMDB_API_KEY")
    omdb_api_url: HttpUrl = Field(
        default="https://www.omdbapi.com", alias="OMDB_API_URL"
    )
    omdb_timeout_seconds: float | None = Field(
        default=None, alias="OMDB_TIMEOUT", gt=0
    )

    batch_size: int = Field(default=18, alias="BATCH_SIZE", ge=1)
    remote_page_size: int = Field(default=10, alias="REMOTE_PAGE_SIZE", ge=1)
    detail_plot: Literal["short", "full"] = Field(
        default="short", alias="DETAIL_PLOT"
    )
    poster_placeholder_url: str = Field(
        default="https://via.placeholder.com/300x450?text=No+Poster",
        alias="POSTER_PLACEHOLDER_URL",
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("omdb_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_batch_fits_remote_pages(self) -> "Settings":
        """A UI batch is assembled from exactly two remote pages."""

        if self.batch_size > 2 * self.remote_page_size:
            raise ValueError(
                "BATCH_SIZE cannot exceed two remote pages of REMOTE_PAGE_SIZE"
            )
        return self

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
