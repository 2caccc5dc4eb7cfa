"""
Configuration and settings for the spot curation functions.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings, injected into each client at construction."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # LLM / Gemini
    gemini_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"

    # Google Programmable Search (image search)
    google_search_key: Optional[str] = None
    google_search_engine_id: Optional[str] = None

    # Region documents live as JSON files in a GitHub repository.
    github_token: Optional[str] = None
    github_owner: Optional[str] = None
    github_repo: Optional[str] = None
    github_branch: str = "main"
    github_api_url: str = "https://api.github.com"
    data_dir: str = "data"
    region_index_exclude: str = "prefecture_positions.json"

    # Outbound calls
    request_timeout_sec: int = Field(default=30, gt=0)
    max_concurrency: int = Field(default=8, gt=0)

    # Development toggles
    use_in_memory_backends: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
