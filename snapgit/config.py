"""
Configuration for snapgit.

Settings are read from ``SNAPGIT_*`` environment variables (or a ``.env``
file) and can always be passed explicitly to ``Repository``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Repository layout and runtime settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SNAPGIT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    repo_dir: str = Field(
        default=".snapgit", description="Metadata directory inside the working root"
    )
    default_branch: str = Field(
        default="master", description="Branch created by init"
    )
    initial_message: str = Field(
        default="initial commit", description="Message of the root commit"
    )
    log_level: str = Field(default="WARNING", description="loguru level for the CLI")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
