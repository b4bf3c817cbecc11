from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =========================
# Configuration (ENV-DRIVEN via Pydantic)
# =========================


class Settings(BaseSettings):
    """Provider defaults read from environment and validated by Pydantic.

    Every field is read from a `GRID_`-prefixed variable, e.g. `GRID_PAGE_SIZE_DEFAULT`.
    Only a single `.env` file at the project root is read; real environment
    variables always take precedence over `.env` values.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        env_prefix="GRID_",
        env_file=str(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
    )

    # Pagination
    page_size_default: int = Field(default=10, ge=0)
    page_size_limit: int = Field(default=50, ge=1)
    page_param: str = Field(default="page")
    page_size_param: str = Field(default="per-page")

    # Sorting
    sort_param: str = Field(default="sort")
    sort_separator: str = Field(default=",")
    multi_sort: bool = Field(default=False)
    strict_sort: bool = Field(default=False)

    @field_validator("sort_separator")
    @classmethod
    def _non_empty_separator(cls, v: str) -> str:
        if not v or v == "-":
            raise ValueError("sort separator must be a non-empty string other than '-'")
        return v


# Singleton accessor to avoid repeated disk reads/parsing
_settings_singleton: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the singleton Settings instance, initializing it on first call."""
    global _settings_singleton
    if _settings_singleton is None:
        _settings_singleton = Settings()
    return _settings_singleton


def reset_settings() -> None:
    """Drop the cached Settings so the next `get_settings()` re-reads the environment."""
    global _settings_singleton
    _settings_singleton = None
