"""Configuration management for Grove."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import InvalidTimeSpecError
from .timespec import parse_grid_spec


class GroveSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    data_dir: Path = Field(default=Path("~/.grove"), validation_alias="GROVE_DATA_DIR")
    log_level: str = Field(default="WARNING", validation_alias="GROVE_LOG_LEVEL")
    default_tree: str = Field(default="default", validation_alias="GROVE_DEFAULT_TREE")
    sample_interval: float = Field(default=0.05, validation_alias="GROVE_SAMPLE_INTERVAL")
    date_format: str = Field(default="%d-%m-%Y %H:%M", validation_alias="GROVE_DATE_FORMAT")
    enforce_tree_cost: bool = Field(default=True, validation_alias="GROVE_ENFORCE_TREE_COST")
    stats_grid: str | None = Field(default=None, validation_alias="GROVE_STATS_GRID")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "GROVE_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("sample_interval")
    @classmethod
    def _validate_sample_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("GROVE_SAMPLE_INTERVAL must be > 0 seconds")
        return value

    @field_validator("stats_grid")
    @classmethod
    def _validate_stats_grid(cls, value: str | None) -> str | None:
        if not value:
            return None
        try:
            parse_grid_spec(value)
        except InvalidTimeSpecError as exc:
            raise ValueError(f"GROVE_STATS_GRID: {exc}") from exc
        return value.strip().lower()

    @property
    def collection_path(self) -> Path:
        return self.data_dir / "trees.yaml"

    @property
    def history_path(self) -> Path:
        return self.data_dir / "history.yaml"


@lru_cache(maxsize=1)
def get_settings() -> GroveSettings:
    """Return cached settings instance."""

    settings = GroveSettings()
    settings.data_dir = settings.data_dir.expanduser().resolve()
    return settings


__all__ = ["GroveSettings", "get_settings"]
