"""Application configuration.

Settings are read from ``DESIGNCAT_*`` environment variables (or a local
``.env`` file) with Pydantic Settings, and validated once.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from designcat.domain.model.policy import LifecyclePolicy

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="DESIGNCAT_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = Field(default=_DEFAULT_DATA_DIR)
    log_level: str = Field(default="INFO")

    # Days between a soft delete and eligibility for hard deletion.
    soft_delete_ttl_days: int = Field(default=90, gt=0)
    printed_locks_design: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v!r}")
        return level

    def lifecycle_policy(self) -> LifecyclePolicy:
        return LifecyclePolicy(
            soft_delete_ttl=timedelta(days=self.soft_delete_ttl_days),
            printed_locks_design=self.printed_locks_design,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
