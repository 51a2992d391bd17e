from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SOURCES_FILE = PROJECT_ROOT / "data" / "sources.toml"


class AppSettings(BaseSettings):
    sources_file: Path = DEFAULT_SOURCES_FILE
    http_timeout: float = 10.0
    # Retries belong to the caller; the feed client does not retry unless asked to.
    http_retry_attempts: int = 0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
