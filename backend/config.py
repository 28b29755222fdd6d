"""Конфигурация приложения."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from a11y_audit.core.types import FailurePolicy


class Settings(BaseSettings):
    """Настройки приложения."""

    model_config = SettingsConfigDict(env_file=".env", extra="allow")

    # HTTP
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Reports
    reports_dir: str = "reports"

    # Lighthouse
    audit_category: str = "accessibility"
    lighthouse_command: List[str] = ["npx", "lighthouse"]
    lighthouse_log_level: str = "info"
    audit_timeout_seconds: Optional[float] = None  # None = без таймаута

    # Browser
    chrome_flags: List[str] = ["--headless=new"]
    browser_channel: Optional[str] = None

    # Batch
    max_concurrency: int = 1  # 1 = строго последовательно
    failure_policy: FailurePolicy = FailurePolicy.ABORT


@lru_cache
def get_settings() -> Settings:
    return Settings()
