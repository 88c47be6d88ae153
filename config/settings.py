"""Centralised configuration handling for PlainSpend budgets."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CURRENCY_SYMBOL = "€"
DEFAULT_ALERT_THRESHOLDS: tuple[float, ...] = (0.5, 0.75, 0.9)


class Settings(BaseSettings):
    """Application settings sourced from environment variables."""

    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    default_alert_thresholds: tuple[float, ...] = DEFAULT_ALERT_THRESHOLDS
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PLAINSPEND_", extra="ignore")

    @property
    def numeric_log_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging at the level named in settings."""

    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.numeric_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
