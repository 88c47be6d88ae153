"""Application configuration utilities."""

from .settings import (
    DEFAULT_ALERT_THRESHOLDS,
    DEFAULT_CURRENCY_SYMBOL,
    Settings,
    configure_logging,
    get_settings,
)

__all__ = [
    "DEFAULT_ALERT_THRESHOLDS",
    "DEFAULT_CURRENCY_SYMBOL",
    "Settings",
    "configure_logging",
    "get_settings",
]
