"""Application configuration utilities."""

from .logger import configure_logging
from .settings import DEFAULT_CURRENCY, DEFAULT_FORECAST_MONTHS, Settings, get_settings

__all__ = [
    "DEFAULT_CURRENCY",
    "DEFAULT_FORECAST_MONTHS",
    "Settings",
    "configure_logging",
    "get_settings",
]
