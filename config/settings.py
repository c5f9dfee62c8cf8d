"""Centralised configuration handling for PlainPlan."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FORECAST_MONTHS = 12
DEFAULT_CURRENCY = "USD"

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "GBP": "£",
    "EUR": "€",
    "JPY": "¥",
    "THB": "฿",
}


class Settings(BaseSettings):
    """Application settings sourced from ``PLAINPLAN_*`` environment variables."""

    default_months: int = Field(default=DEFAULT_FORECAST_MONTHS, gt=0)
    currency: str = DEFAULT_CURRENCY
    currency_symbol: str | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PLAINPLAN_", extra="ignore")

    @property
    def resolved_currency_symbol(self) -> str:
        if self.currency_symbol:
            return self.currency_symbol
        return _CURRENCY_SYMBOLS.get(self.currency.upper(), f"{self.currency.upper()} ")


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
