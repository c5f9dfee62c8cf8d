"""Tests for environment driven settings and logging setup."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from config import configure_logging, get_settings
from config.logger import PACKAGE_LOGGERS
from core.formatting import format_currency, format_percent


@pytest.fixture()
def restore_loggers():
    saved = {name: (logging.getLogger(name).level, list(logging.getLogger(name).handlers)) for name in PACKAGE_LOGGERS}
    yield
    for name, (level, handlers) in saved.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers[:] = handlers


def test_defaults():
    settings = get_settings()

    assert settings.default_months == 12
    assert settings.currency == "USD"
    assert settings.resolved_currency_symbol == "$"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PLAINPLAN_DEFAULT_MONTHS", "24")
    monkeypatch.setenv("PLAINPLAN_CURRENCY", "gbp")

    settings = get_settings()

    assert settings.default_months == 24
    assert settings.resolved_currency_symbol == "£"
    assert format_currency(1234.5) == "£1,234.50"


def test_explicit_and_unknown_symbols(monkeypatch):
    monkeypatch.setenv("PLAINPLAN_CURRENCY", "CHF")
    assert get_settings().resolved_currency_symbol == "CHF "

    get_settings.cache_clear()
    monkeypatch.setenv("PLAINPLAN_CURRENCY_SYMBOL", "Fr.")
    assert get_settings().resolved_currency_symbol == "Fr."


def test_non_positive_default_months_is_rejected(monkeypatch):
    monkeypatch.setenv("PLAINPLAN_DEFAULT_MONTHS", "0")

    with pytest.raises(ValidationError):
        get_settings()


def test_currency_formatting():
    assert format_currency(3000) == "$3,000"
    assert format_currency(-42.129) == "-$42.13"
    assert format_currency(10, symbol="€") == "€10"
    assert format_percent(18.76) == "18.8%"


def test_configure_logging_is_idempotent(restore_loggers):
    configure_logging("debug")
    loggers = configure_logging("warning")

    assert [logger.name for logger in loggers] == list(PACKAGE_LOGGERS)
    for logger in loggers:
        assert logger.level == logging.WARNING
        assert sum(1 for handler in logger.handlers if getattr(handler, "_plainplan", False)) == 1
