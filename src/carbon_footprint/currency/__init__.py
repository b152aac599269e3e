"""Currency and CPI normalisation collaborators."""

from __future__ import annotations

from carbon_footprint.currency.base import (
    AsyncCurrencyConverter,
    CurrencyConverter,
    CurrencyError,
    MissingCpiDataError,
    RateUnavailableError,
    UnknownCurrencyError,
)
from carbon_footprint.currency.cpi import CpiTable
from carbon_footprint.currency.http import CacheStats, HttpExchangeRateConverter
from carbon_footprint.currency.static import (
    StaticCurrencyConverter,
    load_cpi_table,
    load_exchange_rate_document,
    load_static_converter,
)

__all__ = [
    "AsyncCurrencyConverter",
    "CacheStats",
    "CpiTable",
    "CurrencyConverter",
    "CurrencyError",
    "HttpExchangeRateConverter",
    "MissingCpiDataError",
    "RateUnavailableError",
    "StaticCurrencyConverter",
    "UnknownCurrencyError",
    "load_cpi_table",
    "load_exchange_rate_document",
    "load_static_converter",
]
