"""File-backed currency converter using static exchange-rate tables."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from types import MappingProxyType

from carbon_footprint import data
from carbon_footprint.currency.base import CurrencyConverter, UnknownCurrencyError
from carbon_footprint.currency.cpi import CpiTable
from carbon_footprint.definitions import REFERENCE_CURRENCY
from carbon_footprint.settings import FootprintSettings, get_settings

LOGGER = logging.getLogger(__name__)

DEFAULT_EXCHANGE_RATES_RESOURCE = "exchange_rates.json"
DEFAULT_CPI_RESOURCE = "cpi.json"


class StaticCurrencyConverter(CurrencyConverter):
    """Convert amounts with in-memory rate tables.

    Rates are expressed as units of currency per one unit of the reference
    currency (EUR). Footprint intensities are published in EUR of the CPI
    reference year, so when a price index is attached and a historical table
    exists for its reference year, that table is used for every conversion.
    Otherwise a historical table for the year of the conversion date takes
    precedence over the current table.
    """

    def __init__(
        self,
        rates: Mapping[str, float],
        *,
        cpi: CpiTable | None = None,
        historical_rates: Mapping[int, Mapping[str, float]] | None = None,
    ) -> None:
        self._rates: Mapping[str, float] = MappingProxyType(
            {**dict(rates), REFERENCE_CURRENCY: 1.0}
        )
        self._historical: Mapping[int, Mapping[str, float]] = MappingProxyType(
            {
                int(year): MappingProxyType(dict(table))
                for year, table in (historical_rates or {}).items()
            }
        )
        self._cpi = cpi
        self._currencies = frozenset(self._rates)

    @property
    def rates(self) -> Mapping[str, float]:
        """Current rate table."""

        return self._rates

    @property
    def historical_rates(self) -> Mapping[int, Mapping[str, float]]:
        """Historical rate tables keyed by year."""

        return self._historical

    @property
    def cpi(self) -> CpiTable | None:
        """Price index table applied to dated conversions, if any."""

        return self._cpi

    def available_currencies(self) -> frozenset[str]:
        return self._currencies

    def rate_for(self, currency_code: str, date: datetime | None = None) -> float:
        """Return the rate of ``currency_code`` applicable at ``date``.

        Raises:
            UnknownCurrencyError: When the currency is not in the current table.
        """

        if currency_code not in self._rates:
            raise UnknownCurrencyError(currency_code)
        return self._table_for(date).get(currency_code, self._rates[currency_code])

    def _table_for(self, date: datetime | None) -> Mapping[str, float]:
        if self._cpi is not None:
            reference = self._historical.get(self._cpi.reference_year)
            if reference is not None:
                return reference
        if date is not None:
            historical = self._historical.get(date.year)
            if historical is not None:
                return historical
        return self._rates

    def convert_to_amount(
        self,
        value: float,
        currency_code: str,
        date: datetime | None = None,
        *,
        country_code_iso2: str | None = None,
    ) -> float:
        amount = value / self.rate_for(currency_code, date)
        if date is not None and self._cpi is not None:
            amount = self._cpi.adjust(amount, date, country_code_iso2)
        return amount


def parse_rate_table(payload: object) -> dict[str, float]:
    """Parse ``{"rates": {"USD": 1.1, ...}}`` into a rate mapping.

    Raises:
        ValueError: When the payload is not a rate table.
    """

    if not isinstance(payload, Mapping):
        raise ValueError("Exchange rate table must be a mapping")
    rates = payload.get("rates")
    if not isinstance(rates, Mapping):
        raise ValueError("Exchange rate table is missing 'rates'")
    parsed: dict[str, float] = {}
    for code, rate in rates.items():
        value = float(rate)
        if value <= 0:
            raise ValueError(f"Exchange rate for {code!r} must be positive")
        parsed[str(code)] = value
    return parsed


def load_exchange_rate_document(
    path: str | Path | None = None,
) -> tuple[dict[str, float], dict[int, dict[str, float]]]:
    """Load current and historical rate tables.

    The document has the shape ``{"current": {"rates": {...}},
    "historical": {"2011": {"rates": {...}}}}``.

    Returns:
        Tuple of the current table and the historical tables keyed by year.
    """

    text = (
        Path(path).read_text(encoding="utf-8")
        if path is not None
        else data.read_text(DEFAULT_EXCHANGE_RATES_RESOURCE)
    )
    document = json.loads(text)
    if not isinstance(document, Mapping):
        raise ValueError("Exchange rate document must be a mapping")
    current = parse_rate_table(document.get("current"))
    historical_section = document.get("historical") or {}
    if not isinstance(historical_section, Mapping):
        raise ValueError("'historical' must map years to rate tables")
    historical = {
        int(year): parse_rate_table(table)
        for year, table in historical_section.items()
    }
    return current, historical


def load_cpi_table(path: str | Path | None = None) -> CpiTable:
    """Load the CPI table from ``path`` or the packaged default."""

    text = (
        Path(path).read_text(encoding="utf-8")
        if path is not None
        else data.read_text(DEFAULT_CPI_RESOURCE)
    )
    document = json.loads(text)
    if not isinstance(document, Mapping):
        raise ValueError("CPI document must be a mapping")
    return CpiTable.from_document(document)


def load_static_converter(
    settings: FootprintSettings | None = None,
) -> StaticCurrencyConverter:
    """Build a :class:`StaticCurrencyConverter` from configured or packaged data."""

    settings_obj = settings or get_settings()
    current, historical = load_exchange_rate_document(settings_obj.exchange_rates_file)
    cpi = load_cpi_table(settings_obj.cpi_file)
    LOGGER.debug(
        "Loaded static exchange rates",
        extra={
            "currency_count": len(current),
            "historical_years": sorted(historical),
            "cpi_reference_year": cpi.reference_year,
        },
    )
    return StaticCurrencyConverter(current, cpi=cpi, historical_rates=historical)
