"""Consumer price index correction of historical monetary amounts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from statistics import fmean
from types import MappingProxyType

from carbon_footprint.currency.base import MissingCpiDataError

LOGGER = logging.getLogger(__name__)


class CpiTable:
    """Yearly price indices per country.

    Amounts are brought back to ``reference_year`` prices, the year the
    footprint intensities were published for. A country without an index for
    a given year falls back to the mean index of the countries that have one.
    """

    def __init__(
        self, reference_year: int, series: Mapping[str, Mapping[int, float]]
    ) -> None:
        self.reference_year = reference_year
        self._series: Mapping[str, Mapping[int, float]] = MappingProxyType(
            {
                country: MappingProxyType(dict(values))
                for country, values in series.items()
            }
        )

    @classmethod
    def from_document(cls, document: Mapping[str, object]) -> CpiTable:
        """Build a table from ``{"referenceYear": ..., "countries": {...}}``.

        Raises:
            ValueError: When the document is malformed.
        """

        reference_year = document.get("referenceYear")
        countries = document.get("countries")
        if not isinstance(reference_year, int) or not isinstance(countries, Mapping):
            raise ValueError("CPI document needs 'referenceYear' and 'countries'")
        series: dict[str, dict[int, float]] = {}
        for country, values in countries.items():
            if not isinstance(values, Mapping):
                raise ValueError(f"CPI series for {country!r} must be a mapping")
            series[str(country)] = {
                int(year): float(index) for year, index in values.items()
            }
        return cls(reference_year, series)

    @property
    def countries(self) -> frozenset[str]:
        """Countries with at least one index value."""

        return frozenset(self._series)

    def index_for(self, year: int, country_code_iso2: str | None = None) -> float:
        """Return the price index of ``country_code_iso2`` for ``year``.

        Raises:
            LookupError: When no country has an index for ``year``.
        """

        if country_code_iso2 is not None:
            value = self._series.get(country_code_iso2, {}).get(year)
            if value is not None:
                return value
        candidates = [
            values[year] for values in self._series.values() if year in values
        ]
        if not candidates:
            raise LookupError(year)
        if country_code_iso2 is not None:
            LOGGER.debug(
                "CPI falls back to cross-country mean",
                extra={"country": country_code_iso2, "year": year},
            )
        return fmean(candidates)

    def adjust(
        self, amount: float, date: datetime, country_code_iso2: str | None = None
    ) -> float:
        """Express ``amount`` spent at ``date`` in reference-year prices.

        Raises:
            MissingCpiDataError: When no index covers the year of ``date`` or
                the reference year.
        """

        try:
            current = self.index_for(date.year, country_code_iso2)
            reference = self.index_for(self.reference_year, country_code_iso2)
        except LookupError as exc:
            raise MissingCpiDataError(date) from exc
        return amount * reference / current
