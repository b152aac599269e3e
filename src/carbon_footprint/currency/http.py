"""Asynchronous converter backed by a Frankfurter-compatible rates API."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Final

import httpx

from carbon_footprint.currency.base import (
    AsyncCurrencyConverter,
    RateUnavailableError,
    UnknownCurrencyError,
)
from carbon_footprint.currency.cpi import CpiTable
from carbon_footprint.currency.static import parse_rate_table
from carbon_footprint.definitions import CURRENCIES, REFERENCE_CURRENCY
from carbon_footprint.settings import FootprintSettings, get_settings

LOGGER = logging.getLogger(__name__)

_LATEST: Final[str] = "latest"


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Expose cache hit/miss counters for the converter."""

    hits: int
    misses: int

    def to_dict(self) -> dict[str, int]:
        """Return cache statistics as a dictionary."""

        return {"hits": self.hits, "misses": self.misses}


class HttpExchangeRateConverter(AsyncCurrencyConverter):
    """Fetch ECB reference rates over HTTP and cache them per day."""

    def __init__(
        self,
        base_url: str | None = None,
        ttl_seconds: int = 3600,
        *,
        cpi: CpiTable | None = None,
        currencies: Iterable[str] = CURRENCIES,
        timeout_seconds: float | None = None,
        settings: FootprintSettings | None = None,
    ) -> None:
        settings_obj = settings or get_settings()
        self._base = (base_url or settings_obj.rates_base_url).rstrip("/")
        self._timeout = (
            timeout_seconds
            if timeout_seconds is not None
            else settings_obj.rates_timeout
        )
        self._ttl_seconds: Final[int] = ttl_seconds
        self._cpi = cpi
        self._currencies = frozenset(currencies) | {REFERENCE_CURRENCY}
        self._cache: dict[str, tuple[float, Mapping[str, float]]] = {}
        self._cache_hits = 0
        self._cache_misses = 0

    def available_currencies(self) -> frozenset[str]:
        return self._currencies

    async def convert_to_amount(
        self,
        value: float,
        currency_code: str,
        date: datetime | None = None,
        *,
        country_code_iso2: str | None = None,
    ) -> float:
        if currency_code not in self._currencies:
            raise UnknownCurrencyError(currency_code)
        amount = value
        if currency_code != REFERENCE_CURRENCY:
            rates = await self.get_rates(date)
            rate = rates.get(currency_code)
            if rate is None:
                raise RateUnavailableError(currency_code, "missing from rate table")
            amount = value / rate
        if date is not None and self._cpi is not None:
            amount = self._cpi.adjust(amount, date, country_code_iso2)
        return amount

    async def get_rates(self, date: datetime | None = None) -> Mapping[str, float]:
        """Return the rate table for ``date`` (latest when omitted).

        Raises:
            RateUnavailableError: When the API cannot be reached or returns an
                unusable payload.
        """

        bucket = _LATEST if date is None else date.date().isoformat()
        now = time.time()
        cached = self._cache.get(bucket)
        if cached is not None:
            cached_at, rates = cached
            if now - cached_at <= self._ttl_seconds:
                self._cache_hits += 1
                LOGGER.debug(
                    "Exchange rate cache hit",
                    extra={"bucket": bucket, "cache_event": "hit"},
                )
                return rates
            self._cache.pop(bucket, None)

        self._cache_misses += 1
        LOGGER.debug(
            "Exchange rate cache miss",
            extra={"bucket": bucket, "cache_event": "miss"},
        )
        rates = await self._fetch(bucket)
        self._cache[bucket] = (now, rates)
        return rates

    def get_cache_stats(self) -> CacheStats:
        """Return cache hit/miss counters."""

        return CacheStats(hits=self._cache_hits, misses=self._cache_misses)

    async def _fetch(self, bucket: str) -> Mapping[str, float]:
        url = f"{self._base}/{bucket}"
        params = {"from": REFERENCE_CURRENCY}
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                payload: object = response.json()
        except httpx.HTTPStatusError as exc:
            LOGGER.warning(
                "Exchange rate HTTP error",
                extra={
                    "bucket": bucket,
                    "status_code": exc.response.status_code,
                    "url": url,
                },
                exc_info=exc,
            )
            raise RateUnavailableError(
                REFERENCE_CURRENCY, f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "Exchange rate transport error",
                extra={"bucket": bucket, "url": url},
                exc_info=exc,
            )
            raise RateUnavailableError(REFERENCE_CURRENCY, "transport error") from exc
        except (ValueError, TypeError) as exc:
            LOGGER.warning(
                "Exchange rate response parsing error",
                extra={"bucket": bucket, "url": url},
                exc_info=exc,
            )
            raise RateUnavailableError(REFERENCE_CURRENCY, "malformed response") from exc

        try:
            return parse_rate_table(payload)
        except (ValueError, TypeError) as exc:
            LOGGER.warning(
                "Exchange rate response missing rates",
                extra={"bucket": bucket, "url": url},
                exc_info=exc,
            )
            raise RateUnavailableError(REFERENCE_CURRENCY, "malformed response") from exc
