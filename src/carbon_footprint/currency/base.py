"""Contract of the currency and CPI normalisation collaborator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

__all__ = [
    "AsyncCurrencyConverter",
    "CurrencyConverter",
    "CurrencyError",
    "MissingCpiDataError",
    "RateUnavailableError",
    "UnknownCurrencyError",
]


class CurrencyError(Exception):
    """Base class for currency conversion failures."""


class UnknownCurrencyError(CurrencyError):
    """Raised when a currency code is not supported at all."""

    def __init__(self, currency_code: str) -> None:
        super().__init__(f"Unknown currency {currency_code!r}")
        self.currency_code = currency_code


class MissingCpiDataError(CurrencyError):
    """Raised when no consumer price index exists for the requested date."""

    def __init__(self, date: datetime) -> None:
        super().__init__(f"Unknown CPI for activity date {date.isoformat()}")
        self.date = date


class RateUnavailableError(CurrencyError):
    """Raised when an exchange rate could not be obtained from its source."""

    def __init__(self, currency_code: str, reason: str) -> None:
        super().__init__(f"Exchange rate for {currency_code!r} unavailable: {reason}")
        self.currency_code = currency_code


class CurrencyConverter(ABC):
    """Synchronous converter normalising monetary amounts to the reference currency."""

    @abstractmethod
    def available_currencies(self) -> frozenset[str]:
        """Return every currency code the converter understands."""

    @abstractmethod
    def convert_to_amount(
        self,
        value: float,
        currency_code: str,
        date: datetime | None = None,
        *,
        country_code_iso2: str | None = None,
    ) -> float:
        """Convert ``value`` in ``currency_code`` to a normalised reference amount.

        Args:
            value: Amount expressed in ``currency_code``.
            currency_code: ISO 4217 currency code.
            date: When the amount was spent; enables CPI correction.
            country_code_iso2: Country whose price index applies.

        Raises:
            UnknownCurrencyError: When ``currency_code`` is not supported.
            MissingCpiDataError: When no price index covers ``date``.
        """


class AsyncCurrencyConverter(ABC):
    """Asynchronous counterpart of :class:`CurrencyConverter`."""

    @abstractmethod
    def available_currencies(self) -> frozenset[str]:
        """Return every currency code the converter understands."""

    @abstractmethod
    async def convert_to_amount(
        self,
        value: float,
        currency_code: str,
        date: datetime | None = None,
        *,
        country_code_iso2: str | None = None,
    ) -> float:
        """Asynchronously convert ``value`` to a normalised reference amount."""
