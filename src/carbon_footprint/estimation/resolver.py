"""Unit compatibility resolution between line items and taxonomy entries.

A taxonomy entry may be reachable through several input representations
(a currency-tagged unit, a generic cost pair, a plain count). The rules below
are tried in order and the first structurally valid interpretation wins:

1. physical entry unit matched exactly by the line item unit;
2. monetary entry unit and a monetary amount on the line item, converted by
   the currency collaborator;
3. count entry unit, always one unit per line item;
4. anything else is incompatible.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import datetime
from typing import cast

from carbon_footprint.currency.base import (
    AsyncCurrencyConverter,
    CurrencyConverter,
    MissingCpiDataError,
    RateUnavailableError,
    UnknownCurrencyError,
)
from carbon_footprint.definitions import (
    COUNT_UNITS,
    MONETARY_UNITS,
    PHYSICAL_UNITS,
    Unit,
)
from carbon_footprint.errors import ErrorKind, Failure, Outcome, Success
from carbon_footprint.schemas import LineItem
from carbon_footprint.taxonomy.models import FootprintEntry

Converter = CurrencyConverter | AsyncCurrencyConverter


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    """A monetary amount awaiting normalisation by the currency collaborator."""

    value: float
    currency_code: str
    date: datetime | None = None
    country_code_iso2: str | None = None


@dataclass(frozen=True, slots=True)
class UnitResolution:
    """Outcome of rule matching: a final amount or a pending conversion."""

    unit: Unit
    amount: float | None = None
    conversion: ConversionRequest | None = None


@dataclass(frozen=True, slots=True)
class UnitAmount:
    """A normalised ``(unit, amount)`` pair."""

    unit: Unit
    amount: float


def resolve_unit(
    line_item: LineItem,
    entry: FootprintEntry,
    currencies: frozenset[str],
    *,
    date: datetime | None = None,
    country_code_iso2: str | None = None,
) -> Outcome[UnitResolution]:
    """Match ``line_item`` against the unit declared by ``entry``.

    Args:
        line_item: Line item to interpret.
        entry: Taxonomy entry the line item maps to.
        currencies: Currency codes recognised by the collaborator.
        date: Activity date forwarded to monetary conversions.
        country_code_iso2: Activity country forwarded to monetary conversions.

    Returns:
        The resolution, or an ``INCOMPATIBLE_UNIT`` failure.
    """

    entry_unit = entry.unit
    if entry_unit in PHYSICAL_UNITS and line_item.unit == entry_unit:
        return Success(UnitResolution(unit=entry_unit, amount=line_item.value))

    if entry_unit in MONETARY_UNITS:
        request = _monetary_request(line_item, currencies, date, country_code_iso2)
        if request is not None:
            return Success(UnitResolution(unit=entry_unit, conversion=request))

    if entry_unit in COUNT_UNITS:
        return Success(UnitResolution(unit=entry_unit, amount=1.0))

    expected = entry_unit.value if entry_unit is not None else None
    return Failure(
        kind=ErrorKind.INCOMPATIBLE_UNIT,
        message=(
            f"Line item unit {line_item.unit!r} is not compatible with "
            f"{line_item.identifier!r}. Expected {expected!r}"
        ),
        identifier=line_item.identifier,
        unit=line_item.unit,
        expected_unit=expected,
    )


def _monetary_request(
    line_item: LineItem,
    currencies: frozenset[str],
    date: datetime | None,
    country_code_iso2: str | None,
) -> ConversionRequest | None:
    if line_item.unit in currencies:
        return ConversionRequest(
            value=line_item.value,
            currency_code=line_item.unit,
            date=date,
            country_code_iso2=country_code_iso2,
        )
    if line_item.cost_amount is not None and line_item.cost_currency:
        return ConversionRequest(
            value=line_item.cost_amount,
            currency_code=line_item.cost_currency,
            date=date,
            country_code_iso2=country_code_iso2,
        )
    return None


def convert(
    converter: CurrencyConverter, request: ConversionRequest, identifier: str | None
) -> Outcome[float]:
    """Fulfil ``request`` with a synchronous converter."""

    try:
        result = converter.convert_to_amount(
            request.value,
            request.currency_code,
            request.date,
            country_code_iso2=request.country_code_iso2,
        )
        if inspect.isawaitable(result):
            _close(result)
            raise TypeError(
                "Currency converter is asynchronous; use the async API instead"
            )
    except UnknownCurrencyError as exc:
        return _currency_failure(ErrorKind.UNKNOWN_CURRENCY, exc, request, identifier)
    except MissingCpiDataError as exc:
        return _currency_failure(ErrorKind.MISSING_CPI_DATA, exc, request, identifier)
    except RateUnavailableError as exc:
        return _currency_failure(ErrorKind.RATE_UNAVAILABLE, exc, request, identifier)
    return Success(result)


async def convert_async(
    converter: Converter, request: ConversionRequest, identifier: str | None
) -> Outcome[float]:
    """Fulfil ``request`` with a synchronous or asynchronous converter."""

    try:
        result: object = converter.convert_to_amount(
            request.value,
            request.currency_code,
            request.date,
            country_code_iso2=request.country_code_iso2,
        )
        if inspect.isawaitable(result):
            result = await cast(Awaitable[float], result)
    except UnknownCurrencyError as exc:
        return _currency_failure(ErrorKind.UNKNOWN_CURRENCY, exc, request, identifier)
    except MissingCpiDataError as exc:
        return _currency_failure(ErrorKind.MISSING_CPI_DATA, exc, request, identifier)
    except RateUnavailableError as exc:
        return _currency_failure(ErrorKind.RATE_UNAVAILABLE, exc, request, identifier)
    return Success(cast(float, result))


def resolve_unit_and_amount(
    line_item: LineItem,
    entry: FootprintEntry,
    converter: CurrencyConverter,
    *,
    date: datetime | None = None,
    country_code_iso2: str | None = None,
) -> Outcome[UnitAmount]:
    """Return the normalised ``(unit, amount)`` of ``line_item`` for ``entry``."""

    resolution = resolve_unit(
        line_item,
        entry,
        converter.available_currencies(),
        date=date,
        country_code_iso2=country_code_iso2,
    )
    if isinstance(resolution, Failure):
        return resolution
    pending = resolution.value
    if pending.conversion is None:
        return Success(UnitAmount(pending.unit, cast(float, pending.amount)))
    converted = convert(converter, pending.conversion, line_item.identifier)
    if isinstance(converted, Failure):
        return converted
    return Success(UnitAmount(pending.unit, converted.value))


async def resolve_unit_and_amount_async(
    line_item: LineItem,
    entry: FootprintEntry,
    converter: Converter,
    *,
    date: datetime | None = None,
    country_code_iso2: str | None = None,
) -> Outcome[UnitAmount]:
    """Asynchronous twin of :func:`resolve_unit_and_amount`."""

    resolution = resolve_unit(
        line_item,
        entry,
        converter.available_currencies(),
        date=date,
        country_code_iso2=country_code_iso2,
    )
    if isinstance(resolution, Failure):
        return resolution
    pending = resolution.value
    if pending.conversion is None:
        return Success(UnitAmount(pending.unit, cast(float, pending.amount)))
    converted = await convert_async(converter, pending.conversion, line_item.identifier)
    if isinstance(converted, Failure):
        return converted
    return Success(UnitAmount(pending.unit, converted.value))


def _currency_failure(
    kind: ErrorKind,
    exc: Exception,
    request: ConversionRequest,
    identifier: str | None,
) -> Failure:
    return Failure(
        kind=kind,
        message=str(exc),
        identifier=identifier,
        unit=request.currency_code,
        country=request.country_code_iso2,
        date=request.date,
    )


def _close(awaitable: object) -> None:
    close = getattr(awaitable, "close", None)
    if callable(close):
        close()
