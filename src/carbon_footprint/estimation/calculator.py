"""Carbon emission computation for line items and whole activities."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Final, assert_never

from carbon_footprint.currency.base import AsyncCurrencyConverter, CurrencyConverter
from carbon_footprint.definitions import ActivityType, TransportationMode
from carbon_footprint.errors import ErrorKind, Failure, Outcome, Success
from carbon_footprint.estimation.resolver import (
    ConversionRequest,
    Converter,
    UnitAmount,
    convert,
    convert_async,
    resolve_unit_and_amount,
    resolve_unit_and_amount_async,
)
from carbon_footprint.schemas import Activity, LineItem, coerce_activity, coerce_line_item
from carbon_footprint.taxonomy.index import TaxonomyIndex
from carbon_footprint.taxonomy.models import (
    FootprintEntry,
    PerCountryIntensity,
    ScalarIntensity,
)

_LOGGER = logging.getLogger(__name__)

# Source: http://www.balticproject.org/en/calculator-page (kgCO2e per 1000 EUR)
MEAL_KG_PER_THOUSAND_EUR: Final[float] = 79.64  # Restaurant bill
TRANSPORTATION_KG_PER_THOUSAND_EUR: Final[Mapping[TransportationMode, float]] = (
    MappingProxyType(
        {
            TransportationMode.CAR: 1186.0,  # Taxi bill
            TransportationMode.TRAIN: 335.63,
            TransportationMode.PUBLIC_TRANSPORT: 335.63,
            TransportationMode.PLANE: 1121.52,
        }
    )
)


def legacy_coefficient(activity: Activity) -> Outcome[float]:
    """Return the kgCO2e-per-1000-EUR coefficient of a meal or transportation."""

    if activity.activity_type is ActivityType.MEAL:
        return Success(MEAL_KG_PER_THOUSAND_EUR)
    if activity.activity_type is ActivityType.TRANSPORTATION:
        mode = activity.transportation_mode
        coefficient = (
            TRANSPORTATION_KG_PER_THOUSAND_EUR.get(mode) if mode is not None else None
        )
        if coefficient is None:
            return Failure(
                kind=ErrorKind.UNRECOGNIZED_MODE,
                message=(
                    "Cannot compute the footprint of a transportation activity "
                    f"with mode {None if mode is None else str(mode)!r}"
                ),
            )
        return Success(coefficient)
    return Failure(
        kind=ErrorKind.UNSUPPORTED_ACTIVITY_TYPE,
        message=(
            "Cannot compute the purchase footprint of activity type "
            f"{str(activity.activity_type)!r}"
        ),
    )


def correct_with_participants(footprint: float, participants: int | None) -> float:
    """Share ``footprint`` between at least one participant."""

    return footprint / max(1, participants or 1)


@dataclass(frozen=True, slots=True)
class EmissionCalculator:
    """Score line items and activities against an indexed taxonomy."""

    index: TaxonomyIndex
    converter: Converter
    logger: logging.Logger = _LOGGER

    def emission_of_line_item(
        self,
        line_item: LineItem | Mapping[str, object],
        country_code_iso2: str | None = None,
        date: datetime | None = None,
    ) -> Outcome[float]:
        """Return the kgCO2e emitted by a single line item.

        Args:
            line_item: Line item to score.
            country_code_iso2: Country selecting a per-country intensity. The
                unweighted mean of all countries is used when omitted.
            date: Activity date forwarded to monetary conversions.

        Returns:
            The emission or a failure naming the offending identifier.
        """

        item = coerce_line_item(line_item)
        entry = self._entry_for(item)
        if isinstance(entry, Failure):
            return self._log_failure(entry)
        resolved = resolve_unit_and_amount(
            item,
            entry.value,
            self._sync_converter(),
            date=date,
            country_code_iso2=country_code_iso2,
        )
        if isinstance(resolved, Failure):
            return self._log_failure(resolved)
        return self._log_failure(
            emission_from_amount(
                entry.value, resolved.value, item.identifier, country_code_iso2
            )
        )

    async def emission_of_line_item_async(
        self,
        line_item: LineItem | Mapping[str, object],
        country_code_iso2: str | None = None,
        date: datetime | None = None,
    ) -> Outcome[float]:
        """Asynchronous twin of :meth:`emission_of_line_item`."""

        item = coerce_line_item(line_item)
        entry = self._entry_for(item)
        if isinstance(entry, Failure):
            return self._log_failure(entry)
        resolved = await resolve_unit_and_amount_async(
            item,
            entry.value,
            self.converter,
            date=date,
            country_code_iso2=country_code_iso2,
        )
        if isinstance(resolved, Failure):
            return self._log_failure(resolved)
        return self._log_failure(
            emission_from_amount(
                entry.value, resolved.value, item.identifier, country_code_iso2
            )
        )

    def emission_of_activity(
        self, activity: Activity | Mapping[str, object]
    ) -> Outcome[float]:
        """Return the kgCO2e footprint of ``activity`` per participant.

        Purchases sum their line items and abort on the first failing one.
        Meals and transportation apply a fixed coefficient to the converted
        cost.
        """

        act = coerce_activity(activity)
        if act.activity_type is ActivityType.PURCHASE:
            line_items = _require_line_items(act)
            if isinstance(line_items, Failure):
                return self._log_failure(line_items)
            total = 0.0
            for item in line_items.value:
                emission = self.emission_of_line_item(
                    item, act.country_code_iso2, act.datetime
                )
                if isinstance(emission, Failure):
                    return emission
                total += emission.value
            return Success(correct_with_participants(total, act.participants))

        coefficient = legacy_coefficient(act)
        if isinstance(coefficient, Failure):
            return self._log_failure(coefficient)
        request = _cost_request(act)
        if isinstance(request, Failure):
            return self._log_failure(request)
        amount = convert(self._sync_converter(), request.value, None)
        if isinstance(amount, Failure):
            return self._log_failure(amount)
        return self._log_failure(
            _cost_footprint(act, amount.value, coefficient.value)
        )

    async def emission_of_activity_async(
        self, activity: Activity | Mapping[str, object]
    ) -> Outcome[float]:
        """Asynchronous twin of :meth:`emission_of_activity`."""

        act = coerce_activity(activity)
        if act.activity_type is ActivityType.PURCHASE:
            line_items = _require_line_items(act)
            if isinstance(line_items, Failure):
                return self._log_failure(line_items)
            total = 0.0
            for item in line_items.value:
                emission = await self.emission_of_line_item_async(
                    item, act.country_code_iso2, act.datetime
                )
                if isinstance(emission, Failure):
                    return emission
                total += emission.value
            return Success(correct_with_participants(total, act.participants))

        coefficient = legacy_coefficient(act)
        if isinstance(coefficient, Failure):
            return self._log_failure(coefficient)
        request = _cost_request(act)
        if isinstance(request, Failure):
            return self._log_failure(request)
        amount = await convert_async(self.converter, request.value, None)
        if isinstance(amount, Failure):
            return self._log_failure(amount)
        return self._log_failure(
            _cost_footprint(act, amount.value, coefficient.value)
        )

    def _entry_for(self, line_item: LineItem) -> Outcome[FootprintEntry]:
        entry = self.index.get_entry_by_key(line_item.identifier)
        if entry is None:
            return Failure(
                kind=ErrorKind.UNKNOWN_IDENTIFIER,
                message=f"Unknown purchase identifier: {line_item.identifier}",
                identifier=line_item.identifier,
            )
        if entry.intensity is None:
            return Failure(
                kind=ErrorKind.MISSING_INTENSITY,
                message=f"Missing carbon intensity for {line_item.identifier}",
                identifier=line_item.identifier,
            )
        return Success(entry)

    def _sync_converter(self) -> CurrencyConverter:
        if isinstance(self.converter, AsyncCurrencyConverter):
            raise TypeError(
                "Currency converter is asynchronous; use the async API instead"
            )
        return self.converter

    def _log_failure(self, outcome: Outcome[float] | Failure) -> Outcome[float]:
        if isinstance(outcome, Failure):
            self.logger.debug(
                "Footprint cannot be computed",
                extra={
                    "error_kind": outcome.kind.value,
                    "identifier": outcome.identifier,
                },
            )
        return outcome


def emission_from_amount(
    entry: FootprintEntry,
    resolved: UnitAmount,
    identifier: str,
    country_code_iso2: str | None = None,
) -> Outcome[float]:
    """Multiply a resolved amount by the entry's intensity."""

    if not math.isfinite(resolved.amount):
        return Failure(
            kind=ErrorKind.INVALID_AMOUNT,
            message=(
                f"Invalid amount {resolved.amount} for {identifier}. "
                f"Expected a finite number of {entry.unit}"
            ),
            identifier=identifier,
            unit=resolved.unit.value,
        )
    if resolved.unit != entry.unit:
        return Failure(
            kind=ErrorKind.INCOMPATIBLE_UNIT,
            message=(
                f"Invalid unit {resolved.unit.value} given for {identifier}. "
                f"Expected {entry.unit}"
            ),
            identifier=identifier,
            unit=resolved.unit.value,
            expected_unit=entry.unit.value if entry.unit is not None else None,
        )

    intensity = entry.intensity
    if intensity is None:
        return Failure(
            kind=ErrorKind.MISSING_INTENSITY,
            message=f"Missing carbon intensity for {identifier}",
            identifier=identifier,
        )
    if isinstance(intensity, ScalarIntensity):
        return Success(intensity.value * resolved.amount)
    if isinstance(intensity, PerCountryIntensity):
        if country_code_iso2 is None:
            # Unweighted mean across listed countries.
            return Success(intensity.average() * resolved.amount)
        value = intensity.for_country(country_code_iso2)
        if value is None:
            return Failure(
                kind=ErrorKind.MISSING_COUNTRY_INTENSITY,
                message=(
                    f"Missing carbon intensity for country {country_code_iso2} "
                    f"and identifier {identifier}"
                ),
                identifier=identifier,
                country=country_code_iso2,
            )
        return Success(value * resolved.amount)
    assert_never(intensity)


def _require_line_items(activity: Activity) -> Outcome[tuple[LineItem, ...]]:
    if not activity.line_items:
        return Failure(
            kind=ErrorKind.MISSING_LINE_ITEMS,
            message="Cannot compute the footprint of a purchase without line items",
        )
    return Success(activity.line_items)


def _cost_footprint(
    activity: Activity, amount: float, coefficient: float
) -> Outcome[float]:
    footprint = amount * coefficient / 1000.0
    if not math.isfinite(footprint):
        return Failure(
            kind=ErrorKind.INVALID_AMOUNT,
            message=(
                f"Invalid converted amount {amount} for activity of type "
                f"{activity.activity_type}. Expected a finite number of EUR"
            ),
            unit=activity.cost_currency,
            country=activity.country_code_iso2,
            date=activity.datetime,
        )
    return Success(correct_with_participants(footprint, activity.participants))


def _cost_request(activity: Activity) -> Outcome[ConversionRequest]:
    if activity.cost_amount is None or not activity.cost_currency:
        return Failure(
            kind=ErrorKind.MISSING_COST,
            message=(
                f"Activity of type {activity.activity_type} needs "
                "costAmount and costCurrency"
            ),
        )
    return Success(
        ConversionRequest(
            value=activity.cost_amount,
            currency_code=activity.cost_currency,
            date=activity.datetime,
            country_code_iso2=activity.country_code_iso2,
        )
    )
