"""Pydantic models describing the activities the engine scores."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from .definitions import ActivityType, TransportationMode

__all__ = ["Activity", "LineItem", "coerce_activity", "coerce_line_item"]


class LineItem(BaseModel):
    """One priced or quantified component of a purchase."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    identifier: str = Field(
        ...,
        min_length=1,
        description="Key of the footprint taxonomy entry the item maps to.",
    )
    unit: str = Field(
        ...,
        description="Unit of ``value``: a physical unit, 'item' or a currency code.",
    )
    value: float = Field(..., description="Quantity expressed in ``unit``.")
    cost_amount: float | None = Field(
        default=None,
        alias="costAmount",
        description="Optional price paid for the item.",
    )
    cost_currency: str | None = Field(
        default=None,
        alias="costCurrency",
        description="ISO 4217 currency of ``cost_amount``.",
    )


class Activity(BaseModel):
    """A fully formed user activity ready to be scored."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Unrecognized values are kept as plain strings so that scoring can report
    # them instead of rejecting the whole activity.
    activity_type: ActivityType | str = Field(
        ..., alias="activityType", union_mode="left_to_right"
    )
    transportation_mode: TransportationMode | str | None = Field(
        default=None,
        alias="transportationMode",
        union_mode="left_to_right",
        description="Only relevant for transportation activities.",
    )
    cost_amount: float | None = Field(default=None, alias="costAmount")
    cost_currency: str | None = Field(default=None, alias="costCurrency")
    line_items: tuple[LineItem, ...] | None = Field(default=None, alias="lineItems")
    participants: int | None = Field(
        default=None,
        description="Number of people sharing the footprint; defaults to one.",
    )
    country_code_iso2: str | None = Field(
        default=None,
        alias="countryCodeISO2",
        min_length=2,
        max_length=2,
    )
    datetime: dt.datetime | None = Field(
        default=None,
        description="When the activity took place; drives CPI correction.",
    )

    @property
    def has_cost(self) -> bool:
        """Return ``True`` when both a non-zero cost amount and currency are set."""

        return bool(self.cost_amount) and bool(self.cost_currency)


def coerce_activity(activity: Activity | Mapping[str, object]) -> Activity:
    """Validate loosely typed input into an :class:`Activity`.

    Raises:
        pydantic.ValidationError: When ``activity`` does not match the schema.
    """

    if isinstance(activity, Activity):
        return activity
    return Activity.model_validate(activity)


def coerce_line_item(line_item: LineItem | Mapping[str, object]) -> LineItem:
    """Validate loosely typed input into a :class:`LineItem`."""

    if isinstance(line_item, LineItem):
        return line_item
    return LineItem.model_validate(line_item)
