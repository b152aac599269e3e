"""Decide whether an activity carries enough data to be scored."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from carbon_footprint.definitions import ActivityType, TransportationMode
from carbon_footprint.schemas import Activity, coerce_activity

SCORABLE_TRANSPORTATION_MODES: Final[frozenset[TransportationMode]] = frozenset(
    {
        TransportationMode.CAR,
        TransportationMode.TRAIN,
        TransportationMode.PLANE,
        TransportationMode.PUBLIC_TRANSPORT,
    }
)


def can_score(activity: Activity | Mapping[str, object]) -> bool:
    """Return ``True`` when ``activity`` can be handed to the calculator.

    Meals and transportation by car, train, plane or public transport need a
    cost amount and currency. Purchases need at least one line item. Passing
    this check does not guarantee success: unknown identifiers or currencies
    still fail during computation.
    """

    act = coerce_activity(activity)
    if act.has_cost:
        if act.activity_type is ActivityType.MEAL:
            return True
        if act.activity_type is ActivityType.TRANSPORTATION:
            return act.transportation_mode in SCORABLE_TRANSPORTATION_MODES
    return act.activity_type is ActivityType.PURCHASE and bool(act.line_items)
