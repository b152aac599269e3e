"""Footprint estimation: unit resolution, emission calculation and eligibility."""

from __future__ import annotations

from .calculator import (
    MEAL_KG_PER_THOUSAND_EUR,
    TRANSPORTATION_KG_PER_THOUSAND_EUR,
    EmissionCalculator,
)
from .eligibility import can_score
from .resolver import (
    ConversionRequest,
    UnitAmount,
    UnitResolution,
    resolve_unit,
    resolve_unit_and_amount,
    resolve_unit_and_amount_async,
)

__all__ = [
    "ConversionRequest",
    "EmissionCalculator",
    "MEAL_KG_PER_THOUSAND_EUR",
    "TRANSPORTATION_KG_PER_THOUSAND_EUR",
    "UnitAmount",
    "UnitResolution",
    "can_score",
    "resolve_unit",
    "resolve_unit_and_amount",
    "resolve_unit_and_amount_async",
]
