"""Stored constants shared by the footprint engine.

The string values are persisted alongside activities and must never change.
The Python names can be renamed freely.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class Unit(StrEnum):
    """Units an emission intensity can be expressed per."""

    LITER = "L"
    KILOGRAMS = "kg"
    MONETARY_EUR = "EUR"
    ITEM = "item"
    ENERGY = "kWh"
    PORTION = "portion"
    GLASS = "glass"
    CUP = "cup"


UNITS: Final[frozenset[str]] = frozenset(unit.value for unit in Unit)

PHYSICAL_UNITS: Final[frozenset[Unit]] = frozenset(
    {
        Unit.LITER,
        Unit.KILOGRAMS,
        Unit.ENERGY,
        Unit.PORTION,
        Unit.GLASS,
        Unit.CUP,
    }
)
MONETARY_UNITS: Final[frozenset[Unit]] = frozenset({Unit.MONETARY_EUR})
COUNT_UNITS: Final[frozenset[Unit]] = frozenset({Unit.ITEM})

REFERENCE_CURRENCY: Final[str] = Unit.MONETARY_EUR.value

# ECB reference currencies, keyed by ISO 4217 code.
CURRENCIES: Final[tuple[str, ...]] = (
    "AUD",
    "BGN",
    "BRL",
    "CAD",
    "CHF",
    "CNY",
    "CZK",
    "DKK",
    "EUR",
    "GBP",
    "HKD",
    "HRK",
    "HUF",
    "IDR",
    "ILS",
    "INR",
    "ISK",
    "JPY",
    "KRW",
    "MXN",
    "MYR",
    "NOK",
    "NZD",
    "PHP",
    "PLN",
    "RON",
    "RUB",
    "SEK",
    "SGD",
    "THB",
    "TRY",
    "USD",
    "ZAR",
)


class ActivityType(StrEnum):
    """Activity categories, each tied to a dedicated UI."""

    ELECTRICITY = "ACTIVITY_TYPE_ELECTRICITY"
    ELECTRIC_VEHICLE_CHARGING = "ACTIVITY_TYPE_ELECTRIC_VEHICLE_CHARGING"
    ELECTRIC_HEATING = "ACTIVITY_TYPE_ELECTRIC_HEATING"
    NON_ELECTRIC_HEATING = "ACTIVITY_TYPE_NON_ELECTRIC_HEATING"
    TRANSPORTATION = "ACTIVITY_TYPE_TRANSPORTATION"
    MEAL = "ACTIVITY_TYPE_MEAL"
    PURCHASE = "ACTIVITY_TYPE_PURCHASE"


class TransportationMode(StrEnum):
    """Means of transportation reported on a trip."""

    PLANE = "plane"
    BIKE = "bike"
    EBIKE = "ebike"
    CAR = "car"
    BUS = "bus"
    PUBLIC_TRANSPORT = "public_transport"
    TRAIN = "train"
    FERRY = "ferry"
    ESCOOTER = "escooter"
    MOTORBIKE = "motorbike"
    FOOT = "foot"


# Food and beverages
PURCHASE_CATEGORY_FOOD: Final = "Food"
PURCHASE_CATEGORY_FOOD_BAKERY: Final = "Cereals and cereal products (ND)"
PURCHASE_CATEGORY_FOOD_SERVING_SERVICES: Final = "FOOD AND BEVERAGE SERVING SERVICES"
PURCHASE_CATEGORY_MOBILE_PHONE: Final = "Mobile phone"

# Stores
PURCHASE_CATEGORY_STORE_CLOTHING: Final = "CLOTHING"
PURCHASE_CATEGORY_STORE_FOOD: Final = "FOOD AND NON-ALCOHOLIC BEVERAGES"
PURCHASE_CATEGORY_STORE_HARDWARE: Final = "TOOLS AND EQUIPMENT FOR HOUSE AND GARDEN"
PURCHASE_CATEGORY_STORE_GARDEN_AND_PET: Final = "GARDEN PRODUCTS AND PETS"
PURCHASE_CATEGORY_STORE_ELECTRONIC: Final = "Information and communication equipment"
PURCHASE_CATEGORY_STORE_BOOKS: Final = "NEWSPAPERS, BOOKS AND STATIONERY"
PURCHASE_CATEGORY_STORE_PERSONAL_CARE: Final = "PERSONAL CARE"
PURCHASE_CATEGORY_STORE_FURNISHING: Final = "Furnishings, loose carpets and rugs (D)"
PURCHASE_CATEGORY_STORE_HOUSEHOLD_APPLIANCE: Final = "HOUSEHOLD APPLIANCES"

# Healthcare
PURCHASE_CATEGORY_MEDICINES_AND_HEALTH_PRODUCTS: Final = "MEDICINES AND HEALTH PRODUCTS"
PURCHASE_CATEGORY_HEALTHCARE_DOCTOR: Final = "OUTPATIENT CARE SERVICES"

# Transportation
PURCHASE_CATEGORY_TRANSPORTATION_FUEL: Final = (
    "Fuels and lubricants for personal transport equipment (ND)"
)
PURCHASE_CATEGORY_TRANSPORTATION_AUTOMOTIVE_MAINTENANCE_AND_REPAIR: Final = (
    "Maintenance and repair of personal transport equipment (S)"
)
PURCHASE_CATEGORY_TRANSPORTATION_AUTOMOTIVE_PARTS: Final = (
    "Parts and accessories for personal transport equipment (SD)"
)
PURCHASE_CATEGORY_TRANSPORT_ROAD: Final = "PASSENGER TRANSPORT BY ROAD"
PURCHASE_CATEGORY_TRANSPORT_RAIL: Final = "PASSENGER TRANSPORT BY RAILWAY"
PURCHASE_CATEGORY_TRANSPORT_AIR: Final = "PASSENGER TRANSPORT BY AIR"
PURCHASE_CATEGORY_COMBINED_PASSENGER_TRANSPORT: Final = "COMBINED PASSENGER TRANSPORT"

# Entertainment
PURCHASE_CATEGORY_ENTERTAINMENT_HOTEL: Final = "Hotel"
PURCHASE_CATEGORY_ENTERTAINMENT_MOVIE_THEATER: Final = "Cinema"
