"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import inspect
import os
import sys
from typing import Any

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from carbon_footprint.currency.static import (  # noqa: E402
    StaticCurrencyConverter,
    load_static_converter,
)
from carbon_footprint.model import PurchaseModel, load_purchase_model  # noqa: E402
from carbon_footprint.settings import FootprintSettings  # noqa: E402
from carbon_footprint.taxonomy.index import TaxonomyIndex  # noqa: E402

_ENV_VARS = (
    "FOOTPRINT_TAXONOMY_FILE",
    "FOOTPRINT_EXCHANGE_RATES_FILE",
    "FOOTPRINT_CPI_FILE",
    "FOOTPRINT_RATES_BASE_URL",
    "FOOTPRINT_RATES_TIMEOUT",
    "FOOTPRINT_LOG_LEVEL",
)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: mark test as requiring an event loop")


def pytest_pyfunc_call(pyfuncitem: Any) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames  # type: ignore[attr-defined]
        }

        event_loop = asyncio.new_event_loop()
        try:
            event_loop.run_until_complete(pyfuncitem.obj(**call_kwargs))
        finally:
            event_loop.close()
        return True
    return None


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of the packaged defaults."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> FootprintSettings:
    return FootprintSettings()


@pytest.fixture
def static_converter(settings: FootprintSettings) -> StaticCurrencyConverter:
    """Converter over the packaged exchange-rate and CPI tables."""

    return load_static_converter(settings)


@pytest.fixture
def model(settings: FootprintSettings) -> PurchaseModel:
    """Purchase model over the packaged reference data."""

    return load_purchase_model(settings=settings)


@pytest.fixture
def small_document() -> dict[str, object]:
    """A compact taxonomy exercising every kind of entry."""

    return {
        "children": {
            "Food": {
                "icon": "food",
                "children": {
                    "Groceries": {
                        "unit": "EUR",
                        "icon": "basket",
                        "intensityKilograms": {"DK": 0.8, "FR": 0.6},
                        "children": {
                            "Butter": {"unit": "kg", "intensityKilograms": 9.25},
                            "Milk": {
                                "unit": "L",
                                "intensityKilograms": 1.39,
                                "conversions": {"kg": 0.97},
                            },
                        },
                    },
                    "Restaurant": {"unit": "EUR", "intensityKilograms": 0.08},
                },
            },
            "Electronics": {
                "icon": "laptop",
                "children": {
                    "Phone": {"unit": "item", "intensityKilograms": 55.0},
                    "Charger": {"unit": "item", "intensityKilograms": 0},
                },
            },
        }
    }


@pytest.fixture
def small_index(small_document: dict[str, object]) -> TaxonomyIndex:
    return TaxonomyIndex.build(small_document)
