"""Carbon Footprint - kgCO2e scoring of meals, trips and purchases."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "Activity",
    "EmissionCalculator",
    "ErrorKind",
    "Failure",
    "FootprintCalculationError",
    "LineItem",
    "PurchaseModel",
    "Success",
    "TaxonomyIndex",
    "load_purchase_model",
]

if TYPE_CHECKING:
    from .errors import ErrorKind, Failure, FootprintCalculationError, Success
    from .estimation import EmissionCalculator
    from .model import PurchaseModel, load_purchase_model
    from .schemas import Activity, LineItem
    from .taxonomy import TaxonomyIndex


def __getattr__(name: str) -> Any:
    """Lazily import heavy modules to avoid eager dependency loading."""

    module_map = {
        "Activity": "schemas",
        "EmissionCalculator": "estimation",
        "ErrorKind": "errors",
        "Failure": "errors",
        "FootprintCalculationError": "errors",
        "LineItem": "schemas",
        "PurchaseModel": "model",
        "Success": "errors",
        "TaxonomyIndex": "taxonomy",
        "load_purchase_model": "model",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
