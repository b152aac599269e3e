"""Footprint reference taxonomy: loading, indexing and versioning."""

from __future__ import annotations

from carbon_footprint.taxonomy.checksum import (
    MODEL_CAN_RUN_VERSION,
    MODEL_NAME,
    MODEL_SCHEMA_VERSION,
    checksum,
    model_version,
)
from carbon_footprint.taxonomy.index import TaxonomyIndex
from carbon_footprint.taxonomy.loader import load_taxonomy_document
from carbon_footprint.taxonomy.models import (
    ROOT_KEY,
    FootprintEntry,
    Intensity,
    PerCountryIntensity,
    ScalarIntensity,
)

__all__ = [
    "FootprintEntry",
    "Intensity",
    "MODEL_CAN_RUN_VERSION",
    "MODEL_NAME",
    "MODEL_SCHEMA_VERSION",
    "PerCountryIntensity",
    "ROOT_KEY",
    "ScalarIntensity",
    "TaxonomyIndex",
    "checksum",
    "load_taxonomy_document",
    "model_version",
]
