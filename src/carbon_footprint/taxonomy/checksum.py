"""Deterministic content hashing of the taxonomy document.

The model version embeds the checksum so that any behaviour-affecting change
to the reference data produces a new version and flags previously scored
activities for re-scoring.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Final

MODEL_NAME: Final[str] = "purchase"  # Must never change: stored with activities.
MODEL_SCHEMA_VERSION: Final[int] = 3
MODEL_CAN_RUN_VERSION: Final[int] = 1


def canonicalize(obj: object) -> str:
    """
    Return deterministic JSON serialization for obj.

    Uses sort_keys and compact separators so that the key order of the source
    document does not influence the output.
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
        default=_reject,
    )


def checksum(document: Mapping[str, object]) -> str:
    """Return the SHA-256 hex digest of the canonical ``document``."""
    serialized = canonicalize(document)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def model_version(document: Mapping[str, object]) -> str:
    """Compose the model version string for ``document``."""
    return format_model_version(checksum(document))


def format_model_version(document_checksum: str) -> str:
    """Compose a model version from a precomputed checksum."""
    return f"{MODEL_NAME}_{MODEL_SCHEMA_VERSION}_{document_checksum}"


def _reject(obj: object) -> object:
    raise TypeError(
        f"Object of type {type(obj).__name__} cannot be part of a taxonomy checksum"
    )
