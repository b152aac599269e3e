"""Load the footprint taxonomy document from disk or packaged resources."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import cast

import yaml

from carbon_footprint import data
from carbon_footprint.errors import TaxonomyError
from carbon_footprint.settings import FootprintSettings, get_settings

LOGGER = logging.getLogger(__name__)

DEFAULT_TAXONOMY_RESOURCE = "footprints.yml"


def load_taxonomy_document(
    path: str | Path | None = None, *, settings: FootprintSettings | None = None
) -> dict[str, object]:
    """Load the taxonomy document.

    Args:
        path: Explicit document path. When omitted the ``FOOTPRINT_TAXONOMY_FILE``
            environment variable is consulted, then the packaged default.
        settings: Optional pre-instantiated settings.

    Returns:
        The parsed document as a mapping with string keys.

    Raises:
        TaxonomyError: When the document is missing, unparsable or not a
            mapping at the top level.
    """

    if path is None:
        settings_obj = settings or get_settings()
        path = settings_obj.taxonomy_file
    if path is None:
        LOGGER.debug(
            "Loading packaged taxonomy document",
            extra={"resource": DEFAULT_TAXONOMY_RESOURCE},
        )
        text = read_resource_text(DEFAULT_TAXONOMY_RESOURCE)
        return parse_document(text, suffix=".yml", source=DEFAULT_TAXONOMY_RESOURCE)

    document_path = Path(path)
    try:
        text = document_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TaxonomyError(f"Cannot read taxonomy document {document_path}") from exc
    LOGGER.debug("Loading taxonomy document", extra={"path": str(document_path)})
    return parse_document(
        text, suffix=document_path.suffix.lower(), source=str(document_path)
    )


def read_resource_text(name: str) -> str:
    """Return the text of a resource bundled in :mod:`carbon_footprint.data`."""

    try:
        return data.read_text(name)
    except (FileNotFoundError, OSError, UnicodeDecodeError) as exc:
        raise TaxonomyError(f"Packaged resource {name!r} is unavailable") from exc


def parse_document(text: str, *, suffix: str, source: str) -> dict[str, object]:
    """Parse JSON or YAML ``text`` into a string-keyed mapping."""

    try:
        if suffix == ".json":
            loaded: object = json.loads(text)
        else:
            loaded = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TaxonomyError(f"Cannot parse taxonomy document {source}") from exc

    if not isinstance(loaded, dict):
        raise TaxonomyError(f"Taxonomy document {source} must be a mapping")
    document = cast(dict[object, object], loaded)
    for key in document:
        if not isinstance(key, str):
            raise TaxonomyError(
                f"Taxonomy document {source} has a non-string key: {key!r}"
            )
    return cast(dict[str, object], document)
