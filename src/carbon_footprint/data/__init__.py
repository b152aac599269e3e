"""Packaged reference data: footprint taxonomy, exchange rates and CPI."""

from __future__ import annotations

import importlib.resources as resources

__all__ = ["read_text"]


def read_text(name: str) -> str:
    """Return the UTF-8 text of the bundled resource ``name``.

    Raises:
        FileNotFoundError: When the resource is not part of the package.
    """

    return resources.files(__name__).joinpath(name).read_text(encoding="utf-8")
