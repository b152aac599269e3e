"""Domain models for footprint taxonomy entries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from statistics import fmean
from types import MappingProxyType
from typing import TypeAlias

from carbon_footprint.definitions import Unit

ROOT_KEY = "__root__"

_EMPTY: Mapping[str, object] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ScalarIntensity:
    """A single kgCO2e-per-unit factor applying to every country."""

    value: float


@dataclass(frozen=True, slots=True)
class PerCountryIntensity:
    """kgCO2e-per-unit factors keyed by ISO-2 country code."""

    values: Mapping[str, float]

    def for_country(self, country_code_iso2: str) -> float | None:
        """Return the factor for ``country_code_iso2`` when listed."""

        return self.values.get(country_code_iso2)

    def average(self) -> float:
        """Return the unweighted arithmetic mean across all listed countries."""

        return fmean(self.values.values())


Intensity: TypeAlias = ScalarIntensity | PerCountryIntensity


@dataclass(frozen=True, slots=True, eq=False)
class FootprintEntry:
    """A node of the footprint reference taxonomy.

    Entries are created by :class:`~carbon_footprint.taxonomy.index.TaxonomyIndex`
    while it walks the reference document and are never mutated afterwards.
    Equality is identity based because two nodes can only be equal when they
    are the same node of the same index.
    """

    key: str
    parent_key: str | None
    level: int
    unit: Unit | None = None
    intensity: Intensity | None = None
    icon: str | None = None
    conversions: Mapping[str, float] = field(default_factory=lambda: _EMPTY)
    metadata: Mapping[str, object] = field(default_factory=lambda: _EMPTY)
    children: Mapping[str, FootprintEntry] = field(default_factory=lambda: _EMPTY)

    @property
    def is_root(self) -> bool:
        """Return ``True`` for the taxonomy root."""

        return self.parent_key is None

    @property
    def is_leaf(self) -> bool:
        """Return ``True`` when the entry has no children."""

        return not self.children

    def __repr__(self) -> str:
        return (
            f"FootprintEntry(key={self.key!r}, level={self.level}, "
            f"unit={self.unit!r}, children={len(self.children)})"
        )
