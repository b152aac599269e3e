"""In-memory index over the footprint reference taxonomy.

The index is an arena: a flat, read-only mapping from key to
:class:`~carbon_footprint.taxonomy.models.FootprintEntry`, populated once by
:meth:`TaxonomyIndex.build` and never mutated afterwards. Keys are unique
across the whole tree, not only within a parent.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import cast

from carbon_footprint.definitions import UNITS, Unit
from carbon_footprint.errors import DuplicateKeyError, TaxonomyDocumentError
from carbon_footprint.taxonomy.models import (
    ROOT_KEY,
    FootprintEntry,
    Intensity,
    PerCountryIntensity,
    ScalarIntensity,
)

LOGGER = logging.getLogger(__name__)

CHILDREN_FIELD = "children"
UNIT_FIELD = "unit"
INTENSITY_FIELD = "intensityKilograms"
ICON_FIELD = "icon"
CONVERSIONS_FIELD = "conversions"

_STRUCTURAL_FIELDS = frozenset(
    {CHILDREN_FIELD, UNIT_FIELD, INTENSITY_FIELD, ICON_FIELD, CONVERSIONS_FIELD}
)

EntryPredicate = Callable[[FootprintEntry], bool]


def _always(_: FootprintEntry) -> bool:
    return True


class TaxonomyIndex:
    """Immutable key and path lookups over an indexed taxonomy."""

    __slots__ = ("_root", "_entries", "_icons")

    def __init__(self, root: FootprintEntry, entries: Mapping[str, FootprintEntry]):
        self._root = root
        self._entries: Mapping[str, FootprintEntry] = MappingProxyType(dict(entries))
        self._icons: Mapping[str, str | None] = MappingProxyType(
            {
                key: entry.icon
                for key, entry in self._entries.items()
                if not entry.is_root
            }
        )

    @classmethod
    def build(cls, document: Mapping[str, object]) -> TaxonomyIndex:
        """Index ``document`` depth-first, assigning keys, levels and parents.

        Args:
            document: Root node of the taxonomy document.

        Returns:
            The frozen index.

        Raises:
            DuplicateKeyError: When a key occurs more than once in the tree.
            TaxonomyDocumentError: When a node is structurally invalid.
        """

        builder = _IndexBuilder()
        root = builder.visit(ROOT_KEY, document, parent_key=None, level=0)
        ordered = {key: builder.built[key] for key in builder.order}
        index = cls(root, ordered)
        LOGGER.info(
            "Indexed footprint taxonomy",
            extra={"entry_count": len(index), "max_level": builder.max_level},
        )
        return index

    def get_root_entry(self) -> FootprintEntry:
        """Return the taxonomy root."""

        return self._root

    def get_entry_by_key(self, key: str) -> FootprintEntry | None:
        """Return the entry registered under ``key`` if any."""

        return self._entries.get(key)

    def get_entry_by_path(self, path: Sequence[str]) -> FootprintEntry | None:
        """Walk ``children`` from the root following ``path``.

        Returns:
            The entry reached, the root for an empty path, or ``None`` as soon
            as a segment is missing.
        """

        entry = self._root
        for segment in path:
            child = entry.children.get(segment)
            if child is None:
                return None
            entry = child
        return entry

    def get_descendants(
        self,
        entry: FootprintEntry | None,
        predicate: EntryPredicate | None = None,
        include_root: bool = False,
    ) -> dict[str, FootprintEntry]:
        """Return every entry below ``entry`` accepted by ``predicate``.

        A node rejected by ``predicate`` prunes its whole subtree: its children
        are not visited even when they would pass.

        Args:
            entry: Starting entry.
            predicate: Filter applied to each descendant. Accepts all when
                omitted.
            include_root: Whether ``entry`` itself is part of the result. The
                starting entry is not subject to ``predicate``.

        Returns:
            Mapping key -> entry in depth-first pre-order.

        Raises:
            ValueError: When ``entry`` is ``None``.
        """

        if entry is None:
            raise ValueError("Invalid entry: cannot enumerate descendants of None")
        keep = predicate or _always
        descendants: dict[str, FootprintEntry] = {}
        if include_root:
            descendants[entry.key] = entry
        _collect(entry, keep, descendants)
        return descendants

    @property
    def icons(self) -> Mapping[str, str | None]:
        """Icon of every non-root entry keyed by entry key."""

        return self._icons

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


def _collect(
    entry: FootprintEntry, keep: EntryPredicate, out: dict[str, FootprintEntry]
) -> None:
    for child in entry.children.values():
        if not keep(child):
            continue
        out[child.key] = child
        _collect(child, keep, out)


class _IndexBuilder:
    """Single-use depth-first walker producing frozen entries."""

    def __init__(self) -> None:
        self.order: list[str] = []
        self.seen: set[str] = set()
        self.built: dict[str, FootprintEntry] = {}
        self.max_level = 0

    def visit(
        self,
        key: str,
        node: object,
        *,
        parent_key: str | None,
        level: int,
    ) -> FootprintEntry:
        if key in self.seen:
            raise DuplicateKeyError(key)
        self.seen.add(key)
        self.order.append(key)
        self.max_level = max(self.max_level, level)

        if not isinstance(node, Mapping):
            raise TaxonomyDocumentError(f"Taxonomy node {key!r} must be a mapping")
        fields = cast(Mapping[str, object], node)

        raw_children = fields.get(CHILDREN_FIELD)
        if raw_children is None:
            raw_children = {}
        if not isinstance(raw_children, Mapping):
            raise TaxonomyDocumentError(
                f"Children of taxonomy node {key!r} must be a mapping"
            )

        children: dict[str, FootprintEntry] = {}
        for child_key, child_node in cast(Mapping[object, object], raw_children).items():
            if not isinstance(child_key, str) or not child_key:
                raise TaxonomyDocumentError(
                    f"Taxonomy node {key!r} has an invalid child key: {child_key!r}"
                )
            children[child_key] = self.visit(
                child_key, child_node, parent_key=key, level=level + 1
            )

        icon = fields.get(ICON_FIELD)
        entry = FootprintEntry(
            key=key,
            parent_key=parent_key,
            level=level,
            unit=_parse_unit(key, fields.get(UNIT_FIELD)),
            intensity=_parse_intensity(key, fields.get(INTENSITY_FIELD)),
            icon=None if icon is None else str(icon),
            conversions=_parse_conversions(key, fields.get(CONVERSIONS_FIELD)),
            metadata=MappingProxyType(
                {
                    name: value
                    for name, value in fields.items()
                    if name not in _STRUCTURAL_FIELDS
                }
            ),
            children=MappingProxyType(children),
        )
        self.built[key] = entry
        return entry


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _parse_unit(key: str, raw: object) -> Unit | None:
    if raw is None:
        return None
    try:
        return Unit(str(raw))
    except ValueError as exc:
        raise TaxonomyDocumentError(
            f"Taxonomy node {key!r} declares unknown unit {raw!r}; "
            f"expected one of {sorted(UNITS)}"
        ) from exc


def _parse_intensity(key: str, raw: object) -> Intensity | None:
    if raw is None:
        return None
    if _is_number(raw):
        return ScalarIntensity(float(cast(float, raw)))
    if isinstance(raw, Mapping) and raw:
        values: dict[str, float] = {}
        for country, value in cast(Mapping[object, object], raw).items():
            if not isinstance(country, str) or not _is_number(value):
                raise TaxonomyDocumentError(
                    f"Taxonomy node {key!r} has an invalid intensity for "
                    f"country {country!r}: {value!r}"
                )
            values[country] = float(cast(float, value))
        return PerCountryIntensity(MappingProxyType(values))
    raise TaxonomyDocumentError(
        f"Taxonomy node {key!r} must declare {INTENSITY_FIELD} as a number "
        f"or a non-empty country mapping, got {raw!r}"
    )


def _parse_conversions(key: str, raw: object) -> Mapping[str, float]:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, Mapping):
        raise TaxonomyDocumentError(
            f"Conversions of taxonomy node {key!r} must be a mapping"
        )
    conversions: dict[str, float] = {}
    for unit, factor in cast(Mapping[object, object], raw).items():
        if unit not in UNITS or not _is_number(factor):
            raise TaxonomyDocumentError(
                f"Taxonomy node {key!r} has an invalid conversion {unit!r}: {factor!r}"
            )
        conversions[cast(str, unit)] = float(cast(float, factor))
    return MappingProxyType(conversions)
