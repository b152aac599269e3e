"""Error kinds and tagged results returned by the footprint engine.

Initialisation problems with the reference taxonomy are raised as
exceptions and abort start-up. Everything that can go wrong while scoring a
single activity is reported as a :class:`Failure` value carrying an
:class:`ErrorKind`, so callers can branch on the kind without parsing
messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Generic, TypeAlias, TypeVar

__all__ = [
    "DuplicateKeyError",
    "ErrorKind",
    "Failure",
    "FootprintCalculationError",
    "FootprintError",
    "Outcome",
    "Success",
    "TaxonomyDocumentError",
    "TaxonomyError",
    "unwrap",
]

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Closed set of per-call failure kinds."""

    UNKNOWN_IDENTIFIER = "unknown_identifier"
    MISSING_INTENSITY = "missing_intensity"
    INCOMPATIBLE_UNIT = "incompatible_unit"
    INVALID_AMOUNT = "invalid_amount"
    MISSING_COUNTRY_INTENSITY = "missing_country_intensity"
    UNRECOGNIZED_MODE = "unrecognized_mode"
    UNSUPPORTED_ACTIVITY_TYPE = "unsupported_activity_type"
    MISSING_LINE_ITEMS = "missing_line_items"
    MISSING_COST = "missing_cost"
    UNKNOWN_CURRENCY = "unknown_currency"
    MISSING_CPI_DATA = "missing_cpi_data"
    RATE_UNAVAILABLE = "rate_unavailable"


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Successful computation result."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    """Failed computation with the offending identifier, unit or date."""

    kind: ErrorKind
    message: str
    identifier: str | None = None
    unit: str | None = None
    expected_unit: str | None = None
    country: str | None = None
    date: datetime | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready representation without empty fields."""

        payload: dict[str, object] = {"kind": self.kind.value, "message": self.message}
        for name in ("identifier", "unit", "expected_unit", "country"):
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        if self.date is not None:
            payload["date"] = self.date.isoformat()
        return payload


Outcome: TypeAlias = Success[T] | Failure


class FootprintError(Exception):
    """Base class for all footprint engine exceptions."""


class TaxonomyError(FootprintError):
    """Raised when the reference taxonomy cannot be loaded or indexed."""


class TaxonomyDocumentError(TaxonomyError):
    """Raised when a taxonomy node is structurally invalid."""


class DuplicateKeyError(TaxonomyError):
    """Raised when two taxonomy nodes share the same key."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Error while indexing footprint tree: there is already an entry for {key!r}"
        )
        self.key = key


class FootprintCalculationError(FootprintError):
    """Raised by the raising API when an activity cannot be scored."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> ErrorKind:
        """Return the kind of the wrapped failure."""

        return self.failure.kind


def unwrap(outcome: Outcome[T]) -> T:
    """Return the value of ``outcome`` or raise its failure.

    Raises:
        FootprintCalculationError: When ``outcome`` is a :class:`Failure`.
    """

    if isinstance(outcome, Failure):
        raise FootprintCalculationError(outcome)
    return outcome.value
