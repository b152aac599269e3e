"""Public purchase footprint model consumed by integrations and the UI."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

from carbon_footprint.currency.static import load_static_converter
from carbon_footprint.errors import Outcome, unwrap
from carbon_footprint.estimation.calculator import EmissionCalculator
from carbon_footprint.estimation.eligibility import can_score
from carbon_footprint.estimation.resolver import Converter
from carbon_footprint.schemas import Activity
from carbon_footprint.settings import FootprintSettings, get_settings
from carbon_footprint.taxonomy.checksum import (
    MODEL_CAN_RUN_VERSION,
    MODEL_NAME,
    checksum,
    format_model_version,
)
from carbon_footprint.taxonomy.index import EntryPredicate, TaxonomyIndex
from carbon_footprint.taxonomy.loader import load_taxonomy_document
from carbon_footprint.taxonomy.models import FootprintEntry

LOGGER = logging.getLogger(__name__)

EXPLANATION: Final[Mapping[str, object]] = {
    "text": None,
    "links": (
        {
            "label": "Tomorrow footprint database",
            "href": "https://github.com/tmrowco/northapp-contrib/blob/master/co2eq/purchase/footprints.yml",
        },
    ),
}


class PurchaseModel:
    """Score activities against a frozen footprint taxonomy.

    The model owns the taxonomy index and the currency collaborator. Its
    version is derived from the taxonomy content so that a change to the
    reference data invalidates previously stored scores.
    """

    model_name: Final[str] = MODEL_NAME
    model_can_run_version: Final[int] = MODEL_CAN_RUN_VERSION
    explanation: Final[Mapping[str, object]] = EXPLANATION

    def __init__(
        self,
        index: TaxonomyIndex,
        converter: Converter,
        *,
        document_checksum: str,
    ) -> None:
        self._index = index
        self._calculator = EmissionCalculator(index=index, converter=converter)
        self._model_version = format_model_version(document_checksum)

    @classmethod
    def from_document(
        cls, document: Mapping[str, object], converter: Converter
    ) -> PurchaseModel:
        """Index ``document`` and bind it to ``converter``.

        Raises:
            DuplicateKeyError: When two taxonomy nodes share a key.
            TaxonomyDocumentError: When a node is structurally invalid.
        """

        index = TaxonomyIndex.build(document)
        model = cls(index, converter, document_checksum=checksum(document))
        LOGGER.info(
            "Purchase model ready",
            extra={"model_version": model.model_version, "entry_count": len(index)},
        )
        return model

    @property
    def model_version(self) -> str:
        """Version string combining the schema version and taxonomy checksum."""

        return self._model_version

    @property
    def index(self) -> TaxonomyIndex:
        """The underlying taxonomy index."""

        return self._index

    @property
    def calculator(self) -> EmissionCalculator:
        """The emission calculator bound to this model."""

        return self._calculator

    @property
    def icons(self) -> Mapping[str, str | None]:
        """Icon of every taxonomy entry keyed by entry key."""

        return self._index.icons

    def get_root_entry(self) -> FootprintEntry:
        return self._index.get_root_entry()

    def get_entry_by_key(self, key: str) -> FootprintEntry | None:
        return self._index.get_entry_by_key(key)

    def get_entry_by_path(self, path: Sequence[str]) -> FootprintEntry | None:
        return self._index.get_entry_by_path(path)

    def get_descendants(
        self,
        entry: FootprintEntry | None,
        predicate: EntryPredicate | None = None,
        include_root: bool = False,
    ) -> dict[str, FootprintEntry]:
        return self._index.get_descendants(entry, predicate, include_root)

    def model_can_run(self, activity: Activity | Mapping[str, object]) -> bool:
        """Return ``True`` when ``activity`` carries enough data to be scored."""

        return can_score(activity)

    def evaluate(self, activity: Activity | Mapping[str, object]) -> Outcome[float]:
        """Return the footprint of ``activity`` as a tagged result."""

        return self._calculator.emission_of_activity(activity)

    def carbon_emissions(self, activity: Activity | Mapping[str, object]) -> float:
        """Return the kgCO2e footprint of ``activity``.

        Raises:
            FootprintCalculationError: When the activity cannot be scored.
            pydantic.ValidationError: When ``activity`` does not match the
                activity schema.
        """

        return unwrap(self._calculator.emission_of_activity(activity))

    async def carbon_emissions_async(
        self, activity: Activity | Mapping[str, object]
    ) -> float:
        """Asynchronous twin of :meth:`carbon_emissions`."""

        return unwrap(await self._calculator.emission_of_activity_async(activity))


def load_purchase_model(
    taxonomy_path: str | Path | None = None,
    *,
    converter: Converter | None = None,
    settings: FootprintSettings | None = None,
) -> PurchaseModel:
    """Build a :class:`PurchaseModel` from configured or packaged reference data.

    Args:
        taxonomy_path: Explicit taxonomy document; defaults to
            ``FOOTPRINT_TAXONOMY_FILE`` or the packaged document.
        converter: Currency collaborator; defaults to the static converter
            over the configured or packaged rate and CPI tables.
        settings: Optional pre-instantiated settings.
    """

    settings_obj = settings or get_settings()
    document = load_taxonomy_document(taxonomy_path, settings=settings_obj)
    return PurchaseModel.from_document(
        document, converter or load_static_converter(settings_obj)
    )
