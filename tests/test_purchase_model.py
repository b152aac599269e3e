"""End-to-end tests of the purchase model over the packaged reference data."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from carbon_footprint.currency.static import (
    StaticCurrencyConverter,
    load_exchange_rate_document,
)
from carbon_footprint.definitions import (
    CURRENCIES,
    PURCHASE_CATEGORY_COMBINED_PASSENGER_TRANSPORT,
    PURCHASE_CATEGORY_FOOD_SERVING_SERVICES,
    PURCHASE_CATEGORY_STORE_FOOD,
    PURCHASE_CATEGORY_STORE_HOUSEHOLD_APPLIANCE,
    PURCHASE_CATEGORY_TRANSPORT_AIR,
    PURCHASE_CATEGORY_TRANSPORT_RAIL,
    PURCHASE_CATEGORY_TRANSPORT_ROAD,
)
from carbon_footprint.errors import ErrorKind, FootprintCalculationError, Success
from carbon_footprint.model import PurchaseModel, load_purchase_model
from carbon_footprint.taxonomy import ROOT_KEY, checksum, load_taxonomy_document

APRIL_2020 = datetime(2020, 4, 11, 10, 20, 30, tzinfo=timezone.utc)

HOUSEHOLD_APPLIANCE_DK = 0.4028253119428596
HOUSEHOLD_APPLIANCE_AU = 0.4428823364363346
FOOD_DK = 0.817390437852872


def _purchase(*line_items: dict[str, object], **fields: object) -> dict[str, object]:
    return {"activityType": "ACTIVITY_TYPE_PURCHASE", "lineItems": list(line_items), **fields}


def test_model_identity(model: PurchaseModel) -> None:
    document = load_taxonomy_document()
    assert model.model_name == "purchase"
    assert model.model_can_run_version == 1
    assert model.model_version == f"purchase_3_{checksum(document)}"
    assert model.explanation["text"] is None


def test_model_version_tracks_taxonomy(tmp_path: Path, static_converter) -> None:
    path = tmp_path / "tree.json"
    path.write_text(
        json.dumps({"children": {"Butter": {"unit": "kg", "intensityKilograms": 9.25}}}),
        encoding="utf-8",
    )
    first = load_purchase_model(path, converter=static_converter)
    path.write_text(
        json.dumps({"children": {"Butter": {"unit": "kg", "intensityKilograms": 9.5}}}),
        encoding="utf-8",
    )
    second = load_purchase_model(path, converter=static_converter)
    assert first.model_version != second.model_version


def test_lookups_delegate_to_index(model: PurchaseModel) -> None:
    assert model.get_root_entry().key == ROOT_KEY
    diesel = model.get_entry_by_key("Diesel")
    assert diesel is not None
    path = [
        "Transportation",
        "Fuels and lubricants for personal transport equipment (ND)",
        "Diesel",
    ]
    assert model.get_entry_by_path(path) is diesel
    assert model.icons["Diesel"] == "gas-station"
    assert "Diesel" in model.get_descendants(model.get_root_entry())


def test_household_appliance_for_dk_in_eur(model: PurchaseModel) -> None:
    activity = _purchase(
        {"unit": "EUR", "value": 15, "identifier": PURCHASE_CATEGORY_STORE_HOUSEHOLD_APPLIANCE},
        countryCodeISO2="DK",
        datetime=APRIL_2020,
    )
    assert model.model_can_run(activity)
    # price * cpi correction * intensity
    assert model.carbon_emissions(activity) == pytest.approx(
        15 * (95.9 / 103.3) * HOUSEHOLD_APPLIANCE_DK
    )


def test_household_appliance_for_dk_without_date(model: PurchaseModel) -> None:
    activity = _purchase(
        {"unit": "EUR", "value": 15, "identifier": PURCHASE_CATEGORY_STORE_HOUSEHOLD_APPLIANCE},
        countryCodeISO2="DK",
    )
    assert model.model_can_run(activity)
    assert model.carbon_emissions(activity) == pytest.approx(15 * HOUSEHOLD_APPLIANCE_DK)


def test_date_without_any_cpi_fails(model: PurchaseModel) -> None:
    activity = _purchase(
        {"unit": "EUR", "value": 15, "identifier": PURCHASE_CATEGORY_STORE_HOUSEHOLD_APPLIANCE},
        countryCodeISO2="DK",
        datetime=datetime(2005, 4, 11, 10, 20, 30, tzinfo=timezone.utc),
    )
    assert model.model_can_run(activity)
    with pytest.raises(FootprintCalculationError, match="Unknown CPI for activity date") as excinfo:
        model.carbon_emissions(activity)
    assert excinfo.value.kind is ErrorKind.MISSING_CPI_DATA
    assert excinfo.value.failure.identifier == PURCHASE_CATEGORY_STORE_HOUSEHOLD_APPLIANCE


def test_country_without_cpi_for_year_uses_mean(model: PurchaseModel, static_converter) -> None:
    activity = _purchase(
        {"unit": "EUR", "value": 15, "identifier": PURCHASE_CATEGORY_STORE_HOUSEHOLD_APPLIANCE},
        countryCodeISO2="AU",
        datetime=APRIL_2020,
    )
    cpi = static_converter.cpi
    assert cpi is not None
    mean_2020 = cpi.index_for(2020)
    assert mean_2020 == pytest.approx((105.8 + 103.3 + 104.7 + 108.9 + 109.2) / 5)
    assert model.carbon_emissions(activity) == pytest.approx(
        15 * (92.2 / mean_2020) * HOUSEHOLD_APPLIANCE_AU
    )


def test_food_for_dk_in_dkk(model: PurchaseModel) -> None:
    activity = _purchase(
        {"unit": "DKK", "value": 1150, "identifier": PURCHASE_CATEGORY_STORE_FOOD},
        countryCodeISO2="DK",
        datetime=APRIL_2020,
    )
    assert model.model_can_run(activity)
    assert model.carbon_emissions(activity) == pytest.approx(
        (1150 / 7.4506) * (95.9 / 103.3) * 0.817390437852872
    )


def test_food_for_dk_in_dkk_during_2011_uses_historical_rate(model: PurchaseModel) -> None:
    activity = _purchase(
        {"unit": "DKK", "value": 1150, "identifier": PURCHASE_CATEGORY_STORE_FOOD},
        countryCodeISO2="DK",
        datetime=datetime(2011, 6, 1, tzinfo=timezone.utc),
    )
    assert model.carbon_emissions(activity) == pytest.approx((1150 / 7.4506) * FOOD_DK)


def test_non_monetary_units_in_liters(model: PurchaseModel) -> None:
    activity = _purchase(
        {"identifier": "Diesel", "unit": "L", "value": 10}, datetime=APRIL_2020
    )
    assert model.model_can_run(activity)
    assert model.carbon_emissions(activity) == pytest.approx(31.7)


def test_non_monetary_units_in_kilograms(model: PurchaseModel) -> None:
    activity = _purchase(
        {"identifier": "Butter", "unit": "kg", "value": 10}, datetime=APRIL_2020
    )
    assert model.model_can_run(activity)
    assert model.carbon_emissions(activity) == pytest.approx(92.5)


def test_purchase_and_meal_are_equivalent(model: PurchaseModel) -> None:
    activity = _purchase(
        {"identifier": PURCHASE_CATEGORY_FOOD_SERVING_SERVICES, "unit": "EUR", "value": 10},
        costCurrency="EUR",
        costAmount=10,
    )
    assert model.model_can_run(activity)
    assert model.carbon_emissions(activity) == pytest.approx(
        model.carbon_emissions({**activity, "activityType": "ACTIVITY_TYPE_MEAL"})
    )


@pytest.mark.parametrize(
    "mode,identifier",
    [
        ("car", PURCHASE_CATEGORY_TRANSPORT_ROAD),
        ("train", PURCHASE_CATEGORY_TRANSPORT_RAIL),
        ("public_transport", PURCHASE_CATEGORY_COMBINED_PASSENGER_TRANSPORT),
        ("plane", PURCHASE_CATEGORY_TRANSPORT_AIR),
    ],
)
def test_purchase_and_transportation_are_equivalent(
    model: PurchaseModel, mode: str, identifier: str
) -> None:
    activity = _purchase(
        {"identifier": identifier, "unit": "EUR", "value": 10},
        costCurrency="EUR",
        costAmount=10,
    )
    assert model.model_can_run(activity)
    transportation = {
        **activity,
        "transportationMode": mode,
        "activityType": "ACTIVITY_TYPE_TRANSPORTATION",
    }
    assert model.carbon_emissions(activity) == pytest.approx(
        model.carbon_emissions(transportation)
    )


def test_equivalence_holds_for_dated_foreign_currency(model: PurchaseModel) -> None:
    activity = _purchase(
        {"identifier": PURCHASE_CATEGORY_FOOD_SERVING_SERVICES, "unit": "DKK", "value": 300},
        costCurrency="DKK",
        costAmount=300,
        countryCodeISO2="DK",
        datetime=APRIL_2020,
    )
    assert model.carbon_emissions(activity) == pytest.approx(
        model.carbon_emissions({**activity, "activityType": "ACTIVITY_TYPE_MEAL"})
    )


def test_participants_halve_the_footprint(model: PurchaseModel) -> None:
    activity = _purchase({"identifier": "Diesel", "unit": "L", "value": 10}, participants=2)
    assert model.carbon_emissions(activity) == pytest.approx(15.85)


def test_evaluate_returns_tagged_result(model: PurchaseModel) -> None:
    ok = model.evaluate(_purchase({"identifier": "Butter", "unit": "kg", "value": 1}))
    assert ok == Success(pytest.approx(9.25))
    failure = model.evaluate(_purchase({"identifier": "Caviar", "unit": "kg", "value": 1}))
    assert not isinstance(failure, Success)
    assert failure.kind is ErrorKind.UNKNOWN_IDENTIFIER


def test_carbon_emissions_raises_with_kind(model: PurchaseModel) -> None:
    with pytest.raises(FootprintCalculationError) as excinfo:
        model.carbon_emissions(_purchase({"identifier": "Diesel", "unit": "kg", "value": 1}))
    assert excinfo.value.kind is ErrorKind.INCOMPATIBLE_UNIT
    assert excinfo.value.failure.expected_unit == "L"


def test_unrecognized_transportation_mode_is_reported(model: PurchaseModel) -> None:
    activity = {
        "activityType": "ACTIVITY_TYPE_TRANSPORTATION",
        "transportationMode": "rocket",
        "costAmount": 100,
        "costCurrency": "EUR",
    }
    assert model.model_can_run(activity) is False
    with pytest.raises(FootprintCalculationError) as excinfo:
        model.carbon_emissions(activity)
    assert excinfo.value.kind is ErrorKind.UNRECOGNIZED_MODE


def test_unsupported_activity_type_is_reported(model: PurchaseModel) -> None:
    activity = {"activityType": "ACTIVITY_TYPE_GROCERY", "costAmount": 100, "costCurrency": "EUR"}
    assert model.model_can_run(activity) is False
    with pytest.raises(FootprintCalculationError) as excinfo:
        model.carbon_emissions(activity)
    assert excinfo.value.kind is ErrorKind.UNSUPPORTED_ACTIVITY_TYPE


async def test_carbon_emissions_async_matches_sync(model: PurchaseModel) -> None:
    activity = _purchase(
        {"unit": "DKK", "value": 1150, "identifier": PURCHASE_CATEGORY_STORE_FOOD},
        countryCodeISO2="DK",
        datetime=APRIL_2020,
    )
    assert await model.carbon_emissions_async(activity) == model.carbon_emissions(activity)


def test_currency_tables_cover_defined_currencies(static_converter) -> None:
    assert sorted(static_converter.available_currencies()) == sorted(CURRENCIES)


def test_2011_currency_table_covers_defined_currencies() -> None:
    _, historical = load_exchange_rate_document()
    assert sorted(historical[2011]) == sorted(CURRENCIES)


def test_custom_converter_is_used(model: PurchaseModel) -> None:
    converter = StaticCurrencyConverter({"DKK": 10.0})
    custom = PurchaseModel(model.index, converter, document_checksum="0" * 64)
    activity = _purchase(
        {"unit": "DKK", "value": 100, "identifier": PURCHASE_CATEGORY_STORE_FOOD},
        countryCodeISO2="DK",
    )
    assert custom.carbon_emissions(activity) == pytest.approx(10 * FOOD_DK)
    assert custom.model_version == "purchase_3_" + "0" * 64
