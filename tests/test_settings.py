"""Tests for environment-backed settings."""

from __future__ import annotations

import pytest

from carbon_footprint.settings import DEFAULT_RATES_BASE_URL, FootprintSettings, get_settings


def test_defaults() -> None:
    settings = get_settings()
    assert settings.taxonomy_file is None
    assert settings.exchange_rates_file is None
    assert settings.cpi_file is None
    assert settings.rates_base_url == DEFAULT_RATES_BASE_URL
    assert settings.rates_timeout == 8.0
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOOTPRINT_TAXONOMY_FILE", "/data/tree.yml")
    monkeypatch.setenv("FOOTPRINT_RATES_BASE_URL", "https://rates.test")
    monkeypatch.setenv("FOOTPRINT_RATES_TIMEOUT", "2.5")
    monkeypatch.setenv("FOOTPRINT_LOG_LEVEL", " debug ")

    settings = FootprintSettings()
    assert settings.taxonomy_file == "/data/tree.yml"
    assert settings.rates_base_url == "https://rates.test"
    assert settings.rates_timeout == 2.5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["soon", "0", "-4", ""])
def test_invalid_timeout_falls_back(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("FOOTPRINT_RATES_TIMEOUT", raw)
    assert FootprintSettings().rates_timeout == 8.0


def test_blank_paths_are_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOOTPRINT_CPI_FILE", "   ")
    monkeypatch.setenv("FOOTPRINT_EXCHANGE_RATES_FILE", "")
    settings = FootprintSettings()
    assert settings.cpi_file is None
    assert settings.exchange_rates_file is None


def test_blank_log_level_defaults_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOOTPRINT_LOG_LEVEL", "")
    assert FootprintSettings().log_level == "INFO"
