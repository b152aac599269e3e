"""Environment-backed settings primitives for :mod:`carbon_footprint`."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["DEFAULT_RATES_BASE_URL", "FootprintSettings", "get_settings"]

DEFAULT_RATES_BASE_URL = "https://api.frankfurter.app"


class FootprintSettings(BaseSettings):
    """Expose environment-derived configuration knobs for the footprint engine.

    All environment lookups go through this class. Every attribute maps to a
    documented environment variable and falls back to the packaged reference
    data or an inline default when the variable is absent.

    Attributes:
        taxonomy_file: Path to a footprint taxonomy document (YAML or JSON).
        exchange_rates_file: Path to an exchange-rate table document.
        cpi_file: Path to a consumer price index document.
        rates_base_url: Base URL of a Frankfurter-compatible exchange-rate API.
        rates_timeout: Timeout in seconds for exchange-rate HTTP requests.
        log_level: Logging level name used by the command-line entry point.
    """

    taxonomy_file: str | None = Field(default=None, alias="FOOTPRINT_TAXONOMY_FILE")
    exchange_rates_file: str | None = Field(
        default=None, alias="FOOTPRINT_EXCHANGE_RATES_FILE"
    )
    cpi_file: str | None = Field(default=None, alias="FOOTPRINT_CPI_FILE")
    rates_base_url: str = Field(
        default=DEFAULT_RATES_BASE_URL, alias="FOOTPRINT_RATES_BASE_URL"
    )
    rates_timeout: float = Field(default=8.0, alias="FOOTPRINT_RATES_TIMEOUT")
    log_level: str = Field(default="INFO", alias="FOOTPRINT_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator("rates_timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> float:
        """Parse the HTTP timeout while tolerating malformed input.

        Args:
            value: Raw environment value.

        Returns:
            Parsed positive float, otherwise the default of eight seconds.
        """

        parsed: float | None = None
        if isinstance(value, (int, float)):
            parsed = float(value)
        elif isinstance(value, str):
            try:
                parsed = float(value.strip())
            except ValueError:
                parsed = None
        if parsed is None or parsed <= 0:
            return 8.0
        return parsed

    @field_validator("taxonomy_file", "exchange_rates_file", "cpi_file", mode="before")
    @classmethod
    def _blank_path_is_unset(cls, value: object) -> str | None:
        """Treat empty path variables as unset."""

        if value in (None, ""):
            return None
        if isinstance(value, str):
            return value.strip() or None
        return str(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip().upper()
        return "INFO"


def get_settings() -> FootprintSettings:
    """Return a :class:`FootprintSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return FootprintSettings()
