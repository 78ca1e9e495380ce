"""Configuration management for the storefront shipping core.

Handles environment variables, the YAML shipping table and default settings.
Provides structured configuration classes for the shipping estimator, the
geocoding provider and the store identity used on receipts.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default zones served at a flat fee, in XAF.
DEFAULT_FIXED_RATES: dict[str, int] = {
    "Buea": 1000,
    "Limbe": 1000,
    "Mutengene": 1000,
    "Tiko": 1500,
    "Kumba": 2000,
    "Douala": 2500,
    "Yaoundé": 3000,
    "Bamenda": 3500,
    "Garoua": 4000,
    "Maroua": 4500,
    "Ngaoundéré": 4500,
}


class ShippingConfig(BaseSettings):
    """Distance-based delivery fee parameters.

    Attributes:
        base_rate: Flat part of every distance-based fee.
        per_km_rate: Fee added per kilometer from the depot.
        min_fee: Lower clamp for distance-based fees.
        max_fee: Upper clamp for distance-based fees.
        default_fee: Flat fee used when the destination cannot be geocoded.
        origin_lat: Depot latitude in decimal degrees.
        origin_lng: Depot longitude in decimal degrees.
        currency: ISO currency code for all fees.
    """
    model_config = SettingsConfigDict(env_prefix="SHIPPING_")

    base_rate: float = 1000.0
    per_km_rate: float = 100.0
    min_fee: int = 1000
    max_fee: int = 5000
    default_fee: int = 5000
    origin_lat: float = 4.0511  # Douala depot
    origin_lng: float = 9.7679
    currency: str = "XAF"


class GeocodingConfig(BaseSettings):
    """Geocoding provider settings.

    Attributes:
        api_key: OpenCage API key, geocoding is disabled without it.
        base_url: Provider JSON endpoint.
        country_code: Country restriction sent with every lookup.
        country_hint: Optional suffix appended to queries before lookup.
        result_limit: Maximum number of candidates requested.
        language: Preferred language for formatted addresses.
        timeout: HTTP request timeout in seconds.
        debounce_seconds: Quiet period before a typed query is looked up.
    """
    model_config = SettingsConfigDict(populate_by_name=True)

    api_key: str | None = Field(default=None, validation_alias="OPENCAGE_API_KEY")
    base_url: str = Field(
        default="https://api.opencagedata.com/geocode/v1/json", validation_alias="GEOCODING_BASE_URL"
    )
    country_code: str = Field(default="cm", validation_alias="GEOCODING_COUNTRY_CODE")
    country_hint: str | None = Field(default=None, validation_alias="GEOCODING_COUNTRY_HINT")
    result_limit: int = Field(default=5, validation_alias="GEOCODING_RESULT_LIMIT")
    language: str = Field(default="en", validation_alias="GEOCODING_LANGUAGE")
    timeout: int = Field(default=15, validation_alias="GEOCODING_TIMEOUT")
    debounce_seconds: float = Field(default=0.3, validation_alias="LOCATION_DEBOUNCE_SECONDS")


class StoreConfig(BaseSettings):
    """Store identity printed on receipts."""
    model_config = SettingsConfigDict(populate_by_name=True)

    name: str = Field(default="TechSupplies Cameroon", validation_alias="STORE_NAME")
    support_email: str = Field(
        default="support@techsuppliescameroon.com", validation_alias="STORE_SUPPORT_EMAIL"
    )


class Config:
    """Application configuration manager.

    Centralizes loading of environment variables, the shipping YAML table and
    default values. Provides typed access to configuration sections for the
    shipping estimator, geocoding client and checkout.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to storefront/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.geocoding = GeocodingConfig()
        self.store = StoreConfig()

        shipping_path = self.config_dir / "shipping.yml"
        if shipping_path.exists():
            with open(shipping_path, encoding="utf-8") as f:
                shipping_data = yaml.safe_load(f) or {}

            origin = shipping_data.get("origin", {})
            rates = shipping_data.get("rates", {})
            clamp = rates.get("clamp", {})
            self.shipping = ShippingConfig(
                base_rate=rates.get("base_rate", 1000.0),
                per_km_rate=rates.get("per_km_rate", 100.0),
                min_fee=clamp.get("min", 1000),
                max_fee=clamp.get("max", 5000),
                default_fee=rates.get("default_fee", 5000),
                origin_lat=origin.get("lat", 4.0511),
                origin_lng=origin.get("lng", 9.7679),
                currency=shipping_data.get("currency", "XAF"),
            )
            self.fixed_rates = self._parse_fixed_rates(shipping_data.get("fixed_rates"))
        else:
            # Use defaults if config file not found
            self.shipping = ShippingConfig()
            self.fixed_rates = dict(DEFAULT_FIXED_RATES)

    @staticmethod
    def _parse_fixed_rates(raw: Any) -> dict[str, int]:
        """Read the city -> fee table from YAML data.

        Args:
            raw: Mapping loaded from the ``fixed_rates`` key, may be None.

        Returns:
            Dictionary of city names to integer fees.

        Raises:
            ValueError: If the table is not a mapping or a fee is not numeric.
        """
        if raw is None:
            return dict(DEFAULT_FIXED_RATES)
        if not isinstance(raw, dict):
            raise ValueError("fixed_rates must be a mapping of city to fee")

        return {str(city): int(fee) for city, fee in raw.items()}


# Global configuration instance
config = Config()
