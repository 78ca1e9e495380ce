"""Global test configuration and fixtures.

Provides shared fixtures for all test levels including rate tables, mocked
provider sessions, a controllable fake geocoder and sample catalog data.
Ensures tests never reach the real geocoding provider.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.checkout.cart import CartStore
from storefront.config import DEFAULT_FIXED_RATES, GeocodingConfig
from storefront.models import (
    AddressComponents,
    Coordinates,
    GeocodeLookup,
    GeocodeResult,
    Product,
    ShippingRates,
)
from storefront.services.shipping import ShippingEstimator

DEPOT = Coordinates(lat=4.0511, lng=9.7679)

OPENCAGE_PAYLOAD = {
    "results": [
        {
            "formatted": "Molyko, Buea, Cameroon",
            "geometry": {"lat": 4.1537, "lng": 9.2920},
            "components": {
                "_type": "neighbourhood",
                "town": "Buea",
                "state": "Southwest",
                "country": "Cameroon",
            },
        },
        {
            "formatted": "Yaoundé, Centre, Cameroon",
            "geometry": {"lat": 3.8667, "lng": 11.5167},
            "components": {"city": "Yaoundé", "state": "Centre", "country": "Cameroon"},
        },
        {
            "formatted": "Unknown place, Cameroon",
            "components": {"city": "Nowhere"},
        },
        {
            "formatted": "Bafoussam, West, Cameroon",
            "geometry": {"lat": 5.4778, "lng": 10.4176},
            "components": {"city": "Bafoussam", "state": "West"},
        },
    ],
    "status": {"code": 200, "message": "OK"},
    "total_results": 4,
}


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Keep provider settings from the developer's shell out of tests."""
    for key in (
        "OPENCAGE_API_KEY",
        "GEOCODING_BASE_URL",
        "GEOCODING_COUNTRY_CODE",
        "GEOCODING_COUNTRY_HINT",
        "GEOCODING_RESULT_LIMIT",
        "GEOCODING_LANGUAGE",
        "GEOCODING_TIMEOUT",
        "LOCATION_DEBOUNCE_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def shipping_rates() -> ShippingRates:
    """Rates used on the storefront shipping page."""
    return ShippingRates(
        base_rate=1000,
        per_km_rate=100,
        min_fee=1000,
        max_fee=5000,
        default_fee=5000,
        origin=DEPOT,
        fixed_rates=dict(DEFAULT_FIXED_RATES),
    )


@pytest.fixture
def estimator(shipping_rates) -> ShippingEstimator:
    return ShippingEstimator(shipping_rates)


@pytest.fixture
def geocoding_config() -> GeocodingConfig:
    return GeocodingConfig(api_key="test-key", country_code="cm", result_limit=5, timeout=5)


def make_session(payload=None, status: int = 200, text: str = "", exc: Exception | None = None):
    """Build a MagicMock aiohttp session answering ``session.get`` once per call."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)

    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value.__aenter__.return_value = response
    return session


def make_result(
    formatted: str,
    lat: float = 4.1537,
    lng: float = 9.2920,
    **components: str,
) -> GeocodeResult:
    return GeocodeResult(
        formatted_address=formatted,
        coordinates=Coordinates(lat=lat, lng=lng),
        components=AddressComponents(**components),
    )


class FakeGeocoder:
    """Geocoder double recording calls; lookups can be held open with gates."""

    def __init__(self, results: dict[str, tuple[GeocodeResult, ...]] | None = None):
        self.calls: list[str] = []
        self.results = results or {}
        self._gates: dict[str, asyncio.Event] = {}

    def gate(self, query: str) -> asyncio.Event:
        """Hold lookups for ``query`` until the returned event is set."""
        event = asyncio.Event()
        self._gates[query] = event
        return event

    async def lookup(self, query: str) -> GeocodeLookup:
        self.calls.append(query)
        gate = self._gates.get(query)
        if gate is not None:
            await gate.wait()
        results = self.results.get(query, (make_result(f"{query}, Cameroon", city=query),))
        return GeocodeLookup(query=query, results=results)


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def sample_products() -> dict[str, Product]:
    return {
        "toner": Product(id="hp-85a", name="HP 85A Black Toner", price=25000, brand="HP", category="Toner"),
        "paper": Product(id="a4-ream", name="A4 Paper Ream 80g", price=3500, brand="Double A", category="Paper"),
        "mouse": Product(id="lgt-m185", name="Logitech M185 Wireless Mouse", price=7500, brand="Logitech"),
    }


@pytest.fixture
def cart(sample_products) -> CartStore:
    store = CartStore()
    store.add_item(sample_products["toner"], 2)
    store.add_item(sample_products["paper"], 1)
    return store
