"""Tests for the shipping fee estimator.

Covers city resolution, the fixed-rate table, the clamped distance formula,
half-up rounding and the manual-address fallback.
"""

import math

import pytest
from pydantic import ValidationError

from conftest import DEPOT, make_result
from storefront.errors import InvalidQuoteInputError
from storefront.models import AddressComponents, Coordinates, GeocodeResult, ShippingRates
from storefront.services.shipping import ShippingEstimator, normalize_city, resolve_city


def _north_of_depot(km: float) -> tuple[float, float]:
    """Coordinates ``km`` kilometers due north of the depot."""
    return DEPOT.lat + math.degrees(km / 6371.0), DEPOT.lng


class TestCityResolution:
    def test_prefers_city_over_town_state_village(self):
        components = AddressComponents(city="Douala", town="Bonaberi", state="Littoral", village="X")
        assert resolve_city(components) == "Douala"

    def test_falls_back_in_order(self):
        assert resolve_city(AddressComponents(town="Buea", state="Southwest")) == "Buea"
        assert resolve_city(AddressComponents(state="Southwest", village="Bokwai")) == "Southwest"
        assert resolve_city(AddressComponents(village="Bokwai")) == "Bokwai"

    def test_empty_when_no_component(self):
        assert resolve_city(AddressComponents(country="Cameroon")) == ""

    @pytest.mark.parametrize(
        "name",
        ["Yaoundé", "Yaounde", "yaounde", "YAOUNDÉ", "  Yaoundé "],
    )
    def test_normalization_folds_case_and_diacritics(self, name):
        assert normalize_city(name) == "yaounde"


class TestFixedRates:
    def test_scenario_a_table_wins_at_zero_distance(self, estimator):
        """Buea at the depot coordinate still pays its flat fee."""
        selected = make_result("Buea, Cameroon", lat=4.0511, lng=9.7679, city="Buea")

        quote = estimator.quote(selected)

        assert quote.fee == 1000
        assert quote.fixed_rate is True
        assert quote.distance_km is None
        assert quote.city == "Buea"

    def test_table_value_returned_regardless_of_distance(self, estimator):
        """Maroua is ~1000 km away, far beyond max_fee, yet pays 4500."""
        selected = make_result("Maroua, Far North", lat=10.5956, lng=14.3247, city="Maroua")
        assert estimator.quote(selected).fee == 4500

    def test_fixed_rate_may_exceed_clamp(self, shipping_rates):
        rates = shipping_rates.model_copy(update={"fixed_rates": {"Kribi": 7000}})
        estimator = ShippingEstimator(rates)

        quote = estimator.quote(make_result("Kribi", lat=2.9404, lng=9.9101, city="Kribi"))

        assert quote.fee == 7000

    @pytest.mark.parametrize("city", ["Yaounde", "yaoundé", "YAOUNDE"])
    def test_lookup_ignores_case_and_accents(self, estimator, city):
        selected = make_result("Yaoundé, Centre", lat=3.8667, lng=11.5167, city=city)
        assert estimator.quote(selected).fee == 3000

    def test_town_component_matches_table(self, estimator):
        selected = make_result("Molyko, Buea", town="Buea", state="Southwest")
        quote = estimator.quote(selected)
        assert quote.fee == 1000
        assert quote.city == "Buea"

    def test_unknown_city_is_none(self, estimator):
        assert estimator.fixed_rate_for("Bafoussam") is None
        assert estimator.fixed_rate_for("") is None


class TestDistanceFee:
    def test_scenario_b_clamped_to_max(self, estimator):
        # 1000 + 42 * 100 = 5200 -> 5000
        assert estimator.distance_fee(42.0) == 5000

    def test_scenario_c_within_bounds(self, shipping_rates):
        estimator = ShippingEstimator(shipping_rates.model_copy(update={"per_km_rate": 10}))
        assert estimator.distance_fee(5.0) == 1050

    def test_scenario_c_through_quote(self, shipping_rates):
        estimator = ShippingEstimator(shipping_rates.model_copy(update={"per_km_rate": 10}))
        lat, lng = _north_of_depot(5.0)

        quote = estimator.quote(make_result("Bonaberi", lat=lat, lng=lng, city="Bonaberi"))

        assert quote.distance_km == pytest.approx(5.0, abs=1e-6)
        assert quote.fee == 1050
        assert quote.fixed_rate is False

    def test_clamped_to_min(self, shipping_rates):
        rates = shipping_rates.model_copy(update={"base_rate": 200, "per_km_rate": 10})
        assert ShippingEstimator(rates).distance_fee(3.0) == 1000

    def test_rounds_half_up(self, shipping_rates):
        rates = shipping_rates.model_copy(update={"per_km_rate": 1})
        estimator = ShippingEstimator(rates)

        assert estimator.distance_fee(0.5) == 1001
        assert estimator.distance_fee(0.49) == 1000
        assert estimator.distance_fee(1.5) == 1002

    @pytest.mark.parametrize(
        "lat,lng",
        [
            (4.0511, 9.7679),
            (4.06, 9.77),
            (4.1537, 9.2920),
            (5.4778, 10.4176),
            (2.9404, 9.9101),
            (12.0, 15.0),
            (-33.9, 18.4),
        ],
    )
    def test_computed_fee_within_bounds(self, estimator, lat, lng):
        quote = estimator.quote(make_result("Somewhere", lat=lat, lng=lng, city="Somewhere"))
        assert estimator.rates.min_fee <= quote.fee <= estimator.rates.max_fee

    def test_nearby_point_uses_formula(self, estimator):
        lat, lng = _north_of_depot(2.0)
        quote = estimator.quote(make_result("Akwa", lat=lat, lng=lng, city="Akwa"))
        assert quote.fee == 1200
        assert "km from depot" in quote.description


class TestQuoteContract:
    def test_quote_is_idempotent(self, estimator):
        selected = make_result("Bafoussam", lat=5.4778, lng=10.4176, city="Bafoussam")
        assert estimator.quote(selected) == estimator.quote(selected)

    def test_quote_is_immutable(self, estimator):
        quote = estimator.quote(make_result("Buea", city="Buea"))
        with pytest.raises(ValidationError):
            quote.fee = 1  # type: ignore[misc]

    def test_missing_coordinates_is_contract_violation(self, estimator):
        selected = GeocodeResult(
            formatted_address="No geometry",
            components=AddressComponents(city="Buea"),
        )
        with pytest.raises(InvalidQuoteInputError):
            estimator.quote(selected)

    def test_quote_carries_destination(self, estimator):
        selected = make_result("Bafoussam, West", lat=5.4778, lng=10.4176, city="Bafoussam")
        quote = estimator.quote(selected)

        assert quote.address == "Bafoussam, West"
        assert quote.coordinates == Coordinates(lat=5.4778, lng=10.4176)
        assert quote.currency == "XAF"


class TestFallbackQuote:
    def test_unknown_address_gets_default_fee(self, estimator):
        quote = estimator.fallback_quote("Carrefour Obili, near the pharmacy")
        assert quote.fee == 5000
        assert quote.coordinates is None
        assert quote.fixed_rate is False

    def test_known_city_keeps_flat_fee(self, estimator):
        quote = estimator.fallback_quote("Rue Joss, Bonanjo", city="douala")
        assert quote.fee == 2500
        assert quote.fixed_rate is True


class TestEstimateFee:
    def test_flat_rate_city(self, estimator):
        assert estimator.estimate_fee("Kumba", Coordinates(lat=4.6363, lng=9.4469)) == 2000

    def test_distance_when_city_not_in_table(self, estimator):
        lat, lng = _north_of_depot(2.0)
        assert estimator.estimate_fee("Bonaberi", Coordinates(lat=lat, lng=lng)) == 1200

    def test_default_fee_without_coordinates(self, estimator):
        assert estimator.estimate_fee("Bonaberi") == 5000


class TestShippingRates:
    def test_min_above_max_rejected(self):
        with pytest.raises(ValueError):
            ShippingRates(
                base_rate=1000,
                per_km_rate=100,
                min_fee=6000,
                max_fee=5000,
                default_fee=5000,
                origin=DEPOT,
            )
