"""Shipping cost estimation service.

Turns a selected geocoding candidate into a delivery fee quote. Cities listed
in the fixed-rate table are charged their flat fee; any other destination is
charged a base rate plus a per-kilometer rate on the great-circle distance
from the depot, clamped to a configured range.
"""

import logging
import unicodedata
from decimal import ROUND_HALF_UP, Decimal

from ..config import Config
from ..errors import InvalidQuoteInputError
from ..messages import (
    DEFAULT_RATE_DESCRIPTION,
    DISTANCE_RATE_DESCRIPTION,
    FIXED_RATE_DESCRIPTION,
)
from ..models import AddressComponents, Coordinates, GeocodeResult, ShippingQuote, ShippingRates
from .geo import haversine_km

logger = logging.getLogger(__name__)


def normalize_city(name: str) -> str:
    """Fold case and diacritics so "Yaoundé", "Yaounde" and "YAOUNDE" compare equal."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())


def resolve_city(components: AddressComponents) -> str:
    """Pick the city name from provider components.

    Preference order is city, town, state, village.

    Returns:
        City name or an empty string if no component is present.
    """
    return (
        components.city
        or components.town
        or components.state
        or components.village
        or ""
    )


def rates_from_config(config: Config) -> ShippingRates:
    """Build estimator rates from the application configuration."""
    shipping = config.shipping
    return ShippingRates(
        base_rate=shipping.base_rate,
        per_km_rate=shipping.per_km_rate,
        min_fee=shipping.min_fee,
        max_fee=shipping.max_fee,
        default_fee=shipping.default_fee,
        origin=Coordinates(lat=shipping.origin_lat, lng=shipping.origin_lng),
        fixed_rates=config.fixed_rates,
        currency=shipping.currency,
    )


class ShippingEstimator:
    """Pure delivery fee calculator.

    Holds no mutable state: the same candidate and rates always produce an
    equal quote.
    """

    def __init__(self, rates: ShippingRates):
        self.rates = rates
        self._fixed_rates = {
            normalize_city(city): fee for city, fee in rates.fixed_rates.items()
        }

    def fixed_rate_for(self, city: str) -> int | None:
        """Return the flat fee for a city, or None if it is not in the table."""
        if not city:
            return None
        return self._fixed_rates.get(normalize_city(city))

    def distance_fee(self, distance_km: float) -> int:
        """Apply the distance formula and clamp.

        Args:
            distance_km: Distance from the depot in kilometers.

        Returns:
            ``base_rate + distance_km * per_km_rate`` rounded half-up to an
            integer and clamped to ``[min_fee, max_fee]``.
        """
        raw = Decimal(str(self.rates.base_rate)) + (
            Decimal(str(distance_km)) * Decimal(str(self.rates.per_km_rate))
        )
        fee = int(raw.quantize(Decimal("1"), ROUND_HALF_UP))
        return min(max(fee, self.rates.min_fee), self.rates.max_fee)

    def estimate_fee(self, city: str, coordinates: Coordinates | None = None) -> int:
        """Fee for a destination already resolved to a city and position.

        Falls back to the default fee when the city has no flat rate and no
        coordinates are known.
        """
        fixed_fee = self.fixed_rate_for(city)
        if fixed_fee is not None:
            return fixed_fee
        if coordinates is None:
            return self.rates.default_fee
        return self.distance_fee(haversine_km(self.rates.origin, coordinates))

    def quote(self, selected: GeocodeResult) -> ShippingQuote:
        """Compute the delivery fee quote for a selected candidate.

        Args:
            selected: Candidate chosen by the shopper.

        Returns:
            ShippingQuote with resolved city, fee and how it was computed.

        Raises:
            InvalidQuoteInputError: If the candidate has no coordinates.
        """
        if selected.coordinates is None:
            raise InvalidQuoteInputError(
                f"Cannot quote '{selected.formatted_address}': candidate has no coordinates"
            )

        city = resolve_city(selected.components)
        fixed_fee = self.fixed_rate_for(city)
        if fixed_fee is not None:
            return ShippingQuote(
                address=selected.formatted_address,
                city=city,
                coordinates=selected.coordinates,
                fee=fixed_fee,
                fixed_rate=True,
                currency=self.rates.currency,
                description=FIXED_RATE_DESCRIPTION.format(city=city),
            )

        distance_km = haversine_km(self.rates.origin, selected.coordinates)
        fee = self.distance_fee(distance_km)
        logger.debug(f"Distance quote for '{city or selected.formatted_address}': {distance_km:.2f} km -> {fee}")

        return ShippingQuote(
            address=selected.formatted_address,
            city=city,
            coordinates=selected.coordinates,
            fee=fee,
            distance_km=distance_km,
            currency=self.rates.currency,
            description=DISTANCE_RATE_DESCRIPTION.format(
                distance_km=distance_km,
                base_rate=self.rates.base_rate,
                per_km_rate=self.rates.per_km_rate,
            ),
        )

    def fallback_quote(self, address: str, city: str = "") -> ShippingQuote:
        """Quote a manually entered address that could not be geocoded.

        A city from the fixed-rate table still gets its flat fee; anything
        else is charged the default fee.
        """
        fixed_fee = self.fixed_rate_for(city)
        if fixed_fee is not None:
            return ShippingQuote(
                address=address,
                city=city,
                fee=fixed_fee,
                fixed_rate=True,
                currency=self.rates.currency,
                description=FIXED_RATE_DESCRIPTION.format(city=city),
            )

        return ShippingQuote(
            address=address,
            city=city,
            fee=self.rates.default_fee,
            currency=self.rates.currency,
            description=DEFAULT_RATE_DESCRIPTION,
        )
