"""Data models for the storefront shipping core.

Defines Pydantic models for geocoding candidates, shipping quotes and rate
configuration, as well as the cart and order records that consume quotes
during checkout. Location and quote models are immutable once built.
"""

from collections.abc import Iterator
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinates(BaseModel):
    """Geographic coordinate pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)


class AddressComponents(BaseModel):
    """Administrative components returned by the geocoding provider.

    Only the fields used for city resolution are kept; everything else the
    provider sends is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    city: str | None = None
    town: str | None = None
    state: str | None = None
    village: str | None = None
    country: str | None = None


class GeocodeResult(BaseModel):
    """One geocoding candidate.

    Attributes:
        formatted_address: Human readable address from the provider.
        coordinates: Resolved position, None only for malformed candidates.
        components: Administrative components (city/town/state/village).
    """

    model_config = ConfigDict(frozen=True)

    formatted_address: str
    coordinates: Coordinates | None = None
    components: AddressComponents = Field(default_factory=AddressComponents)


class GeocodeLookup(BaseModel):
    """Outcome of a single location lookup.

    Attributes:
        query: Query text as typed by the shopper.
        results: Candidates in provider order.
        notice: Transient user-facing notice when the lookup failed.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    results: tuple[GeocodeResult, ...] = ()
    notice: str | None = None

    @property
    def failed(self) -> bool:
        """Whether the lookup failed rather than simply finding nothing."""
        return self.notice is not None

    def __iter__(self) -> Iterator[GeocodeResult]:  # type: ignore[override]
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)


class ShippingRates(BaseModel):
    """Rate configuration injected into the shipping estimator.

    Attributes:
        base_rate: Flat part of every distance-based fee.
        per_km_rate: Fee per kilometer between origin and destination.
        min_fee: Lower clamp for distance-based fees.
        max_fee: Upper clamp for distance-based fees.
        default_fee: Flat fee for destinations that could not be geocoded.
        origin: Depot coordinates.
        fixed_rates: City name to flat fee, bypassing distance and clamp.
        currency: ISO currency code.
    """

    model_config = ConfigDict(frozen=True)

    base_rate: float = Field(ge=0)
    per_km_rate: float = Field(ge=0)
    min_fee: int = Field(ge=0)
    max_fee: int = Field(ge=0)
    default_fee: int = Field(ge=0)
    origin: Coordinates
    fixed_rates: dict[str, int] = Field(default_factory=dict)
    currency: str = "XAF"

    @model_validator(mode="after")
    def _check_bounds(self) -> "ShippingRates":
        if self.min_fee > self.max_fee:
            raise ValueError(f"min_fee {self.min_fee} is greater than max_fee {self.max_fee}")
        return self


class ShippingQuote(BaseModel):
    """Delivery fee quote for one selected destination.

    Attributes:
        address: Destination address string.
        city: Resolved city name, empty when none was found.
        coordinates: Destination coordinates, None for manual addresses.
        fee: Fee in integer currency units.
        distance_km: Great-circle distance from the depot when it was computed.
        fixed_rate: Whether the fee came from the fixed-rate table.
        currency: ISO currency code.
        description: Explanation of how the fee was determined.
    """

    model_config = ConfigDict(frozen=True)

    address: str
    city: str = ""
    coordinates: Coordinates | None = None
    fee: int
    distance_km: float | None = None
    fixed_rate: bool = False
    currency: str = "XAF"
    description: str = ""


class Product(BaseModel):
    """Catalog product as seen by the cart.

    Attributes:
        id: Product identifier.
        name: Display name.
        price: Unit price in integer currency units.
        brand: Manufacturer brand.
        category: Catalog category.
        in_stock: Units available.
    """

    id: str
    name: str
    price: int = Field(ge=0)
    brand: str = ""
    category: str = ""
    in_stock: int = 0


class CartItem(BaseModel):
    """Product line held in the cart."""

    product: Product
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity


class OrderSummary(BaseModel):
    """Totals shown before order submission."""

    subtotal: int
    shipping: int
    total: int
    currency: str = "XAF"


class PaymentMethodType(str, Enum):
    MTN_MOBILE_MONEY = "MTN_MOBILE_MONEY"
    ORANGE_MONEY = "ORANGE_MONEY"


class PaymentMethod(BaseModel):
    """Mobile money account used to pay an order."""

    type: PaymentMethodType
    mobile_number: str = Field(min_length=1)


class CustomerInfo(BaseModel):
    """Contact details captured at checkout.

    Attributes:
        full_name: Recipient name.
        email: Contact email.
        phone_number: Contact phone number.
        user_id: Account id, None for guest checkout.
    """

    full_name: str
    email: str
    phone_number: str
    user_id: str | None = None


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class OrderItem(BaseModel):
    """Product line frozen into an order at submission time."""

    id: str
    name: str
    quantity: int
    price: int


class OrderDraft(BaseModel):
    """Finalized order handed to the order backend.

    Attributes:
        user_id: Account id, None for guests.
        items: Ordered product lines.
        subtotal: Sum of line totals.
        shipping: Confirmed delivery fee.
        total: Subtotal plus shipping.
        payment_method: Mobile money account.
        shipping_address: Destination string.
        coordinates: Destination coordinates when known.
        full_name: Recipient name.
        guest_email: Contact email for guest orders.
        guest_phone: Contact phone for guest orders.
        currency: ISO currency code.
    """

    user_id: str | None = None
    items: list[OrderItem]
    subtotal: int
    shipping: int
    total: int
    payment_method: PaymentMethod
    shipping_address: str
    coordinates: Coordinates | None = None
    full_name: str = ""
    guest_email: str | None = None
    guest_phone: str | None = None
    currency: str = "XAF"


class Order(OrderDraft):
    """Stored order record."""

    id: str
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
