"""Dependency-injection container.

Wires configuration, the geocoding client, the shipping estimator and the
checkout components together. Per-shopper state (cart, search, checkout
flow) comes from factories so every checkout gets isolated instances.
"""

from dependency_injector import containers, providers

from storefront.checkout.cart import CartStore
from storefront.checkout.flow import CheckoutFlow
from storefront.checkout.orders import InMemoryOrderStore
from storefront.config import config
from storefront.services.geocoding import GeocodingService
from storefront.services.location_search import LocationSearch
from storefront.services.shipping import ShippingEstimator, rates_from_config


class Container(containers.DeclarativeContainer):
    """DI container for the storefront core."""

    settings = providers.Object(config)

    # Services
    shipping_rates = providers.Singleton(rates_from_config, settings)
    shipping_estimator = providers.Singleton(ShippingEstimator, rates=shipping_rates)
    geocoding_service = providers.Singleton(GeocodingService, config=settings.provided.geocoding)
    order_store = providers.Singleton(InMemoryOrderStore)

    # Per-checkout components
    location_search = providers.Factory(
        LocationSearch,
        geocoder=geocoding_service,
        debounce_seconds=settings.provided.geocoding.debounce_seconds,
    )
    cart = providers.Factory(CartStore, currency=settings.provided.shipping.currency)
    checkout_flow = providers.Factory(
        CheckoutFlow,
        estimator=shipping_estimator,
        cart=cart,
        search=location_search,
    )
