"""Checkout flow from location entry to order submission.

Tracks the shipping destination through the steps
``IDLE -> SEARCHING -> SUGGESTIONS_SHOWN -> QUOTE_COMPUTED -> CONFIRMED``.
Only a confirmed quote contributes to the order total; editing the location
field again sends the flow back to ``SEARCHING``.
"""

import logging
from enum import Enum

from ..errors import CheckoutStateError, EmptyCartError, OrderSubmissionError, StorefrontError
from ..models import (
    CustomerInfo,
    GeocodeLookup,
    GeocodeResult,
    Order,
    OrderDraft,
    OrderItem,
    OrderSummary,
    PaymentMethod,
    ShippingQuote,
)
from ..services.location_search import LocationSearch
from ..services.shipping import ShippingEstimator
from .cart import CartStore
from .orders import OrderSubmitter

logger = logging.getLogger(__name__)


class CheckoutStep(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    SUGGESTIONS_SHOWN = "suggestions_shown"
    QUOTE_COMPUTED = "quote_computed"
    CONFIRMED = "confirmed"


class CheckoutFlow:
    """Shipping-destination state machine for one checkout.

    Attributes:
        step: Current step.
        location_text: Current content of the location field.
        suggestions: Candidates currently offered to the shopper.
        notice: Transient notice from the last failed lookup.
        quote: Quote computed for the selected destination.
    """

    def __init__(
        self,
        estimator: ShippingEstimator,
        cart: CartStore,
        search: LocationSearch | None = None,
    ):
        self.estimator = estimator
        self.cart = cart
        self.search = search
        self.step = CheckoutStep.IDLE
        self.location_text = ""
        self.suggestions: tuple[GeocodeResult, ...] = ()
        self.notice: str | None = None
        self.quote: ShippingQuote | None = None

        if search is not None:
            search.subscribe(self.show_suggestions)

    def _require(self, *steps: CheckoutStep) -> None:
        if self.step not in steps:
            allowed = ", ".join(step.value for step in steps)
            raise CheckoutStateError(f"Not allowed in step '{self.step.value}' (expected {allowed})")

    def edit_location(self, text: str) -> None:
        """Record a keystroke in the location field.

        Any previous quote is dropped. Blank text returns the flow to IDLE.
        When a LocationSearch is attached the text is submitted to it, which
        requires a running event loop; without one RuntimeError is raised and
        the flow is left untouched.
        """
        if self.search is not None:
            self.search.submit(text)

        self.location_text = text
        self.quote = None
        self.suggestions = ()
        self.notice = None
        self.step = CheckoutStep.SEARCHING if text.strip() else CheckoutStep.IDLE

    def show_suggestions(self, lookup: GeocodeLookup) -> bool:
        """Accept lookup results for the current location text.

        Returns:
            True if the results were applied, False if they were ignored
            because they do not belong to the current search.
        """
        if self.step is not CheckoutStep.SEARCHING or lookup.query != self.location_text:
            logger.debug(f"Ignoring suggestions for '{lookup.query}' in step {self.step.value}")
            return False

        self.notice = lookup.notice
        self.suggestions = lookup.results
        if lookup.results:
            self.step = CheckoutStep.SUGGESTIONS_SHOWN
        return True

    def select(self, result: GeocodeResult) -> ShippingQuote:
        """Quote the candidate the shopper picked from the suggestions."""
        self._require(CheckoutStep.SUGGESTIONS_SHOWN)

        self.quote = self.estimator.quote(result)
        self.location_text = result.formatted_address
        self.suggestions = ()
        self.step = CheckoutStep.QUOTE_COMPUTED
        return self.quote

    def use_manual_address(self, address: str, city: str = "") -> ShippingQuote:
        """Accept a typed address without geocoding, at the default fee."""
        if self.step is CheckoutStep.CONFIRMED:
            raise CheckoutStateError("Edit the location before entering a new address")
        if not address.strip():
            raise ValueError("Address must not be empty")

        self.quote = self.estimator.fallback_quote(address.strip(), city)
        self.location_text = address
        self.suggestions = ()
        self.step = CheckoutStep.QUOTE_COMPUTED
        return self.quote

    def confirm(self) -> ShippingQuote:
        """Lock the computed quote into the order total."""
        self._require(CheckoutStep.QUOTE_COMPUTED)
        if self.quote is None:
            raise CheckoutStateError("No shipping quote to confirm")
        self.step = CheckoutStep.CONFIRMED
        logger.info(f"Shipping confirmed to '{self.quote.address}': {self.quote.fee} {self.quote.currency}")
        return self.quote

    def summary(self) -> OrderSummary:
        """Cart totals including shipping once it is confirmed."""
        shipping = self.quote.fee if self.step is CheckoutStep.CONFIRMED and self.quote else 0
        return self.cart.summary(shipping)

    def build_draft(self, customer: CustomerInfo, payment: PaymentMethod) -> OrderDraft:
        """Assemble the finalized order from the cart and confirmed quote."""
        self._require(CheckoutStep.CONFIRMED)
        if self.quote is None:
            raise CheckoutStateError("Confirmed step without a shipping quote")
        if not self.cart.items:
            raise EmptyCartError("Cannot submit an order with an empty cart")

        summary = self.summary()
        is_guest = customer.user_id is None
        return OrderDraft(
            user_id=customer.user_id,
            items=[
                OrderItem(
                    id=item.product.id,
                    name=item.product.name,
                    quantity=item.quantity,
                    price=item.product.price,
                )
                for item in self.cart.items
            ],
            subtotal=summary.subtotal,
            shipping=summary.shipping,
            total=summary.total,
            payment_method=payment,
            shipping_address=self.quote.address,
            coordinates=self.quote.coordinates,
            full_name=customer.full_name,
            guest_email=customer.email if is_guest else None,
            guest_phone=customer.phone_number if is_guest else None,
            currency=summary.currency,
        )

    async def submit(
        self,
        submitter: OrderSubmitter,
        customer: CustomerInfo,
        payment: PaymentMethod,
    ) -> Order:
        """Submit the order and reset the flow for the next checkout.

        Raises:
            CheckoutStateError: If shipping has not been confirmed.
            EmptyCartError: If the cart is empty.
            OrderSubmissionError: If the order backend fails.
        """
        draft = self.build_draft(customer, payment)

        try:
            order = await submitter.submit(draft)
        except StorefrontError:
            raise
        except Exception as e:
            logger.error(f"Order submission failed: {e}", exc_info=True)
            raise OrderSubmissionError(str(e)) from e

        self.cart.clear()
        self.step = CheckoutStep.IDLE
        self.location_text = ""
        self.quote = None
        return order
