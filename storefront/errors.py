"""Exception types raised by the storefront core."""


class StorefrontError(Exception):
    """Base class for storefront errors."""


class InvalidQuoteInputError(StorefrontError, ValueError):
    """A quote was requested for a location without coordinates."""


class GeocodingProviderError(StorefrontError):
    """The geocoding provider answered with a non-success status.

    Never escapes the geocoding service; it is converted into an empty
    lookup with a notice.
    """

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Geocoding provider returned HTTP {status}")


class CheckoutStateError(StorefrontError):
    """An operation was attempted in a checkout step that does not allow it."""


class EmptyCartError(StorefrontError):
    """An order was submitted with no items in the cart."""


class OrderSubmissionError(StorefrontError):
    """The order backend rejected or failed to store an order."""
