"""User-facing message templates and constants.

Centralizes notices shown next to the location field and the text blocks of
printed receipts so wording stays consistent across checkout.
"""

# Location lookup notices
GEOCODING_NOT_CONFIGURED = (
    "Address search is not available right now. "
    "Please type your full address, a standard delivery fee will apply."
)
GEOCODING_UNAVAILABLE = (
    "We could not search for your location. Check your connection and try again, "
    "or type your full address."
)
GEOCODING_RATE_LIMITED = "Too many address searches. Please wait a moment and try again."
GEOCODING_TIMEOUT = "Address search took too long. Please try again."

# Quote descriptions
FIXED_RATE_DESCRIPTION = "Flat rate for {city}"
DISTANCE_RATE_DESCRIPTION = "{distance_km:.1f} km from depot: base {base_rate:g} + {per_km_rate:g}/km"
DEFAULT_RATE_DESCRIPTION = "Standard delivery fee (location not verified)"

# Receipt
RECEIPT_TITLE = "Purchase Receipt"
RECEIPT_FOOTER = "Thank you for shopping with {store_name}!"
RECEIPT_CONTACT = "For any questions, please contact {support_email}"
