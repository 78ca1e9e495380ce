"""Storefront shipping and checkout package.

Library core of a storefront selling computer consumables in Cameroon. Turns
shopper-entered locations into delivery-fee quotes and carries those quotes
through the cart and checkout flow up to order submission.

The package follows a modular architecture with separate concerns for:
- Geocoding lookups against the hosted provider
- Distance-based and fixed-rate shipping estimation
- Debounced location search with stale-result discarding
- Cart state, checkout flow and order records
"""
