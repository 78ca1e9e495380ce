"""Business logic services package.

Contains the geocoding client, distance helpers, shipping fee estimation and
the debounced location search used by checkout.
"""
