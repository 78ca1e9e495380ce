"""Checkout package.

Cart state container, checkout flow state machine, order records and receipt
rendering. Consumes shipping quotes produced by the services package.
"""
