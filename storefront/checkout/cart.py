"""Cart state container.

Holds the shopper's product lines for one checkout. Instances are created per
shopper (through the DI container or directly in tests) rather than shared at
module level; components observe changes through ``subscribe``.
"""

import logging
from collections.abc import Callable

from ..models import CartItem, OrderSummary, Product

logger = logging.getLogger(__name__)

CartListener = Callable[[tuple[CartItem, ...]], None]


class CartStore:
    """Mutable cart with read, subscribe and mutate operations."""

    def __init__(self, currency: str = "XAF") -> None:
        self.currency = currency
        self._items: list[CartItem] = []
        self._listeners: list[CartListener] = []

    @property
    def items(self) -> tuple[CartItem, ...]:
        """Snapshot of current cart lines."""
        return tuple(self._items)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a callback fired after every mutation.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)

    def _find(self, product_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.product.id == product_id:
                return index
        return None

    def add_item(self, product: Product, quantity: int = 1) -> None:
        """Add a product, merging with an existing line for the same product."""
        if quantity < 1:
            raise ValueError(f"Quantity must be positive, got {quantity}")

        index = self._find(product.id)
        if index is None:
            self._items.append(CartItem(product=product, quantity=quantity))
        else:
            existing = self._items[index]
            self._items[index] = CartItem(product=product, quantity=existing.quantity + quantity)

        logger.debug(f"Added {quantity} x {product.id} to cart")
        self._notify()

    def remove_item(self, product_id: str) -> None:
        index = self._find(product_id)
        if index is None:
            return
        del self._items[index]
        self._notify()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity. Zero or less removes the line."""
        index = self._find(product_id)
        if index is None:
            return
        if quantity <= 0:
            del self._items[index]
        else:
            self._items[index] = CartItem(product=self._items[index].product, quantity=quantity)
        self._notify()

    def clear(self) -> None:
        self._items = []
        self._notify()

    def count(self) -> int:
        """Total number of units across all lines."""
        return sum(item.quantity for item in self._items)

    def subtotal(self) -> int:
        return sum(item.line_total for item in self._items)

    def summary(self, shipping: int = 0) -> OrderSummary:
        """Order totals for a given delivery fee."""
        subtotal = self.subtotal()
        return OrderSummary(
            subtotal=subtotal,
            shipping=shipping,
            total=subtotal + shipping,
            currency=self.currency,
        )
