"""Order submission backends.

Checkout treats order persistence as an opaque collaborator: it hands over a
finalized ``OrderDraft`` and receives the stored ``Order``. The in-memory
store here backs tests and local runs.
"""

import logging
import uuid
from datetime import UTC, datetime
from typing import Protocol

from ..models import Order, OrderDraft

logger = logging.getLogger(__name__)


class OrderSubmitter(Protocol):
    async def submit(self, draft: OrderDraft) -> Order: ...


class InMemoryOrderStore:
    """Order backend keeping records in process memory, newest first."""

    def __init__(self) -> None:
        self._orders: list[Order] = []

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    async def submit(self, draft: OrderDraft) -> Order:
        """Store a draft and return the created order."""
        order = Order(
            **draft.model_dump(),
            id=str(uuid.uuid4()),
            created_at=datetime.now(UTC),
        )
        self._orders.insert(0, order)
        logger.info(f"Created order {order.id}: total {order.total} {order.currency}")
        return order

    def orders_for(self, user_id: str) -> list[Order]:
        """Orders placed by one account, newest first."""
        return [order for order in self._orders if order.user_id == user_id]

    def get(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None
