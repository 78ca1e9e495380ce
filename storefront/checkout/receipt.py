"""Plain-text purchase receipts."""

from ..config import StoreConfig
from ..messages import RECEIPT_CONTACT, RECEIPT_FOOTER, RECEIPT_TITLE
from ..models import Order
from ..utils import format_xaf

RECEIPT_WIDTH = 64


def _columns(left: str, right: str, width: int = RECEIPT_WIDTH) -> str:
    gap = max(width - len(left) - len(right), 1)
    return f"{left}{' ' * gap}{right}"


def render_receipt(order: Order, store: StoreConfig) -> str:
    """Render an order as a fixed-width text receipt.

    Args:
        order: Stored order.
        store: Store identity for header and footer.

    Returns:
        Receipt text with a trailing newline.
    """
    rule = "-" * RECEIPT_WIDTH
    lines = [
        store.name.center(RECEIPT_WIDTH).rstrip(),
        RECEIPT_TITLE.center(RECEIPT_WIDTH).rstrip(),
        "",
        _columns(
            f"Date: {order.created_at.strftime('%d.%m.%Y %H:%M')}",
            f"Order ID: {order.id}",
        ),
        "",
        "Shipping Address:",
        order.shipping_address,
        "",
        f"{'Item':<30}{'Qty':>5}{'Price':>14}{'Total':>15}",
        rule,
    ]

    for item in order.items:
        name = item.name if len(item.name) <= 29 else item.name[:26] + "..."
        lines.append(
            f"{name:<30}{item.quantity:>5}"
            f"{format_xaf(item.price, order.currency):>14}"
            f"{format_xaf(item.price * item.quantity, order.currency):>15}"
        )

    lines += [
        rule,
        _columns("Subtotal:", format_xaf(order.subtotal, order.currency)),
        _columns("Shipping:", format_xaf(order.shipping, order.currency)),
        _columns("Total:", format_xaf(order.total, order.currency)),
        "",
        RECEIPT_FOOTER.format(store_name=store.name),
        RECEIPT_CONTACT.format(support_email=store.support_email),
    ]
    return "\n".join(lines) + "\n"
