"""Order-to-payload helpers shared by the courier adapters. No I/O here."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from .base import Order

DEFAULT_PHONE: Final = "01700000000"
DEFAULT_CITY: Final = "Dhaka"


def round_amount(amount: float) -> int:
    """Round to whole taka, halves away from zero."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def collect_amount(order: Order) -> int:
    return 0 if order.is_paid else round_amount(order.total_price)


def short_id(order: Order, length: int = 8) -> str:
    return order.id[-length:]


def invoice_id(order: Order) -> str:
    return short_id(order).upper()


def describe_items(order: Order, template: str = "{name} ({quantity})") -> str:
    return ", ".join(
        template.format(name=item.name, quantity=item.quantity) for item in order.order_items
    )


def clip(text: str, limit: int) -> str:
    return text[:limit]


def total_quantity(order: Order) -> int:
    return sum(item.quantity for item in order.order_items)


def recipient_phone(order: Order) -> str:
    return order.shipping_address.phone or DEFAULT_PHONE


def recipient_city(order: Order) -> str:
    return order.shipping_address.city or DEFAULT_CITY
