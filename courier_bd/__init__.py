from .base import (
    AuthenticationError,
    CancelResult,
    CourierError,
    CourierNotConfigured,
    DispatchResult,
    Order,
    OrderItem,
    ShippingAddress,
    StatusResult,
)
from .enums import Provider
from .manager import LogisticsManager, send_order, track

__all__ = [
    "AuthenticationError",
    "CancelResult",
    "CourierError",
    "CourierNotConfigured",
    "DispatchResult",
    "LogisticsManager",
    "Order",
    "OrderItem",
    "Provider",
    "ShippingAddress",
    "StatusResult",
    "send_order",
    "track",
]
