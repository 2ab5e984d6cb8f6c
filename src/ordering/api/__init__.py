"""Ordering domain API package."""

from ordering.api.errors import register_ordering_exception_handlers
from ordering.api.routes import cancellation_router, cart_router, order_router, stall_router

__all__ = [
    "cart_router",
    "order_router",
    "cancellation_router",
    "stall_router",
    "register_ordering_exception_handlers",
]
