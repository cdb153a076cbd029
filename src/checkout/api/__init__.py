"""Checkout API package."""

from checkout.api.errors import register_checkout_exception_handlers
from checkout.api.routes import checkout_router, order_router

__all__ = ["checkout_router", "order_router", "register_checkout_exception_handlers"]
