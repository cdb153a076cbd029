"""Cart gateway factory.

Provides get_cart_gateway() / set_cart_gateway() to swap implementations:
- HttpCartGateway when CART_SERVICE_URL is configured
- FakeCartStore otherwise (development and testing)
"""

from checkout.cart.fake_adapter import FakeCartStore
from checkout.cart.http_adapter import HttpCartGateway
from checkout.cart.port import CartGateway
from checkout.settings import settings

_current_gateway: CartGateway | None = None


def get_cart_gateway() -> CartGateway:
    """Return the current cart gateway."""
    global _current_gateway
    if _current_gateway is None:
        if settings.cart_service_url:
            _current_gateway = HttpCartGateway(settings.cart_service_url, timeout=settings.upstream_timeout_seconds)
        else:
            _current_gateway = FakeCartStore()
    return _current_gateway


def set_cart_gateway(gateway: CartGateway) -> None:
    """Override the active cart gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_cart_gateway() -> None:
    """Reset to the configured default."""
    global _current_gateway
    _current_gateway = None
