"""Checkout orchestrator factory.

get_orchestrator() wires the orchestrator from the active cart gateway,
pricing resolver and settings. Tests and alternative deployments replace it
with set_orchestrator().
"""

from checkout.cart import get_cart_gateway
from checkout.order.ledger import OrderLedger
from checkout.orchestration.guard import CheckoutGuard
from checkout.orchestration.orchestrator import CheckoutOrchestrator
from checkout.pricing import get_pricing
from checkout.settings import settings

_current_orchestrator: CheckoutOrchestrator | None = None


def get_orchestrator() -> CheckoutOrchestrator:
    """Return the current orchestrator, building it from settings on first use."""
    global _current_orchestrator
    if _current_orchestrator is None:
        _current_orchestrator = CheckoutOrchestrator(
            carts=get_cart_gateway(),
            pricing=get_pricing(),
            ledger=OrderLedger(),
            guard=CheckoutGuard(
                mode=settings.checkout_lock_mode,
                wait_timeout=settings.checkout_lock_timeout_seconds,
            ),
            cart_clear_attempts=settings.cart_clear_attempts,
            price_lookup_workers=settings.price_lookup_workers,
        )
    return _current_orchestrator


def set_orchestrator(orchestrator: CheckoutOrchestrator) -> None:
    """Override the active orchestrator (useful for tests)."""
    global _current_orchestrator
    _current_orchestrator = orchestrator


def reset_orchestrator() -> None:
    """Drop the active orchestrator so the next call rebuilds it."""
    global _current_orchestrator
    _current_orchestrator = None
