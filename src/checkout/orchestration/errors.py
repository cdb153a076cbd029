"""Checkout failure taxonomy.

Every failure records whether an order was committed for the attempt:
``True``, ``False``, or ``None`` when the ledger could not tell. All failures
raised before the ledger write are ``committed=False`` and are safe to retry.
"""


class CheckoutError(Exception):
    """Base class for checkout failures."""

    code = "checkout_failed"

    def __init__(self, message: str, *, subject_id: str | None = None, committed: bool | None = False) -> None:
        super().__init__(message)
        self.message = message
        self.subject_id = subject_id
        self.committed = committed


class EmptyCartError(CheckoutError):
    code = "empty_cart"


class PriceResolutionError(CheckoutError):
    code = "price_resolution_failed"

    def __init__(self, message: str, *, unresolved: tuple[str, ...] = (), **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.unresolved = tuple(unresolved)


class PersistenceError(CheckoutError):
    code = "persistence_failed"


class ConcurrentCheckoutError(CheckoutError):
    code = "checkout_in_progress"


class UpstreamUnavailableError(CheckoutError):
    code = "upstream_unavailable"

    def __init__(self, message: str, *, stage: str, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.stage = stage


class CartClearWarning(Warning):
    """The order was committed but the cart could not be cleared.

    Returned alongside a successful result, never raised. Operators reconcile
    by clearing the subject's cart once the cart store is reachable again.
    """

    code = "cart_not_cleared"

    def __init__(self, order_id: str, subject_id: str, reason: str) -> None:
        super().__init__(f"Order {order_id} committed but the cart of {subject_id} was not cleared: {reason}")
        self.order_id = order_id
        self.subject_id = subject_id
        self.reason = reason
