"""Cart store port (abstract interface).

The cart store owns carts; checkout only reads a snapshot of a cart and,
once the order is durable, clears it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from checkout.identity.port import Principal


class CartStoreUnavailable(Exception):
    """The cart store timed out, was unreachable, or returned an unusable answer."""


@dataclass(frozen=True)
class CartLine:
    """One product/quantity entry of a cart snapshot."""

    product_id: str
    quantity: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "product_id", str(self.product_id))
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError(f"Cart quantity must be a positive integer, got {self.quantity!r}")


class CartGateway(ABC):
    """Abstract cart store interface.

    Implementations forward the caller's authorization context unchanged; they
    never authenticate on their own account.
    """

    @abstractmethod
    def get_cart(self, principal: Principal) -> list[CartLine]:
        """Return the subject's cart lines in cart order. No cart is an empty list."""
        ...

    @abstractmethod
    def clear_cart(self, principal: Principal) -> None:
        """Empty the subject's cart. Clearing an empty cart succeeds."""
        ...
