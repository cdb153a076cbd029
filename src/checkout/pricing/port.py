"""Pricing port (abstract interface).

Prices are read from the catalogue at the moment of checkout. Adapters must
not cache: the price returned is the one frozen into the order.
"""

from abc import ABC, abstractmethod
from decimal import Decimal


class ProductNotFound(Exception):
    """The product id is unknown to the catalogue or has been retired."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} not found in catalogue")
        self.product_id = product_id


class CatalogUnavailable(Exception):
    """The catalogue timed out, was unreachable, or returned an unusable answer."""


class PricingResolver(ABC):
    """Abstract price lookup interface."""

    @abstractmethod
    def price_of(self, product_id: str) -> Decimal:
        """Return the current unit price of a product."""
        ...
