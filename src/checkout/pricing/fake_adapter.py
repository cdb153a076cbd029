"""In-memory catalogue prices for development and testing."""

from decimal import Decimal

from checkout.pricing.port import CatalogUnavailable, PricingResolver, ProductNotFound


class FakeCatalog(PricingResolver):
    """Configurable fake catalogue."""

    def __init__(self, prices: dict[str, str | Decimal] | None = None) -> None:
        self.prices: dict[str, Decimal] = {}
        self.unavailable: set[str] = set()
        self.calls: list[dict] = []
        for product_id, price in (prices or {}).items():
            self.set_price(product_id, price)

    def set_price(self, product_id, price) -> None:
        self.prices[str(product_id)] = Decimal(str(price))

    def retire(self, product_id) -> None:
        self.prices.pop(str(product_id), None)

    def make_unavailable(self, product_id) -> None:
        """Make lookups of this product fail as if the catalogue timed out."""
        self.unavailable.add(str(product_id))

    def price_of(self, product_id: str) -> Decimal:
        product_id = str(product_id)
        self.calls.append({"method": "price_of", "product_id": product_id})
        if product_id in self.unavailable:
            raise CatalogUnavailable(f"Catalogue timed out looking up product {product_id}")
        try:
            return self.prices[product_id]
        except KeyError:
            raise ProductNotFound(product_id) from None
