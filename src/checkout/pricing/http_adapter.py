"""Pricing adapter for the catalogue service's HTTP API.

    GET /products/{product_id}  ->  {"id": ..., "price": "19.99", "retired": false}

Prices are parsed straight into Decimal; JSON numbers never pass through float.
"""

from decimal import Decimal, InvalidOperation

import httpx

from checkout.pricing.port import CatalogUnavailable, PricingResolver, ProductNotFound


class HttpCatalogPricing(PricingResolver):
    def __init__(self, base_url: str, timeout: float = 5.0, transport: httpx.BaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def price_of(self, product_id: str) -> Decimal:
        path = f"/products/{product_id}"
        with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.get(path)
            except httpx.TimeoutException as exc:
                raise CatalogUnavailable(f"Catalogue timed out on GET {path}") from exc
            except httpx.HTTPError as exc:
                raise CatalogUnavailable(f"Catalogue unreachable: {exc}") from exc

        if response.status_code == 404:
            raise ProductNotFound(str(product_id))
        if response.status_code != 200:
            raise CatalogUnavailable(f"Catalogue answered {response.status_code} on GET {path}")

        try:
            product = response.json(parse_float=Decimal)
            if product.get("retired"):
                raise ProductNotFound(str(product_id))
            price = Decimal(str(product["price"]))
        except (ValueError, KeyError, TypeError, AttributeError, InvalidOperation) as exc:
            raise CatalogUnavailable(f"Malformed product payload for {product_id}: {exc}") from exc

        if not price.is_finite() or price < 0:
            raise CatalogUnavailable(f"Catalogue returned an invalid price for {product_id}: {price}")
        return price
