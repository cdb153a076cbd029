"""Cart store adapter for the cart service's HTTP API.

    GET    /cart  ->  {"items": [{"product_id": ..., "quantity": ...}, ...]}
    DELETE /cart

The cart service identifies the cart from the forwarded Authorization header.
"""

import httpx

from checkout.cart.port import CartGateway, CartLine, CartStoreUnavailable
from checkout.identity.port import Principal


class HttpCartGateway(CartGateway):
    def __init__(self, base_url: str, timeout: float = 5.0, transport: httpx.BaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self, principal: Principal) -> dict[str, str]:
        if principal.authorization:
            return {"Authorization": principal.authorization}
        return {}

    def _send(self, method: str, principal: Principal) -> httpx.Response:
        with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            try:
                return client.request(method, "/cart", headers=self._headers(principal))
            except httpx.TimeoutException as exc:
                raise CartStoreUnavailable(f"Cart service timed out on {method} /cart") from exc
            except httpx.HTTPError as exc:
                raise CartStoreUnavailable(f"Cart service unreachable: {exc}") from exc

    def get_cart(self, principal: Principal) -> list[CartLine]:
        response = self._send("GET", principal)
        if response.status_code == 404:
            return []
        if response.status_code != 200:
            raise CartStoreUnavailable(f"Cart service answered {response.status_code} on GET /cart")

        try:
            items = response.json().get("items") or []
            return [CartLine(product_id=item["product_id"], quantity=item["quantity"]) for item in items]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise CartStoreUnavailable(f"Malformed cart payload: {exc}") from exc

    def clear_cart(self, principal: Principal) -> None:
        response = self._send("DELETE", principal)
        if response.status_code not in (200, 202, 204, 404):
            raise CartStoreUnavailable(f"Cart service answered {response.status_code} on DELETE /cart")
