"""Tests for the cart, pricing and identity adapters and their factories."""

from decimal import Decimal

import httpx
import pytest
from checkout import cart as cart_factory
from checkout import identity as identity_factory
from checkout import pricing as pricing_factory
from checkout.cart.fake_adapter import FakeCartStore
from checkout.cart.http_adapter import HttpCartGateway
from checkout.cart.port import CartLine, CartStoreUnavailable
from checkout.identity.fake_adapter import FakeIdentityVerifier
from checkout.identity.http_adapter import HttpIdentityVerifier
from checkout.identity.port import (
    IdentityServiceUnavailable,
    InvalidCredential,
    Principal,
    Unauthenticated,
)
from checkout.pricing.fake_adapter import FakeCatalog
from checkout.pricing.http_adapter import HttpCatalogPricing
from checkout.pricing.port import CatalogUnavailable, ProductNotFound

PRINCIPAL = Principal(subject_id="user-001", authorization="Bearer token-001")


def _transport(handler):
    return httpx.MockTransport(handler)


def _timeout(request):
    raise httpx.ReadTimeout("timed out", request=request)


# ---------------------------------------------------------------------------
# Cart store
# ---------------------------------------------------------------------------
class TestFakeCartStore:
    def test_missing_cart_is_empty(self):
        assert FakeCartStore().get_cart(PRINCIPAL) == []

    def test_clear_is_idempotent(self):
        store = FakeCartStore()
        store.put("user-001", [("1", 1)])
        store.clear_cart(PRINCIPAL)
        store.clear_cart(PRINCIPAL)
        assert store.lines_for("user-001") == []

    def test_configured_failures(self):
        store = FakeCartStore()
        store.configure(fail_reads=True, failure_reason="down")
        with pytest.raises(CartStoreUnavailable, match="down"):
            store.get_cart(PRINCIPAL)


class TestHttpCartGateway:
    def test_reads_cart_with_forwarded_authorization(self):
        seen = {}

        def handler(request):
            seen["authorization"] = request.headers.get("Authorization")
            seen["path"] = request.url.path
            return httpx.Response(200, json={"items": [{"product_id": 1, "quantity": 2}]})

        gateway = HttpCartGateway("http://carts.test/", transport=_transport(handler))

        assert gateway.get_cart(PRINCIPAL) == [CartLine("1", 2)]
        assert seen == {"authorization": "Bearer token-001", "path": "/cart"}

    def test_missing_cart_is_empty(self):
        gateway = HttpCartGateway("http://carts.test", transport=_transport(lambda request: httpx.Response(404)))
        assert gateway.get_cart(PRINCIPAL) == []

    def test_empty_items(self):
        gateway = HttpCartGateway(
            "http://carts.test",
            transport=_transport(lambda request: httpx.Response(200, json={"items": []})),
        )
        assert gateway.get_cart(PRINCIPAL) == []

    def test_timeout(self):
        gateway = HttpCartGateway("http://carts.test", transport=_transport(_timeout))
        with pytest.raises(CartStoreUnavailable, match="timed out"):
            gateway.get_cart(PRINCIPAL)

    def test_server_error(self):
        gateway = HttpCartGateway("http://carts.test", transport=_transport(lambda request: httpx.Response(502)))
        with pytest.raises(CartStoreUnavailable):
            gateway.get_cart(PRINCIPAL)

    def test_malformed_payload(self):
        gateway = HttpCartGateway(
            "http://carts.test",
            transport=_transport(lambda request: httpx.Response(200, json={"items": [{"quantity": 1}]})),
        )
        with pytest.raises(CartStoreUnavailable, match="Malformed"):
            gateway.get_cart(PRINCIPAL)

    def test_invalid_quantity_is_malformed(self):
        gateway = HttpCartGateway(
            "http://carts.test",
            transport=_transport(
                lambda request: httpx.Response(200, json={"items": [{"product_id": "1", "quantity": 0}]})
            ),
        )
        with pytest.raises(CartStoreUnavailable):
            gateway.get_cart(PRINCIPAL)

    @pytest.mark.parametrize("status_code", [200, 204, 404])
    def test_clear_accepts_success_and_missing(self, status_code):
        methods = []

        def handler(request):
            methods.append(request.method)
            return httpx.Response(status_code)

        HttpCartGateway("http://carts.test", transport=_transport(handler)).clear_cart(PRINCIPAL)
        assert methods == ["DELETE"]

    def test_clear_failure(self):
        gateway = HttpCartGateway("http://carts.test", transport=_transport(lambda request: httpx.Response(500)))
        with pytest.raises(CartStoreUnavailable):
            gateway.clear_cart(PRINCIPAL)


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------
class TestFakeCatalog:
    def test_prices_are_decimal(self):
        assert FakeCatalog({"1": "19.99"}).price_of("1") == Decimal("19.99")

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            FakeCatalog().price_of("99")

    def test_no_caching(self):
        catalog = FakeCatalog({"1": "19.99"})
        catalog.price_of("1")
        catalog.set_price("1", "21.00")
        assert catalog.price_of("1") == Decimal("21.00")


class TestHttpCatalogPricing:
    def test_price_is_parsed_as_decimal(self):
        def handler(request):
            assert request.url.path == "/products/1"
            return httpx.Response(200, json={"id": "1", "price": "19.99"})

        price = HttpCatalogPricing("http://catalog.test", transport=_transport(handler)).price_of("1")
        assert price == Decimal("19.99")
        assert isinstance(price, Decimal)

    def test_numeric_price_keeps_exact_value(self):
        pricing = HttpCatalogPricing(
            "http://catalog.test",
            transport=_transport(
                lambda request: httpx.Response(200, content=b'{"id": "8", "price": 0.1}')
            ),
        )
        assert pricing.price_of("8") == Decimal("0.1")

    def test_unknown_product(self):
        pricing = HttpCatalogPricing(
            "http://catalog.test",
            transport=_transport(lambda request: httpx.Response(404)),
        )
        with pytest.raises(ProductNotFound):
            pricing.price_of("99")

    def test_retired_product(self):
        pricing = HttpCatalogPricing(
            "http://catalog.test",
            transport=_transport(
                lambda request: httpx.Response(200, json={"id": "7", "price": "5.00", "retired": True})
            ),
        )
        with pytest.raises(ProductNotFound):
            pricing.price_of("7")

    def test_timeout(self):
        pricing = HttpCatalogPricing("http://catalog.test", transport=_transport(_timeout))
        with pytest.raises(CatalogUnavailable):
            pricing.price_of("1")

    def test_negative_price_is_rejected(self):
        pricing = HttpCatalogPricing(
            "http://catalog.test",
            transport=_transport(lambda request: httpx.Response(200, json={"id": "1", "price": "-1"})),
        )
        with pytest.raises(CatalogUnavailable):
            pricing.price_of("1")

    def test_missing_price(self):
        pricing = HttpCatalogPricing(
            "http://catalog.test",
            transport=_transport(lambda request: httpx.Response(200, json={"id": "1"})),
        )
        with pytest.raises(CatalogUnavailable):
            pricing.price_of("1")


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
class TestFakeIdentityVerifier:
    def test_known_token(self):
        verifier = FakeIdentityVerifier({"token-001": "user-001"})
        principal = verifier.verify("Bearer token-001")
        assert principal.subject_id == "user-001"
        assert principal.authorization == "Bearer token-001"

    def test_unknown_token(self):
        with pytest.raises(InvalidCredential):
            FakeIdentityVerifier().verify("Bearer nope")

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "token-001"])
    def test_missing_or_malformed_header(self, header):
        with pytest.raises(Unauthenticated):
            FakeIdentityVerifier({"token-001": "user-001"}).verify(header)


class TestHttpIdentityVerifier:
    def test_resolves_subject(self):
        def handler(request):
            assert request.url.path == "/auth/me"
            assert request.headers["Authorization"] == "Bearer token-001"
            return httpx.Response(200, json={"id": 42, "email": "jane@example.com"})

        principal = HttpIdentityVerifier("http://identity.test", transport=_transport(handler)).verify(
            "Bearer token-001"
        )
        assert principal.subject_id == "42"

    def test_rejected_token(self):
        verifier = HttpIdentityVerifier(
            "http://identity.test",
            transport=_transport(lambda request: httpx.Response(401)),
        )
        with pytest.raises(InvalidCredential):
            verifier.verify("Bearer token-001")

    def test_service_down(self):
        verifier = HttpIdentityVerifier("http://identity.test", transport=_transport(_timeout))
        with pytest.raises(IdentityServiceUnavailable):
            verifier.verify("Bearer token-001")

    @pytest.mark.parametrize(
        "reply",
        [
            httpx.Response(200, content=b"<html>maintenance</html>"),
            httpx.Response(200, json=["not", "an", "object"]),
        ],
    )
    def test_malformed_profile_is_service_unavailable(self, reply):
        verifier = HttpIdentityVerifier("http://identity.test", transport=_transport(lambda request: reply))
        with pytest.raises(IdentityServiceUnavailable, match="Malformed"):
            verifier.verify("Bearer token-001")

    def test_missing_header_skips_service(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"id": "1"})

        with pytest.raises(Unauthenticated):
            HttpIdentityVerifier("http://identity.test", transport=_transport(handler)).verify(None)
        assert calls == []


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
class TestFactories:
    def test_cart_gateway_override_and_reset(self):
        store = FakeCartStore()
        cart_factory.set_cart_gateway(store)
        try:
            assert cart_factory.get_cart_gateway() is store
        finally:
            cart_factory.reset_cart_gateway()
        assert cart_factory.get_cart_gateway() is not store

    def test_pricing_override_and_reset(self):
        catalog = FakeCatalog()
        pricing_factory.set_pricing(catalog)
        try:
            assert pricing_factory.get_pricing() is catalog
        finally:
            pricing_factory.reset_pricing()
        assert pricing_factory.get_pricing() is not catalog

    def test_verifier_override_and_reset(self):
        verifier = FakeIdentityVerifier()
        identity_factory.set_verifier(verifier)
        try:
            assert identity_factory.get_verifier() is verifier
        finally:
            identity_factory.reset_verifier()
        assert identity_factory.get_verifier() is not verifier

    def test_default_adapters_without_service_urls(self):
        cart_factory.reset_cart_gateway()
        pricing_factory.reset_pricing()
        try:
            if cart_factory.settings.cart_service_url is None:
                assert isinstance(cart_factory.get_cart_gateway(), FakeCartStore)
            if pricing_factory.settings.catalog_service_url is None:
                assert isinstance(pricing_factory.get_pricing(), FakeCatalog)
        finally:
            cart_factory.reset_cart_gateway()
            pricing_factory.reset_pricing()
