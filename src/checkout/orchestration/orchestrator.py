"""Checkout orchestration: turns a subject's cart into a durable order.

Flow:
    1. FetchCart: read the cart snapshot. Empty → EmptyCartError.
    2. ResolvePrices: price every line against the catalogue. Any miss →
       PriceResolutionError.
    3. PersistOrder: record the Order and its items in one unit of work. A
       failed or unacknowledged write is checked against the ledger before it
       is reported, so a committed order is never reported as a failure.
    4. ClearCart: only after the commit. Failures do not undo the purchase;
       they come back as a CartClearWarning next to the result.

Steps 1-3 have no side effects when they fail, so nothing is compensated.
"""

from concurrent.futures import ThreadPoolExecutor

import structlog

from checkout.cart.port import CartGateway, CartStoreUnavailable
from checkout.identity.port import Principal
from checkout.order.ledger import OrderLedger
from checkout.orchestration.attempt import (
    CheckoutAttempt,
    CheckoutResult,
    CheckoutStage,
    ResolvedLine,
)
from checkout.orchestration.errors import (
    CartClearWarning,
    CheckoutError,
    EmptyCartError,
    PersistenceError,
    PriceResolutionError,
    UpstreamUnavailableError,
)
from checkout.orchestration.guard import CheckoutGuard
from checkout.pricing.port import CatalogUnavailable, PricingResolver, ProductNotFound
from checkout.utils.logging import bind_context, unbind_context

logger = structlog.get_logger(__name__)


class CheckoutOrchestrator:
    def __init__(
        self,
        carts: CartGateway,
        pricing: PricingResolver,
        ledger: OrderLedger,
        guard: CheckoutGuard | None = None,
        cart_clear_attempts: int = 2,
        price_lookup_workers: int = 4,
    ) -> None:
        if cart_clear_attempts < 1:
            raise ValueError("cart_clear_attempts must be at least 1")
        if price_lookup_workers < 1:
            raise ValueError("price_lookup_workers must be at least 1")

        self.carts = carts
        self.pricing = pricing
        self.ledger = ledger
        self.guard = guard or CheckoutGuard()
        self.cart_clear_attempts = cart_clear_attempts
        self.price_lookup_workers = price_lookup_workers

    # -------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------
    def checkout(self, principal: Principal) -> CheckoutResult:
        """Convert the principal's cart into an order."""
        return self.guard.run(principal.subject_id, lambda: self._run_attempt(CheckoutAttempt(principal)))

    def list_orders(self, principal: Principal) -> list:
        """The principal's order history, newest first."""
        return self.ledger.list_orders(principal.subject_id)

    def get_order(self, principal: Principal, order_id: str):
        return self.ledger.get_order(principal.subject_id, order_id)

    # -------------------------------------------------------------------
    # Attempt driver
    # -------------------------------------------------------------------
    def _run_attempt(self, attempt: CheckoutAttempt) -> CheckoutResult:
        bind_context(checkout_attempt_id=attempt.attempt_id, subject_id=attempt.subject_id)
        try:
            try:
                self._fetch_cart(attempt)
                self._resolve_prices(attempt)
                self._persist_order(attempt)
            except CheckoutError as exc:
                attempt.advance(CheckoutStage.FAILED)
                logger.info("Checkout failed", error=exc.code, committed=exc.committed)
                raise

            warning = self._clear_cart(attempt)
            attempt.advance(CheckoutStage.COMPLETED)
            logger.info(
                "Checkout completed",
                order_id=attempt.order_id,
                total=str(attempt.total),
                cart_cleared=warning is None,
            )
            return CheckoutResult(order_id=attempt.order_id, total=attempt.total, warning=warning)
        finally:
            unbind_context("checkout_attempt_id", "subject_id")

    # -------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------
    def _fetch_cart(self, attempt: CheckoutAttempt) -> None:
        attempt.advance(CheckoutStage.FETCH_CART)
        try:
            lines = self.carts.get_cart(attempt.principal)
        except CartStoreUnavailable as exc:
            raise UpstreamUnavailableError(
                f"Cart store unavailable: {exc}",
                stage=CheckoutStage.FETCH_CART.value,
                subject_id=attempt.subject_id,
            ) from exc

        if not lines:
            raise EmptyCartError(f"Cart of {attempt.subject_id} is empty", subject_id=attempt.subject_id)

        attempt.record_cart(lines)
        logger.debug("Cart fetched", line_count=len(attempt.cart))

    def _resolve_prices(self, attempt: CheckoutAttempt) -> None:
        attempt.advance(CheckoutStage.RESOLVE_PRICES)

        def lookup(line):
            return self.pricing.price_of(line.product_id)

        workers = min(self.price_lookup_workers, len(attempt.cart))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="price-lookup") as pool:
            futures = [(line, pool.submit(lookup, line)) for line in attempt.cart]

        resolved = []
        unresolved = []
        first_failure = None
        catalogue_down = False
        for line, future in futures:
            exc = future.exception()
            if exc is None:
                resolved.append(ResolvedLine(line.product_id, line.quantity, future.result()))
                continue
            if not isinstance(exc, (ProductNotFound, CatalogUnavailable)):
                logger.error("Price lookup raised unexpectedly", product_id=line.product_id, error=repr(exc))
            unresolved.append(line.product_id)
            catalogue_down = catalogue_down or not isinstance(exc, ProductNotFound)
            first_failure = first_failure or exc

        if unresolved:
            reason = "catalogue unavailable" if catalogue_down else "not found"
            raise PriceResolutionError(
                f"Could not price products {', '.join(unresolved)} ({reason})",
                unresolved=tuple(unresolved),
                subject_id=attempt.subject_id,
            ) from first_failure

        attempt.record_prices(resolved)
        logger.debug("Prices resolved", total=str(attempt.total))

    def _persist_order(self, attempt: CheckoutAttempt) -> None:
        attempt.advance(CheckoutStage.PERSIST_ORDER)
        try:
            order_id = self.ledger.create_order(
                user_id=attempt.subject_id,
                lines=attempt.lines,
                total=attempt.total,
                checkout_attempt_id=attempt.attempt_id,
            )
        except Exception as exc:
            order_id = self._recover_order_id(attempt, exc)

        attempt.record_order(order_id)

    def _recover_order_id(self, attempt: CheckoutAttempt, failure: Exception) -> str:
        """Decide whether a failed or unacknowledged write actually committed."""
        try:
            order = self.ledger.find_by_attempt(attempt.attempt_id)
        except Exception as exc:
            logger.error(
                "Order write failed and the ledger could not be re-checked",
                write_error=str(failure),
                recheck_error=str(exc),
            )
            raise PersistenceError(
                f"Order write outcome unknown: {failure}",
                subject_id=attempt.subject_id,
                committed=None,
            ) from failure

        if order is None:
            logger.error("Order write failed, nothing committed", write_error=str(failure))
            raise PersistenceError(
                f"Order could not be recorded: {failure}",
                subject_id=attempt.subject_id,
                committed=False,
            ) from failure

        logger.warning(
            "Order write reported a failure but the order is committed",
            order_id=str(order.id),
            write_error=str(failure),
        )
        return str(order.id)

    def _clear_cart(self, attempt: CheckoutAttempt) -> CartClearWarning | None:
        attempt.advance(CheckoutStage.CLEAR_CART)

        failure = None
        for attempt_number in range(1, self.cart_clear_attempts + 1):
            try:
                self.carts.clear_cart(attempt.principal)
                return None
            except Exception as exc:
                failure = exc
                logger.info("Cart clear failed", attempt_number=attempt_number, error=str(exc))

        warning = CartClearWarning(order_id=attempt.order_id, subject_id=attempt.subject_id, reason=str(failure))
        logger.warning(
            "Order committed but cart was not cleared; reconcile manually",
            order_id=attempt.order_id,
            reason=str(failure),
        )
        return warning

