"""FastAPI routes for checkout and order history.

Routes are plain ``def`` functions: a checkout blocks on the cart service,
the catalogue and the database, and the per-subject guard may wait, so each
request runs on the threadpool instead of the event loop. Routes that touch
aggregates push the domain context themselves for the same reason.
"""

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.exceptions import ObjectNotFoundError

from checkout.api.schemas import CheckoutResponse, ErrorResponse, OrderListResponse, OrderSchema
from checkout.domain import checkout
from checkout.identity import get_verifier
from checkout.identity.port import Principal
from checkout.orchestration import get_orchestrator
from checkout.orchestration.orchestrator import CheckoutOrchestrator


def current_principal(authorization: str | None = Header(default=None)) -> Principal:
    return get_verifier().verify(authorization)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post(
    "",
    status_code=201,
    response_model=CheckoutResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def checkout_cart(
    principal: Principal = Depends(current_principal),
    orchestrator: CheckoutOrchestrator = Depends(get_orchestrator),
) -> CheckoutResponse:
    """Convert the caller's cart into an order."""
    result = orchestrator.checkout(principal)
    return CheckoutResponse.from_result(result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
def list_orders(
    principal: Principal = Depends(current_principal),
    orchestrator: CheckoutOrchestrator = Depends(get_orchestrator),
) -> OrderListResponse:
    with checkout.domain_context():
        orders = orchestrator.list_orders(principal)
        return OrderListResponse(orders=[OrderSchema.from_order(order) for order in orders])


@order_router.get("/{order_id}", response_model=OrderSchema)
def get_order(
    order_id: str,
    principal: Principal = Depends(current_principal),
    orchestrator: CheckoutOrchestrator = Depends(get_orchestrator),
) -> OrderSchema:
    with checkout.domain_context():
        try:
            order = orchestrator.get_order(principal, order_id)
        except ObjectNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Order not found") from exc
        return OrderSchema.from_order(order)
