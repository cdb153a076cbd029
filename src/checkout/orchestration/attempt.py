"""One checkout attempt and the stages it moves through.

State Machine:
    STARTED → FETCH_CART → RESOLVE_PRICES → PERSIST_ORDER → CLEAR_CART → COMPLETED
    STARTED, FETCH_CART, RESOLVE_PRICES, PERSIST_ORDER → FAILED

Every stage before CLEAR_CART is free of side effects unless PERSIST_ORDER
commits, so FAILED never needs compensation.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from protean.exceptions import InvalidOperationError

from checkout.cart.port import CartLine
from checkout.identity.port import Principal


class CheckoutStage(Enum):
    STARTED = "started"
    FETCH_CART = "fetch_cart"
    RESOLVE_PRICES = "resolve_prices"
    PERSIST_ORDER = "persist_order"
    CLEAR_CART = "clear_cart"
    COMPLETED = "completed"
    FAILED = "failed"


_VALID_TRANSITIONS = {
    CheckoutStage.STARTED: {CheckoutStage.FETCH_CART, CheckoutStage.FAILED},
    CheckoutStage.FETCH_CART: {CheckoutStage.RESOLVE_PRICES, CheckoutStage.FAILED},
    CheckoutStage.RESOLVE_PRICES: {CheckoutStage.PERSIST_ORDER, CheckoutStage.FAILED},
    CheckoutStage.PERSIST_ORDER: {CheckoutStage.CLEAR_CART, CheckoutStage.FAILED},
    CheckoutStage.CLEAR_CART: {CheckoutStage.COMPLETED},
    CheckoutStage.COMPLETED: set(),  # Terminal
    CheckoutStage.FAILED: set(),  # Terminal
}


@dataclass(frozen=True)
class ResolvedLine:
    """A cart line with the unit price captured at checkout."""

    product_id: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass
class CheckoutAttempt:
    principal: Principal
    attempt_id: str = field(default_factory=lambda: str(uuid4()))
    stage: CheckoutStage = CheckoutStage.STARTED
    cart: tuple[CartLine, ...] = ()
    lines: tuple[ResolvedLine, ...] = ()
    total: Decimal | None = None
    order_id: str | None = None

    @property
    def subject_id(self) -> str:
        return self.principal.subject_id

    def advance(self, target: CheckoutStage) -> None:
        if target not in _VALID_TRANSITIONS[self.stage]:
            raise InvalidOperationError(
                {"stage": [f"Cannot move checkout from {self.stage.value} to {target.value}"]}
            )
        self.stage = target

    def record_cart(self, lines) -> None:
        self.cart = tuple(lines)

    def record_prices(self, lines) -> None:
        self.lines = tuple(lines)
        self.total = sum((line.line_total for line in self.lines), Decimal("0"))

    def record_order(self, order_id: str) -> None:
        self.order_id = order_id


@dataclass(frozen=True)
class CheckoutResult:
    order_id: str
    total: Decimal
    warning: Warning | None = None
