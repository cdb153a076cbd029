"""Order placement command and handler.

The handler runs inside a unit of work: the Order row and every OrderItem row
are committed together, or the unit of work is rolled back and none of them
exist.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    checkout_attempt_id = Identifier(required=True)
    total = String(required=True, max_length=32)  # Decimal text
    lines = Text(required=True)  # JSON: list of {product_id, quantity, price_at_purchase}


@checkout.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(Order)

        existing = repo.by_checkout_attempt(command.checkout_attempt_id)
        if existing is not None:
            logger.info(
                "Order already recorded for checkout attempt",
                order_id=str(existing.id),
                checkout_attempt_id=str(command.checkout_attempt_id),
            )
            return str(existing.id)

        lines_data = json.loads(command.lines) if isinstance(command.lines, str) else command.lines
        order = Order.place(
            user_id=command.user_id,
            checkout_attempt_id=command.checkout_attempt_id,
            lines_data=lines_data,
            total=command.total,
        )
        repo.add(order)
        return str(order.id)
