"""Order ledger: the write and read boundary around persisted orders."""

import json
from collections.abc import Iterable

from protean.domain import Domain
from protean.exceptions import ObjectNotFoundError

from checkout.domain import checkout
from checkout.order.order import Order
from checkout.order.placement import PlaceOrder


class OrderLedger:
    """Records orders atomically and answers history queries.

    Every call pushes its own domain context, so the ledger can be used from
    worker threads that did not inherit one.
    """

    def __init__(self, domain: Domain = checkout) -> None:
        self._domain = domain

    def create_order(self, user_id: str, lines: Iterable, total, checkout_attempt_id: str) -> str:
        """Persist an order with its items as one unit and return its id.

        ``lines`` are priced lines exposing product_id, quantity and unit_price.
        Submitting the same ``checkout_attempt_id`` twice returns the order that
        is already recorded instead of creating a second one.
        """
        payload = [
            {
                "product_id": str(line.product_id),
                "quantity": line.quantity,
                "price_at_purchase": str(line.unit_price),
            }
            for line in lines
        ]
        command = PlaceOrder(
            user_id=str(user_id),
            checkout_attempt_id=str(checkout_attempt_id),
            total=str(total),
            lines=json.dumps(payload),
        )
        with self._domain.domain_context():
            return self._domain.process(command, asynchronous=False)

    def list_orders(self, user_id: str) -> list[Order]:
        with self._domain.domain_context():
            orders = list(self._domain.repository_for(Order).for_user(user_id))
            for order in orders:
                list(order.items)
            return orders

    def find_by_attempt(self, checkout_attempt_id: str) -> Order | None:
        with self._domain.domain_context():
            return self._domain.repository_for(Order).by_checkout_attempt(checkout_attempt_id)

    def get_order(self, user_id: str, order_id: str) -> Order:
        """Fetch one of the user's orders. Orders of other users are reported as missing."""
        with self._domain.domain_context():
            order = self._domain.repository_for(Order).get(order_id)
            if str(order.user_id) != str(user_id):
                raise ObjectNotFoundError({"_entity": f"Order with id `{order_id}` does not exist."})
            list(order.items)
            return order
