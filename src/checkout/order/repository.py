"""Queries over persisted orders."""

from checkout.domain import checkout
from checkout.order.order import Order


@checkout.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id) -> list:
        """Every order of a user, most recent first. The default page size does not apply."""
        return self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items

    def by_checkout_attempt(self, checkout_attempt_id):
        results = self._dao.query.filter(checkout_attempt_id=str(checkout_attempt_id)).all().items
        return results[0] if results else None
