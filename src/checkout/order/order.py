"""Order aggregate, the durable record of a completed checkout.

An Order is written once, together with all of its items, and never changes
afterwards. Monetary amounts are stored as decimal text so that the total is
exactly the sum of ``quantity * price_at_purchase`` over the items, with no
floating point drift between what was charged and what is reported.
"""

from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from checkout.domain import checkout
from checkout.order.events import OrderPlaced


def to_amount(value) -> Decimal:
    """Parse a stored or submitted amount into a Decimal."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError({"amount": [f"Not a decimal amount: {value!r}"]}) from exc
    if not amount.is_finite():
        raise ValidationError({"amount": [f"Not a decimal amount: {value!r}"]})
    return amount


@checkout.entity(part_of="Order")
class OrderItem:
    """One purchased line. The price is frozen at the moment of checkout."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price_at_purchase = String(required=True, max_length=32)  # Decimal text

    @property
    def unit_price(self) -> Decimal:
        return to_amount(self.price_at_purchase)

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price


@checkout.aggregate
class Order:
    user_id = Identifier(required=True)
    checkout_attempt_id = Identifier(required=True)
    total = String(required=True, max_length=32)  # Decimal text
    items = HasMany(OrderItem)
    created_at = DateTime(required=True)

    @property
    def total_amount(self) -> Decimal:
        return to_amount(self.total)

    @classmethod
    def place(cls, user_id, checkout_attempt_id, lines_data, total):
        """Create an order from priced cart lines.

        Args:
            user_id: The subject the order belongs to.
            checkout_attempt_id: Identifier of the checkout attempt that produced
                the order. Used to detect a write that committed but was never
                acknowledged.
            lines_data: List of dicts with product_id, quantity, price_at_purchase.
            total: The total computed by the caller. It is checked against the
                lines, never recomputed in its place.
        """
        if not lines_data:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        items = []
        expected_total = Decimal("0")
        for line in lines_data:
            price = to_amount(line["price_at_purchase"])
            if price < 0:
                raise ValidationError({"price_at_purchase": [f"Negative price for product {line['product_id']}"]})
            items.append(
                OrderItem(
                    product_id=str(line["product_id"]),
                    quantity=line["quantity"],
                    price_at_purchase=str(price),
                )
            )
            expected_total += line["quantity"] * price

        declared_total = to_amount(total)
        if declared_total != expected_total:
            raise ValidationError(
                {"total": [f"Total {declared_total} does not match the sum of the items ({expected_total})"]}
            )

        now = datetime.now(UTC)
        order = cls(
            user_id=str(user_id),
            checkout_attempt_id=str(checkout_attempt_id),
            total=str(declared_total),
            items=items,
            created_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                checkout_attempt_id=str(checkout_attempt_id),
                total=str(declared_total),
                item_count=len(items),
                placed_at=now,
            )
        )
        return order
