"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into a durable order at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    checkout_attempt_id = Identifier(required=True)
    total = String(required=True, max_length=32)  # Decimal text
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)
