"""Checkout bounded context: cart to order conversion.

Reads a customer's cart from the cart service, prices every line against the
catalogue, records the Order and its items atomically, and clears the cart
once the Order is durable.
"""

from protean.domain import Domain

from checkout.settings import settings
from checkout.utils.db import apply_database_timeouts
from checkout.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

checkout = Domain(name="checkout")

apply_database_timeouts(
    checkout,
    connect_timeout=settings.database_connect_timeout_seconds,
    statement_timeout=settings.database_statement_timeout_seconds,
)
