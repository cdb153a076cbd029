"""Pydantic response schemas for the checkout API.

These are external contracts, separate from the Protean aggregates they are
built from.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class CartWarningSchema(BaseModel):
    code: str
    order_id: str
    detail: str


class CheckoutResponse(BaseModel):
    order_id: str
    total: Decimal
    warning: CartWarningSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "0b9c3f1e-6f0a-4d0c-9d55-0f7d9a3e2a11",
                    "total": "39.98",
                    "warning": None,
                }
            ]
        }
    }

    @classmethod
    def from_result(cls, result) -> "CheckoutResponse":
        warning = None
        if result.warning is not None:
            warning = CartWarningSchema(
                code=result.warning.code,
                order_id=result.warning.order_id,
                detail=str(result.warning),
            )
        return cls(order_id=result.order_id, total=result.total, warning=warning)


class OrderItemSchema(BaseModel):
    product_id: str
    quantity: int
    price_at_purchase: Decimal


class OrderSchema(BaseModel):
    order_id: str
    total: Decimal
    created_at: datetime
    items: list[OrderItemSchema]

    @classmethod
    def from_order(cls, order) -> "OrderSchema":
        return cls(
            order_id=str(order.id),
            total=order.total_amount,
            created_at=order.created_at,
            items=[
                OrderItemSchema(
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    price_at_purchase=item.unit_price,
                )
                for item in order.items
            ],
        )


class OrderListResponse(BaseModel):
    orders: list[OrderSchema]


class ErrorResponse(BaseModel):
    error: str
    detail: str
    committed: bool | None = None
