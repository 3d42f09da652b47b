from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import OrderStatus

DEFAULT_PAYMENT_METHOD = "credit card"


class CheckoutRequest(BaseModel):
    # The client's own copy of the cart is accepted but never trusted
    products: Optional[list[dict[str, Any]]] = None
    shipping_address: Optional[str] = Field(default=None, max_length=500)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    idempotency_key: Optional[str] = Field(default=None, min_length=1, max_length=255)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderLineResponse(BaseModel):
    product_id: int
    quantity: int
    price: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderResponse(BaseModel):
    id: int
    user_id: int
    lines: list[OrderLineResponse]
    total_amount: float
    status: OrderStatus
    shipping_address: str
    payment_method: str
    idempotency_key: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class OrderEnvelope(BaseModel):
    order: OrderResponse


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
