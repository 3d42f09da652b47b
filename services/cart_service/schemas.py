from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CartItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartItemUpdate(BaseModel):
    # Anything below 1 removes the line
    quantity: int


class CartLineResponse(BaseModel):
    product_id: int
    quantity: int
    unit_price: float = Field(alias="price")
    name: str
    image: Optional[str] = None
    added_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartResponse(BaseModel):
    items: list[CartLineResponse] = []
    total: float = 0
    item_count: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartEnvelope(BaseModel):
    cart: CartResponse
