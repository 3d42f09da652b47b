from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import SessionContext, get_current_user

from .schemas import CheckoutRequest, OrderEnvelope, OrderListResponse, OrderResponse
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderEnvelope)
async def checkout(
    payload: Optional[CheckoutRequest] = None,
    idempotency_key: Optional[str] = Header(default=None, max_length=255),
    ctx: SessionContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.checkout(
        db, ctx, payload or CheckoutRequest(), idempotency_key=idempotency_key
    )
    return OrderEnvelope(order=OrderResponse.model_validate(order))


@router.get("", response_model=OrderListResponse)
async def list_orders(
    ctx: SessionContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    orders = await OrderService.list_orders(db, ctx)
    return OrderListResponse(orders=[OrderResponse.model_validate(o) for o in orders])


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    ctx: SessionContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.get_order(db, ctx, order_id)
