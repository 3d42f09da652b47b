from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import SessionContext, get_current_user

from .schemas import CartEnvelope, CartItemCreate, CartItemUpdate, CartResponse
from .service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartResponse)
async def get_cart(
    ctx: SessionContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CartService.get_cart(db, ctx)


@router.post("", response_model=CartEnvelope)
async def add_item(
    item: CartItemCreate,
    ctx: SessionContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await CartService.add_item(db, ctx, item.product_id, item.quantity)
    return CartEnvelope(cart=cart)


@router.put("/{product_id}", response_model=CartEnvelope)
async def update_item(
    product_id: int,
    item: CartItemUpdate,
    ctx: SessionContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await CartService.update_item(db, ctx, product_id, item.quantity)
    return CartEnvelope(cart=cart)


@router.delete("/{product_id}", response_model=CartEnvelope)
async def remove_item(
    product_id: int,
    ctx: SessionContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await CartService.remove_item(db, ctx, product_id)
    return CartEnvelope(cart=cart)
