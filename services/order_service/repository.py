from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Order


class OrderRepository:
    """Orders are append-only: there is no update or delete here."""

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_idempotency_key(db: AsyncSession, user_id: int, key: str) -> Optional[Order]:
        result = await db.execute(
            select(Order).where(Order.user_id == user_id, Order.idempotency_key == key)
        )
        return result.scalars().first()

    @staticmethod
    async def list_orders(db: AsyncSession, user_id: Optional[int] = None) -> list[Order]:
        stmt = select(Order)
        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        result = await db.execute(stmt.order_by(Order.created_at.desc(), Order.id.desc()))
        return list(result.scalars().all())
