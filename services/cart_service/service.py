"""
Cart Engine: mutations of the cart embedded in a user record.

Lines are stored as plain dicts ``{product_id, quantity, unit_price, name,
image, added_at}``; ``total`` and ``item_count`` are derived on every read
and never stored.
"""
from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from services.auth_service.models import User
from services.product_service.repository import ProductRepository
from shared.errors import (
    ConcurrentModification,
    LineNotFound,
    OutOfStock,
    ProductNotFound,
    UserNotFound,
    ValidationError,
)
from shared.observability.metrics import storefront_cart_mutations_total
from shared.security import Role, SessionContext, entity_locks, require_role, user_key

from .repository import CartRepository
from .schemas import CartResponse

logger = structlog.get_logger(__name__)


def _find_line(lines: list[dict], product_id: int) -> Optional[dict]:
    return next((line for line in lines if line["product_id"] == product_id), None)


class CartService:

    @staticmethod
    def summarize(lines: list[dict]) -> CartResponse:
        total = sum(line["unit_price"] * line["quantity"] for line in lines)
        item_count = sum(line["quantity"] for line in lines)
        return CartResponse(items=lines, total=round(total, 2), item_count=item_count)

    @staticmethod
    async def _load_owner(db: AsyncSession, user_id: int) -> User:
        user = await CartRepository.get_owner(db, user_id)
        if not user:
            raise UserNotFound()
        return user

    @staticmethod
    async def _save(db: AsyncSession, user: User, lines: list[dict], action: str) -> CartResponse:
        # A rollback expires the owner, so read the id first
        user_id = user.id
        try:
            await CartRepository.save_cart(db, user, lines)
        except StaleDataError:
            await db.rollback()
            logger.warning("cart_conflict", user_id=user_id, action=action)
            raise ConcurrentModification()
        storefront_cart_mutations_total.labels(action=action).inc()
        cart = CartService.summarize(lines)
        logger.info(
            "cart_updated",
            user_id=user_id,
            action=action,
            item_count=cart.item_count,
            total=cart.total,
        )
        return cart

    @staticmethod
    async def get_cart(db: AsyncSession, ctx: SessionContext) -> CartResponse:
        # Admins never hold cart state
        if ctx.role is not Role.USER:
            return CartResponse()
        user = await CartService._load_owner(db, ctx.user_id)
        return CartService.summarize(list(user.cart or []))

    @staticmethod
    async def add_item(
        db: AsyncSession, ctx: SessionContext, product_id: int, quantity: int = 1
    ) -> CartResponse:
        require_role(ctx, Role.USER)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        async with entity_locks.hold(user_key(ctx.user_id)):
            user = await CartService._load_owner(db, ctx.user_id)
            product = await ProductRepository.get_product_by_id(db, product_id)
            if not product:
                raise ProductNotFound()

            lines = [dict(line) for line in user.cart or []]
            line = _find_line(lines, product_id)
            new_quantity = (line["quantity"] if line else 0) + quantity
            if new_quantity > product.stock:
                raise OutOfStock(f"Only {product.stock} of {product.name} in stock")

            if line:
                line["quantity"] = new_quantity
            else:
                lines.append({
                    "product_id": product.id,
                    "quantity": quantity,
                    "unit_price": product.price,
                    "name": product.name,
                    "image": product.image,
                    "added_at": datetime.now(timezone.utc).isoformat(),
                })
            return await CartService._save(db, user, lines, action="add")

    @staticmethod
    async def update_item(
        db: AsyncSession, ctx: SessionContext, product_id: int, quantity: int
    ) -> CartResponse:
        require_role(ctx, Role.USER)
        if quantity < 1:
            return await CartService.remove_item(db, ctx, product_id)

        async with entity_locks.hold(user_key(ctx.user_id)):
            user = await CartService._load_owner(db, ctx.user_id)
            lines = [dict(line) for line in user.cart or []]
            line = _find_line(lines, product_id)
            if not line:
                raise LineNotFound()

            product = await ProductRepository.get_product_by_id(db, product_id)
            if not product:
                raise ProductNotFound("Product is no longer available")
            if quantity > product.stock:
                raise OutOfStock(f"Only {product.stock} of {product.name} in stock")

            # The snapshot price is kept as-is
            line["quantity"] = quantity
            return await CartService._save(db, user, lines, action="update")

    @staticmethod
    async def remove_item(db: AsyncSession, ctx: SessionContext, product_id: int) -> CartResponse:
        require_role(ctx, Role.USER)

        async with entity_locks.hold(user_key(ctx.user_id)):
            user = await CartService._load_owner(db, ctx.user_id)
            lines = [dict(line) for line in user.cart or [] if line["product_id"] != product_id]
            if len(lines) == len(user.cart or []):
                # Removing an absent line is a no-op
                return CartService.summarize(lines)
            return await CartService._save(db, user, lines, action="remove")
