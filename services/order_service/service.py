"""
Order Engine: turns a user's cart into an immutable order.

Checkout runs in one transaction. Every line's stock is checked before any
stock is touched, and each decrement is a conditional update, so a lost race
aborts the whole checkout instead of overselling.
"""
import time
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from services.auth_service.models import User
from services.cart_service.repository import CartRepository
from services.cart_service.service import CartService
from services.product_service.repository import ProductRepository
from shared.errors import (
    ConcurrentModification,
    EmptyCart,
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
    StorefrontError,
    UserNotFound,
    ValidationError,
)
from shared.observability.metrics import (
    storefront_checkout_duration_seconds,
    storefront_checkout_total,
)
from shared.security import Role, SessionContext, entity_locks, product_key, require_role, user_key

from .models import Order, OrderStatus
from .repository import OrderRepository
from .schemas import DEFAULT_PAYMENT_METHOD, CheckoutRequest

logger = structlog.get_logger(__name__)


class OrderService:

    @staticmethod
    async def checkout(
        db: AsyncSession,
        ctx: SessionContext,
        data: CheckoutRequest,
        idempotency_key: Optional[str] = None,
    ) -> Order:
        require_role(ctx, Role.USER)
        key = idempotency_key or data.idempotency_key
        started = time.perf_counter()

        try:
            async with entity_locks.hold(user_key(ctx.user_id)):
                if key:
                    existing = await OrderRepository.get_by_idempotency_key(db, ctx.user_id, key)
                    if existing:
                        logger.info("checkout_replayed", user_id=ctx.user_id, order_id=existing.id)
                        return existing

                user = await CartRepository.get_owner(db, ctx.user_id)
                if not user:
                    raise UserNotFound()
                lines = [dict(line) for line in user.cart or []]
                if not lines:
                    raise EmptyCart()

                product_ids = sorted({line["product_id"] for line in lines})
                async with entity_locks.hold(*(product_key(pid) for pid in product_ids)):
                    order = await OrderService._place_order(db, user, lines, data, key)
        except StorefrontError as exc:
            storefront_checkout_total.labels(status="failed").inc()
            logger.info("checkout_failed", user_id=ctx.user_id, error=type(exc).__name__)
            raise

        storefront_checkout_total.labels(status="success").inc()
        storefront_checkout_duration_seconds.observe(time.perf_counter() - started)
        logger.info(
            "checkout_succeeded",
            user_id=ctx.user_id,
            order_id=order.id,
            total_amount=order.total_amount,
        )
        return order

    @staticmethod
    async def _place_order(
        db: AsyncSession,
        user: User,
        lines: list[dict],
        data: CheckoutRequest,
        key: Optional[str],
    ) -> Order:
        shipping_address = data.shipping_address or user.address
        if not shipping_address:
            raise ValidationError("Shipping address is required")

        try:
            # 1. Check every line before touching any stock
            products = await ProductRepository.get_products_by_ids(
                db, [line["product_id"] for line in lines]
            )
            for line in lines:
                product = products.get(line["product_id"])
                if not product:
                    raise ProductNotFound(f"{line['name']} is no longer available")
                if product.stock < line["quantity"]:
                    raise InsufficientStock(f"Insufficient stock for {product.name}")

            # 2. Conditional decrements guard against writers outside this process
            for line in lines:
                if not await ProductRepository.reduce_stock_if_available(
                    db, line["product_id"], line["quantity"]
                ):
                    raise InsufficientStock(f"Insufficient stock for {line['name']}")

            # 3. Record the order and clear the cart in the same transaction
            cart = CartService.summarize(lines)
            order = Order(
                user_id=user.id,
                lines=[
                    {
                        "product_id": line["product_id"],
                        "quantity": line["quantity"],
                        "price": line["unit_price"],
                    }
                    for line in lines
                ],
                total_amount=cart.total,
                status=OrderStatus.PENDING,
                shipping_address=shipping_address,
                payment_method=data.payment_method or DEFAULT_PAYMENT_METHOD,
                idempotency_key=key,
            )
            db.add(order)
            user.cart = []
            await db.commit()
        except (StaleDataError, IntegrityError):
            await db.rollback()
            raise ConcurrentModification()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(order)
        return order

    @staticmethod
    async def list_orders(db: AsyncSession, ctx: SessionContext) -> list[Order]:
        if ctx.is_admin:
            return await OrderRepository.list_orders(db)
        return await OrderRepository.list_orders(db, user_id=ctx.user_id)

    @staticmethod
    async def get_order(db: AsyncSession, ctx: SessionContext, order_id: int) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        # Someone else's order is reported exactly like a missing one
        if not order or (not ctx.is_admin and order.user_id != ctx.user_id):
            raise OrderNotFound()
        return order
