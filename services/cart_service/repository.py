from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.models import User


class CartRepository:
    """Reads and writes the cart embedded in the user aggregate."""

    @staticmethod
    async def get_owner(db: AsyncSession, user_id: int) -> Optional[User]:
        # Always re-read from the database, never from the identity map
        result = await db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def save_cart(db: AsyncSession, user: User, lines: list[dict]) -> User:
        """Replaces the whole line list; the flush checks and bumps cart_version."""
        user.cart = lines
        db.add(user)
        await db.commit()
        return user
