from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import User


class UserRepository:
    """Identity store lookups. Emails are compared in their normalized form."""

    @staticmethod
    async def add_user(db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def email_registered(db: AsyncSession, email: str) -> bool:
        result = await db.execute(select(exists().where(User.email == email)))
        return bool(result.scalar())

    @staticmethod
    async def find_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
