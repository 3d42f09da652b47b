from sqlalchemy import JSON, Column, DateTime, Enum, Integer, String
from sqlalchemy.sql import func

from shared.config.database import Base
from shared.security.context import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    age = Column(Integer, nullable=True)
    role = Column(
        Enum(Role, native_enum=False, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
    )
    address = Column(String(500), nullable=True)
    phone = Column(String(50), nullable=True)
    # Embedded cart: list of line dicts, rewritten whole on every mutation
    cart = Column(JSON, nullable=False, default=list)
    cart_version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Every write of the aggregate checks and bumps cart_version
    __mapper_args__ = {"version_id_col": cart_version}
