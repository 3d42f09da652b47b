import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "0"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from main import app
from services.auth_service.schemas import UserCreate
from services.auth_service.service import AuthService
from services.product_service.schemas import ProductCreate
from services.product_service.service import ProductService
from shared.config.database import Base, get_db
from shared.security import Role, SessionContext, create_access_token

PASSWORD = "secret123"


@pytest_asyncio.fixture
async def engine(tmp_path):
    # A file database so concurrent sessions really use separate connections
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_user(db_session):
    async def _make(email="alice@example.com", role=Role.USER, address="1 Main Street", name="Alice"):
        data = UserCreate(name=name, email=email, password=PASSWORD, age=30, address=address, phone="555-0100")
        return await AuthService.register(db_session, data, role=role)

    return _make


@pytest_asyncio.fixture
async def make_product(db_session):
    async def _make(name="Widget", price=10.0, stock=5, category="Gadgets", description=None):
        data = ProductCreate(name=name, price=price, stock=stock, category=category, description=description)
        return await ProductService.create_product(db_session, data)

    return _make


def ctx_for(user) -> SessionContext:
    return SessionContext(user_id=user.id, role=user.role)


def auth_headers(user) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}
