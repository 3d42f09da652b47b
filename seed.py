"""
Demo accounts and catalog, created on startup when SEED_DEMO_DATA is set.

    Admin: admin@example.com / password123
    User:  user@example.com / password123
"""
import structlog
from sqlalchemy import func, select

from services.auth_service.repository import UserRepository
from services.auth_service.schemas import UserCreate
from services.auth_service.service import AuthService
from services.product_service.models import Product
from shared.config.database import AsyncSessionLocal
from shared.security.context import Role

logger = structlog.get_logger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    (
        Role.ADMIN,
        UserCreate(
            name="Admin User",
            email="admin@example.com",
            password=DEMO_PASSWORD,
            age=30,
            address="123 Admin Street",
            phone="123-456-7890",
        ),
    ),
    (
        Role.USER,
        UserCreate(
            name="Regular User",
            email="user@example.com",
            password=DEMO_PASSWORD,
            age=25,
            address="456 User Avenue",
            phone="987-654-3210",
        ),
    ),
]

DEMO_PRODUCTS = [
    {
        "name": "Wireless Bluetooth Earbuds",
        "description": "High-quality wireless earbuds with noise cancellation",
        "price": 49.99,
        "category": "Electronics",
        "stock": 50,
        "image": "https://via.placeholder.com/300x200?text=Wireless+Earbuds",
    },
    {
        "name": "Cotton T-Shirt",
        "description": "Comfortable 100% cotton t-shirt",
        "price": 15.99,
        "category": "Clothing",
        "stock": 100,
        "image": "https://via.placeholder.com/300x200?text=Cotton+T-Shirt",
    },
    {
        "name": "Smart Watch",
        "description": "Feature-rich smartwatch with heart rate monitoring",
        "price": 99.99,
        "category": "Electronics",
        "stock": 25,
        "image": "https://via.placeholder.com/300x200?text=Smart+Watch",
    },
    {
        "name": "Running Shoes",
        "description": "Lightweight running shoes with cushioning",
        "price": 79.99,
        "category": "Sports",
        "stock": 40,
        "image": "https://via.placeholder.com/300x200?text=Running+Shoes",
    },
]


async def seed_demo_data(session_factory=AsyncSessionLocal) -> None:
    async with session_factory() as db:
        for role, data in DEMO_USERS:
            if await UserRepository.email_registered(db, data.email):
                continue
            await AuthService.register(db, data, role=role)

        product_count = await db.scalar(select(func.count()).select_from(Product))
        if not product_count:
            db.add_all(Product(**fields, rating=0, reviews=[]) for fields in DEMO_PRODUCTS)
            await db.commit()

    logger.info("demo_data_ready", users=len(DEMO_USERS), products=len(DEMO_PRODUCTS))
